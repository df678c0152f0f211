"""Adapters for the operating system: processes and HTTP."""

from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .process import (
    CommandRunner,
    MockRunner,
    ProcessError,
    ProcessOutput,
    ProcessRunner,
    run,
)

__all__ = [
    # http
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # process
    "CommandRunner",
    "MockRunner",
    "ProcessError",
    "ProcessOutput",
    "ProcessRunner",
    "run",
]
