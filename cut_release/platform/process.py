"""Subprocess execution with Result-based error handling.

Every external command cut-release runs (``npm view``, ``npm version``,
``git push``, ``npm publish``) goes through :func:`run`. Output is always
captured; a failed release step is reported with its full stdout and
stderr.

Usage:
    result = run(["git", "push", "origin"], cwd=Path("."))
    match result:
        case Ok(output):
            print(output.stdout)
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from cut_release.core.result import Err, Ok, Result

__all__ = [
    "CommandRunner",
    "MockRunner",
    "ProcessError",
    "ProcessOutput",
    "ProcessRunner",
    "run",
]


@dataclass(frozen=True, slots=True)
class ProcessOutput:
    """Captured output of a successful command."""

    stdout: str
    stderr: str


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 when the process could not be spawned,
            timed out, or exceeded the output limit.
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)

    def __str__(self) -> str:
        if self.returncode == -1:
            return f"`{self.command_line}` could not be run"
        return f"`{self.command_line}` failed (exit {self.returncode})"


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def run(
    cmd: Sequence[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
    max_output: int | None = None,
) -> Result[ProcessOutput, ProcessError]:
    """Execute a command and capture its output.

    Args:
        cmd: Command and arguments to execute (no shell involved).
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).
        max_output: Maximum size in bytes of stdout or stderr; larger
            output turns the run into a failure.

    Returns:
        Ok(ProcessOutput) on exit status 0, Err(ProcessError) otherwise.
    """
    command = tuple(cmd)
    try:
        proc = subprocess.run(
            command,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=command,
                returncode=-1,
                stdout=_as_text(e.stdout),
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=command, returncode=-1, stdout="", stderr=str(e)))

    if max_output is not None:
        for name, stream in (("stdout", proc.stdout), ("stderr", proc.stderr)):
            if len(stream.encode("utf-8")) > max_output:
                return Err(
                    ProcessError(
                        command=command,
                        returncode=-1,
                        stdout=proc.stdout[:max_output],
                        stderr=f"{name} exceeded the maximum buffer of {max_output} bytes",
                    )
                )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=command,
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(ProcessOutput(stdout=proc.stdout, stderr=proc.stderr))


class CommandRunner(Protocol):
    """The "execute a command, capture its output" capability.

    Release steps and registry queries only ever see this protocol.
    """

    def run(
        self, argv: Sequence[str], *, timeout: float | None = None
    ) -> Result[ProcessOutput, ProcessError]: ...


@dataclass(frozen=True, slots=True)
class ProcessRunner:
    """CommandRunner bound to a project directory."""

    cwd: Path
    max_output: int | None = None

    def run(
        self, argv: Sequence[str], *, timeout: float | None = None
    ) -> Result[ProcessOutput, ProcessError]:
        return run(argv, cwd=self.cwd, timeout=timeout, max_output=self.max_output)


class MockRunner:
    """CommandRunner returning canned results, for tests.

    Commands without a canned result succeed with empty output.

    Usage:
        runner = MockRunner()
        runner.set_error(["git", "push", "origin"], stderr="rejected")
        runner.run(["git", "push", "origin"])  # Err(ProcessError(...))
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, ...], ProcessOutput | ProcessError] = {}
        self.calls: list[tuple[str, ...]] = []

    def set_output(self, argv: Sequence[str], stdout: str = "", stderr: str = "") -> None:
        self._responses[tuple(argv)] = ProcessOutput(stdout=stdout, stderr=stderr)

    def set_error(
        self,
        argv: Sequence[str],
        *,
        returncode: int = 1,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        command = tuple(argv)
        self._responses[command] = ProcessError(
            command=command, returncode=returncode, stdout=stdout, stderr=stderr
        )

    def run(
        self, argv: Sequence[str], *, timeout: float | None = None
    ) -> Result[ProcessOutput, ProcessError]:
        command = tuple(argv)
        self.calls.append(command)

        response = self._responses.get(command)
        if response is None:
            return Ok(ProcessOutput(stdout="", stderr=""))
        if isinstance(response, ProcessError):
            return Err(response)
        return Ok(response)
