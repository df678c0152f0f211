"""JSON-over-HTTPS lookups.

Only the self-update probe talks to the network, and it only ever needs one
JSON document (the PyPI project metadata). Anything going wrong is an
``HttpError`` value; the probe treats every error as "no update".
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from cut_release.core.result import Err, Ok, Result
from cut_release.core.structured import StrDict, as_str_dict

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]

# PyPI project documents are a few hundred KiB at most.
MAX_JSON_BYTES = 8 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class HttpError:
    """A failed lookup.

    ``status`` is the HTTP status code, or 0 when no response arrived
    (DNS, refused connection, TLS, timeout) or the body was unusable.
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    def get_json(self, url: str) -> Result[StrDict, HttpError]:
        """Fetch ``url`` and parse the body as a JSON object."""
        ...


class RealHttpClient:
    """urllib-backed client; every request is bounded by ``timeout`` seconds."""

    def __init__(self, timeout: float, user_agent: str) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def _fetch(self, url: str) -> Result[bytes, HttpError]:
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        request = urllib.request.Request(url, headers=headers)
        try:
            with urllib.request.urlopen(
                request, timeout=self.timeout, context=self._ssl_context
            ) as response:
                body: bytes = response.read(MAX_JSON_BYTES + 1)
        except urllib.error.HTTPError as e:
            return Err(HttpError(url, e.code, str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url, 0, f"unreachable: {e.reason}"))
        except TimeoutError:
            return Err(HttpError(url, 0, f"no answer within {self.timeout}s"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url, 0, str(e)))

        if len(body) > MAX_JSON_BYTES:
            return Err(HttpError(url, 0, f"response larger than {MAX_JSON_BYTES} bytes"))
        return Ok(body)

    def get_json(self, url: str) -> Result[StrDict, HttpError]:
        body = self._fetch(url)
        if isinstance(body, Err):
            return body

        try:
            decoded: object = json.loads(body.value.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            return Err(HttpError(url, 0, f"not JSON: {e}"))

        document = as_str_dict(decoded)
        if document is None:
            return Err(HttpError(url, 0, "JSON document is not an object"))
        return Ok(document)


class MockHttpClient:
    """HttpClient serving canned documents; unknown URLs answer 404.

    Usage:
        http = MockHttpClient()
        http.set_json(PYPI_JSON_URL.format(dist="cut-release"), {"info": {"version": "2.0.0"}})
    """

    def __init__(self) -> None:
        self._documents: dict[str, StrDict | HttpError] = {}
        self.calls: list[str] = []

    def set_json(self, url: str, response: StrDict | HttpError) -> None:
        self._documents[url] = response

    def get_json(self, url: str) -> Result[StrDict, HttpError]:
        self.calls.append(url)
        canned = self._documents.get(url)
        if canned is None:
            return Err(HttpError(url, 404, "Not found (mock)"))
        if isinstance(canned, HttpError):
            return Err(canned)
        return Ok(canned)
