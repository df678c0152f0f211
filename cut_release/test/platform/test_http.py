from __future__ import annotations

from cut_release.core.result import Err, Ok
from cut_release.platform.http import HttpClient, HttpError, MockHttpClient, RealHttpClient


def test_http_error_str() -> None:
    assert str(HttpError("https://x", 503, "Unavailable")) == "HTTP 503: Unavailable (https://x)"
    assert str(HttpError("https://x", 0, "timed out")) == "timed out (https://x)"


class TestMockHttpClient:
    def test_is_an_http_client(self) -> None:
        assert isinstance(MockHttpClient(), HttpClient)
        assert isinstance(RealHttpClient(timeout=1.0, user_agent="t"), HttpClient)

    def test_returns_canned_json(self) -> None:
        client = MockHttpClient()
        client.set_json("https://example.test/a", {"info": {"version": "1.0.0"}})

        result = client.get_json("https://example.test/a")

        assert result == Ok({"info": {"version": "1.0.0"}})
        assert client.calls == ["https://example.test/a"]

    def test_unknown_url_is_404(self) -> None:
        result = MockHttpClient().get_json("https://example.test/missing")

        assert isinstance(result, Err)
        assert result.error.status == 404

    def test_canned_error(self) -> None:
        client = MockHttpClient()
        client.set_json("https://example.test/a", HttpError("https://example.test/a", 0, "down"))

        result = client.get_json("https://example.test/a")

        assert isinstance(result, Err)
        assert result.error.message == "down"


def test_real_client_reports_unreachable_host() -> None:
    client = RealHttpClient(timeout=1.0, user_agent="cut-release-test")

    result = client.get_json("http://127.0.0.1:9/")

    assert isinstance(result, Err)
    assert result.error.status == 0
