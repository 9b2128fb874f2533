"""Unit tests for response and error sanitization."""

from __future__ import annotations

from fortnox.core import HTTPError, SanitizedResponse, sanitize_error_for_logging, sanitize_response, scrub
from fortnox.runtime.rest import RawResponse


class TestScrub:
    """Test recursive removal of sensitive keys."""

    def test_removes_sensitive_keys_at_any_depth(self):
        payload = {
            "Authorization": "Bearer secret",
            "data": {
                "access-token": "tok",
                "Client-Secret": "shh",
                "items": [{"Cookie": "c", "name": "ok"}, {"set-cookie": "s"}],
            },
            "keep": 1,
        }

        assert scrub(payload) == {
            "data": {"items": [{"name": "ok"}, {}]},
            "keep": 1,
        }

    def test_does_not_mutate_input(self):
        payload = {"authorization": "x", "a": {"cookie": "y"}}
        scrub(payload)
        assert payload == {"authorization": "x", "a": {"cookie": "y"}}

    def test_scalars_pass_through(self):
        assert scrub("text") == "text"
        assert scrub(None) is None


class TestSanitizeResponse:
    """Test response snapshots."""

    def test_keeps_status_reason_and_scrubbed_body_only(self):
        response = RawResponse(
            status=401,
            reason="Unauthorized",
            data={"message": "unauthorized", "Authorization": "Bearer leaked"},
            headers={"Authorization": "Bearer abc", "Set-Cookie": "session=1"},
        )

        sanitized = sanitize_response(response)

        assert sanitized == SanitizedResponse(
            status=401, status_text="Unauthorized", data={"message": "unauthorized"}
        )
        assert "Bearer" not in sanitized.model_dump_json()

    def test_none(self):
        assert sanitize_response(None) is None


class TestSanitizeErrorForLogging:
    """Test one-line error rendering."""

    def test_fortnox_error_uses_description(self):
        error = HTTPError("Request failed with status 500", status_code=500)
        assert sanitize_error_for_logging(error) == "[http] Request failed with status 500 HTTP 500"

    def test_plain_exception(self):
        assert sanitize_error_for_logging(RuntimeError("boom")) == "boom"
        assert sanitize_error_for_logging(RuntimeError()) == "RuntimeError"

    def test_exception_with_status(self):
        error = RuntimeError("bad gateway")
        error.status = 502
        assert sanitize_error_for_logging(error) == "bad gateway (HTTP 502)"

    def test_none(self):
        assert sanitize_error_for_logging(None) == "Unknown error"
