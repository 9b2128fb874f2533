"""Unit tests for the error classifier."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import aiohttp

from fortnox.core import ErrorKind, HTTPError, SanitizedResponse
from fortnox.runtime.rest import RawResponse, classify, extract_api_error
from fortnox.runtime.rest.classifier import NO_RESPONSE_MESSAGE, RATE_LIMIT_MESSAGE


def _error_body(message="Kan inte hitta kontot.", error=1, code=2000204):
    return {"ErrorInformation": {"error": error, "message": message, "code": code}}


class TestResponseClassification:
    """Test classification of received responses."""

    def test_429_is_throttle(self):
        error = classify(response=RawResponse(status=429, reason="Too Many Requests"))

        assert error.kind is ErrorKind.THROTTLE
        assert error.status_code == 429
        assert error.retryable is True
        assert error.message == RATE_LIMIT_MESSAGE

    def test_429_wins_over_error_body(self):
        error = classify(response=RawResponse(status=429, data=_error_body("Too many")))

        assert error.kind is ErrorKind.THROTTLE
        assert error.message == "Too many"

    def test_structured_body_is_api_error(self):
        response = RawResponse(status=404, reason="Not Found", data=_error_body())

        error = classify(response=response)

        assert error.kind is ErrorKind.API
        assert error.message == "Kan inte hitta kontot."
        assert error.status_code == 404
        assert error.api_error_number == 1
        assert error.api_error_code == 2000204
        assert error.retryable is False
        assert error.sanitized_response == SanitizedResponse(
            status=404, status_text="Not Found", data=_error_body()
        )

    def test_structured_body_keys_case_insensitive(self):
        data = {"errorInformation": {"Error": "2", "Message": "Ogiltig parameter", "Code": "2000588"}}

        error = classify(response=RawResponse(status=400, data=data))

        assert error.kind is ErrorKind.API
        assert error.message == "Ogiltig parameter"
        assert error.api_error_number == 2
        assert error.api_error_code == 2000588

    def test_plain_http_error(self):
        error = classify(response=RawResponse(status=404, reason="Not Found", data="<html>"))

        assert error.kind is ErrorKind.HTTP
        assert error.message == "Request failed with status 404"
        assert error.retryable is False
        assert error.sanitized_response.data == "<html>"

    def test_server_errors_are_retryable(self):
        assert classify(response=RawResponse(status=503)).retryable is True
        assert classify(response=RawResponse(status=500, data=_error_body())).retryable is True

    def test_sanitized_snapshot_never_has_credentials(self):
        response = RawResponse(
            status=401,
            data={"message": "unauthorized", "Authorization": "Bearer x"},
            headers={"Authorization": "Bearer x"},
        )

        error = classify(response=response)

        assert "Bearer" not in error.model_dump_json()


class TestExceptionClassification:
    """Test classification of failures without a response."""

    def test_connection_error_is_transport(self):
        error = classify(aiohttp.ClientConnectionError("Connection refused"))

        assert error.kind is ErrorKind.TRANSPORT
        assert error.message == NO_RESPONSE_MESSAGE
        assert error.status_code is None
        assert error.sanitized_response is None
        assert error.retryable is True

    def test_timeout_is_transport(self):
        assert classify(asyncio.TimeoutError()).kind is ErrorKind.TRANSPORT

    def test_other_failure_keeps_raw_message(self):
        error = classify(ValueError("Invalid URL"))

        assert error.kind is ErrorKind.OTHER
        assert error.message == "Invalid URL"
        assert error.status_code is None

    def test_session_response_error_keeps_status(self):
        error = classify(
            aiohttp.TooManyRedirects(MagicMock(), (), status=302, message="Too many redirects")
        )

        assert error.kind is ErrorKind.HTTP
        assert error.status_code == 302
        assert error.message == "Request failed with status 302"
        assert error.retryable is False

    def test_fortnox_error_passes_through(self):
        original = HTTPError("Request failed with status 502", status_code=502)
        assert classify(original) is original.error

    def test_nothing(self):
        assert classify().message == "Unknown error"


def test_extract_api_error_rejects_non_envelopes():
    assert extract_api_error(None) is None
    assert extract_api_error("text") is None
    assert extract_api_error({"ErrorInformation": "oops"}) is None
    assert extract_api_error({"Vouchers": []}) is None
