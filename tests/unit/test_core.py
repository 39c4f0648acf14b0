"""
Core Unit Tests.

Tests for the error family and logging helpers.
"""

import logging

import pytest

from urlscan.core import (
    ApiError,
    AuthenticationError,
    ErrorKind,
    NotFoundError,
    RateLimitError,
    TransportError,
    UrlScanError,
    get_logger,
    sanitize_headers,
    setup_logger,
)
from urlscan.core.logger import ColoredFormatter
from urlscan.http.models import FailureKind


class TestErrorFamily:
    """Tests for UrlScanError subclasses."""

    @pytest.mark.parametrize(
        "error,kind",
        [
            (AuthenticationError(), ErrorKind.AUTHENTICATION),
            (NotFoundError(), ErrorKind.NOT_FOUND),
            (RateLimitError(), ErrorKind.RATE_LIMITED),
            (ApiError(500), ErrorKind.API_ERROR),
            (TransportError(FailureKind.TIMEOUT), ErrorKind.TRANSPORT),
        ],
    )
    def test_kind_tags(self, error, kind):
        assert isinstance(error, UrlScanError)
        assert error.kind == kind

    def test_default_messages(self):
        assert AuthenticationError().message == "Invalid or missing API key"
        assert RateLimitError().retry_after is None

    def test_str_includes_code_and_details(self):
        error = ApiError(418, "teapot", details={"url": "https://x"})

        assert error.code == "418"
        assert str(error) == "teapot [418] Details: {'url': 'https://x'}"

    def test_repr(self):
        assert repr(NotFoundError("gone", code="404")) == (
            "NotFoundError(message='gone', code='404', details={})"
        )

    def test_transport_error_str(self):
        error = TransportError(FailureKind.CONNECTION_ERROR, "refused")
        assert str(error) == "refused (kind=connection_error)"

    def test_rate_limit_str(self):
        assert str(RateLimitError("slow down", retry_after=9)) == "slow down (retry after 9s)"


class TestLogging:
    """Tests for logger helpers."""

    def test_sanitize_headers(self):
        headers = {"API-Key": "secret", "Accept": "application/json", "Authorization": "Bearer x"}

        sanitized = sanitize_headers(headers)

        assert sanitized == {
            "API-Key": "***",
            "Accept": "application/json",
            "Authorization": "***",
        }
        assert headers["API-Key"] == "secret"

    def test_empty_credential_left_as_is(self):
        assert sanitize_headers({"api-key": ""}) == {"api-key": ""}

    def test_setup_logger_level_and_no_duplicate_handlers(self):
        logger = setup_logger("urlscan.tests.level", level="DEBUG")
        again = setup_logger("urlscan.tests.level", level="ERROR")

        assert logger is again
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("URLSCAN_LOG_LEVEL", "warning")
        logger = setup_logger("urlscan.tests.env_level")
        assert logger.level == logging.WARNING

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "urlscan.log"
        logger = setup_logger("urlscan.tests.file", level="INFO", log_file=log_file)

        logger.info("written")
        for handler in logger.handlers:
            handler.flush()

        content = log_file.read_text()
        assert "written" in content
        assert "\033[" not in content
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_colored_formatter(self):
        record = logging.LogRecord("urlscan.tests", logging.ERROR, __file__, 1, "boom", None, None)

        line = ColoredFormatter("%(levelname)s %(message)s").format(record)

        assert line == "\033[91mERROR boom\033[0m"

    def test_get_logger_configures_once(self):
        logger = get_logger("urlscan.tests.get")
        assert logger.handlers
        assert get_logger("urlscan.tests.get") is logger
