"""Unit tests for configuration, logging and retry helpers."""
import json
import logging

import httpx
import pytest

from common_lib.ai_clients import ClaudeClient
from common_lib.config import Settings
from common_lib.logger import PLAIN_FORMAT
from common_lib.observability import CustomJsonFormatter, ReportIdFilter, bind_report_id, get_report_id
from common_lib.retry_config import _is_retryable_exception


class TestSettings:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("VR_REPORTS_DIR", "/srv/reports")
        monkeypatch.setenv("VR_MAX_CONCURRENCY", "8")
        monkeypatch.setenv("VR_LOG_LEVEL", "debug")
        s = Settings()
        assert s.reports_dir == "/srv/reports"
        assert s.max_concurrency == 8
        assert s.log_level == "DEBUG"

    def test_invalid_concurrency(self, monkeypatch):
        monkeypatch.setenv("VR_MAX_CONCURRENCY", "0")
        with pytest.raises(ValueError):
            Settings()


class TestObservability:
    def test_bind_report_id(self):
        assert get_report_id() == "-"
        with bind_report_id("GO-2023-0001"):
            assert get_report_id() == "GO-2023-0001"
        assert get_report_id() == "-"

    def test_json_formatter_includes_report_id(self):
        formatter = CustomJsonFormatter("%(levelname)s %(name)s %(message)s")
        record = logging.LogRecord("report_fixer", logging.INFO, __file__, 1, "fixed %s", ("GO-2023-0001",), None)
        with bind_report_id("GO-2023-0001"):
            payload = json.loads(formatter.format(record))
        assert payload["report_id"] == "GO-2023-0001"
        assert payload["message"] == "fixed GO-2023-0001"
        assert payload["levelname"] == "INFO"
        assert "timestamp" in payload

    def test_filter_sets_report_id_for_plain_format(self):
        record = logging.LogRecord("osv_generator", logging.INFO, __file__, 1, "wrote entry", (), None)
        with bind_report_id("GO-2023-0002"):
            assert ReportIdFilter().filter(record)
        line = logging.Formatter(PLAIN_FORMAT).format(record)
        assert "[GO-2023-0002] osv_generator: wrote entry" in line


class TestRetryPolicy:
    def _status_error(self, code):
        request = httpx.Request("GET", "https://api.osv.test/v1/vulns/X")
        return httpx.HTTPStatusError("error", request=request, response=httpx.Response(code, request=request))

    def test_retryable(self):
        assert _is_retryable_exception(httpx.ConnectError("refused"))
        assert _is_retryable_exception(httpx.ReadTimeout("slow"))
        assert _is_retryable_exception(self._status_error(503))

    def test_not_retryable(self):
        assert not _is_retryable_exception(self._status_error(404))
        assert not _is_retryable_exception(ValueError("x"))


class TestClaudeClient:
    async def test_disabled_by_configuration(self, monkeypatch, settings):
        monkeypatch.setattr("common_lib.ai_clients.claude.get_settings", lambda: settings)
        client = ClaudeClient()
        with pytest.raises(RuntimeError, match="disabled"):
            await client.chat("hello")
