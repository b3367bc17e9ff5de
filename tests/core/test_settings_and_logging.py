import json
import logging

from config.settings import AppSettings
from services.assessment_engine.engine import DEFAULT_QUESTION_BANK_PATH
from src.core.logging_config import LOG_FORMAT, SERVICE_NAME, AssessmentJsonFormatter, setup_logging


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("ASSESSMENT_DATABASE_URL", raising=False)
    s = AppSettings()
    assert s.database_url == "sqlite:///./assessment.db"
    assert s.question_bank_path == str(DEFAULT_QUESTION_BANK_PATH)
    assert s.cors_origins == ["*"]


def test_settings_read_prefixed_env(monkeypatch):
    monkeypatch.setenv("ASSESSMENT_DATABASE_URL", "sqlite:///./other.db")
    monkeypatch.setenv("ASSESSMENT_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("ASSESSMENT_CORS_ORIGINS", '["http://localhost:5173"]')
    s = AppSettings()
    assert s.database_url == "sqlite:///./other.db"
    assert s.log_level == "DEBUG"
    assert s.cors_origins == ["http://localhost:5173"]


def make_record(**extra):
    record = logging.LogRecord("src.routers.users", logging.WARNING, __file__, 12, "scored %s", ("ok",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_fields():
    payload = json.loads(AssessmentJsonFormatter(LOG_FORMAT).format(make_record()))
    assert payload["level"] == "WARNING"
    assert payload["message"] == "scored ok"
    assert payload["name"] == "src.routers.users"
    assert payload["service"] == SERVICE_NAME
    assert payload["timestamp"].endswith("+00:00")


def test_json_formatter_emits_request_fields():
    record = make_record(method="POST", path="/api/users", status=400, duration_ms=3.2)
    payload = json.loads(AssessmentJsonFormatter(LOG_FORMAT).format(record))
    assert payload["path"] == "/api/users"
    assert payload["status"] == 400
    assert payload["method"] == "POST"


def test_setup_logging_is_idempotent():
    first = setup_logging("DEBUG")
    second = setup_logging("INFO")
    root = logging.getLogger()
    json_handlers = [h for h in root.handlers if isinstance(h.formatter, AssessmentJsonFormatter)]
    assert first is second
    assert json_handlers == [first]
    assert root.level == logging.INFO


def test_requests_are_logged_with_path(api_client, caplog):
    with caplog.at_level(logging.INFO, logger="main"):
        api_client.get("/health")

    records = [r for r in caplog.records if r.name == "main" and getattr(r, "path", None) == "/health"]
    assert len(records) == 1
    assert records[0].status == 200
    assert records[0].method == "GET"
