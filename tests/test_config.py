import json
import logging

from config import Settings
from logging_config import ServiceJsonFormatter, setup_logging


def test_settings_defaults(monkeypatch):
    for var in ("XENDIT_SECRET_KEY", "XENDIT_CALLBACK_TOKEN", "DATABASE_URL", "FRONTEND_URL", "PORT", "CORS_ORIGINS"):
        monkeypatch.delenv(var, raising=False)

    settings = Settings.from_env()

    assert settings.xendit_api_url == "https://api.xendit.co/v2"
    assert settings.xendit_callback_token is None
    assert settings.database_url == "sqlite:///./booking.db"
    assert settings.frontend_url == "http://localhost:5173"
    assert settings.port == 4242
    assert settings.cors_origins == ["*"]


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("XENDIT_SECRET_KEY", "xnd_live")
    monkeypatch.setenv("FRONTEND_URL", "https://book.example.com/")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com, https://b.example.com")

    settings = Settings.from_env()

    assert settings.xendit_secret_key == "xnd_live"
    assert settings.frontend_url == "https://book.example.com"
    assert settings.port == 8080
    assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]


def test_json_formatter_redacts_secrets():
    formatter = ServiceJsonFormatter(fmt="%(timestamp)s %(level)s %(logger)s %(message)s")
    record = logging.LogRecord("payments", logging.INFO, __file__, 1, "Creating invoice", None, None)
    record.secret_key = "xnd_live_123"
    record.booking_id = "42"

    out = json.loads(formatter.format(record))

    assert out["secret_key"] == "***REDACTED***"
    assert out["booking_id"] == "42"
    assert out["level"] == "INFO"
    assert out["logger"] == "payments"


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = len(root.handlers)
    setup_logging("INFO")
    setup_logging("INFO")
    try:
        assert len(root.handlers) == before + 1
    finally:
        for handler in [h for h in root.handlers if h.get_name() == "booking-payments-json"]:
            root.removeHandler(handler)
