# tests/shared/test_config.py
import json

import structlog

from sample.shared.config import AppEnv, Settings
from sample.shared.logging_config import add_open_telemetry_spans, configure_logging


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.API_PREFIX == "/api/v1"
        assert settings.DATABASE_URL.startswith("sqlite+aiosqlite")
        assert settings.HEALTH_PATH == "/health"
        assert settings.REDIS_URL is None

    def test_environment_overrides(self, monkeypatch):
        """
        Scenario: Values are supplied through environment variables.
        Expected: They take precedence over the defaults.
        """
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/app")
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")

        settings = Settings(_env_file=None)

        assert settings.APP_ENV == AppEnv.PRODUCTION
        assert settings.is_development is False
        assert settings.DATABASE_URL == "postgresql+asyncpg://u:p@db/app"
        assert settings.cors_origins == ["https://a.example", "https://b.example"]


class TestLogging:

    def test_json_output_carries_level_and_event(self, capsys):
        configure_logging(Settings(_env_file=None, LOG_FORMAT="json", LOG_LEVEL="INFO"))

        structlog.get_logger("test").info("something_happened", item_id=3)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "something_happened"
        assert record["level"] == "info"
        assert record["item_id"] == 3
        assert "trace_id" in record

    def test_level_filtering(self, capsys):
        configure_logging(Settings(_env_file=None, LOG_FORMAT="json", LOG_LEVEL="WARNING"))

        structlog.get_logger("test").info("too_quiet")

        assert "too_quiet" not in capsys.readouterr().out

    def test_span_ids_empty_outside_a_span(self):
        event = add_open_telemetry_spans(None, "info", {"event": "x"})

        assert event["trace_id"] is None
        assert event["span_id"] is None
