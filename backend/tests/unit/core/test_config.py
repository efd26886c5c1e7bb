"""
Unit Tests for settings and startup validation
"""
import pytest

from complaintdesk.core.config import Settings, parse_cors_origins, settings
from complaintdesk import main


REQUIRED = {
    "JWT_SECRET_KEY": "x" * 32,
    "SMTP_HOST": "smtp.example.com",
    "SMTP_USER": "user",
    "SMTP_PASSWORD": "pass",
    "EMAIL_FROM": "from@example.com",
    "ADMIN_EMAIL": "admin@example.com",
}


class TestSettings:

    def test_environment_is_normalized(self):
        configured = Settings(_env_file=None, ENVIRONMENT=" Production ", **REQUIRED)

        assert configured.ENVIRONMENT == "production"
        assert configured.is_production is True

    def test_cookie_max_age_matches_token_lifetime(self):
        configured = Settings(_env_file=None, ACCESS_TOKEN_EXPIRE_DAYS=7, **REQUIRED)

        assert configured.ACCESS_TOKEN_MAX_AGE_SECONDS == 7 * 24 * 60 * 60

    def test_missing_secret_fails_fast(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
        values = {k: v for k, v in REQUIRED.items() if k != "JWT_SECRET_KEY"}

        with pytest.raises(Exception):
            Settings(_env_file=None, **values)

    @pytest.mark.parametrize("raw, expected", [
        ("http://a.test,http://b.test", ["http://a.test", "http://b.test"]),
        ('["http://a.test"]', ["http://a.test"]),
        ("", []),
    ])
    def test_parse_cors_origins(self, raw, expected):
        assert parse_cors_origins(raw) == expected


class TestStartupValidation:

    def test_accepts_test_configuration(self):
        main.validate_critical_config()

    def test_rejects_placeholder_secret(self, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET_KEY", "CHANGE_ME")

        with pytest.raises(RuntimeError):
            main.validate_critical_config()

    def test_rejects_short_secret(self, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET_KEY", "too-short")

        with pytest.raises(RuntimeError):
            main.validate_critical_config()
