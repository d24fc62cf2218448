from datetime import timedelta

import pytest
from pydantic import ValidationError

from djibgo.core.config import IssuanceSettings, Settings
from djibgo.interfaces.http.deps import build_issuance_policy


def test_nested_sections_read_from_environment(monkeypatch):
    monkeypatch.setenv("ISSUANCE__VALIDITY_HOURS", "12")
    monkeypatch.setenv("ISSUANCE__SELF_TEST_ENABLED", "false")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings()

    assert settings.issuance.validity == timedelta(hours=12)
    assert settings.issuance.self_test_enabled is False
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(("raw", "expected"), [("253", "+253"), (" +33 ", "+33")])
def test_country_prefix_is_normalized(raw, expected):
    assert IssuanceSettings(default_country_prefix=raw).default_country_prefix == expected


def test_country_prefix_must_be_numeric():
    with pytest.raises(ValidationError):
        IssuanceSettings(default_country_prefix="+dj")


def test_issuance_policy_follows_settings():
    settings = Settings(
        issuance=IssuanceSettings(
            validity_hours=2,
            lease_seconds=5,
            read_back_attempts=4,
            read_back_initial_delay=0.5,
            read_back_max_delay=1.0,
            reminder_window_minutes=15,
        )
    )

    policy = build_issuance_policy(settings)

    assert policy.validity == timedelta(hours=2)
    assert policy.lease_seconds == 5
    assert policy.read_back.delays() == [0.5, 1.0, 1.0]
    assert policy.reminder_window == timedelta(minutes=15)
