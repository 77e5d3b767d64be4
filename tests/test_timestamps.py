"""Tests for entsoe_explorer.timestamps."""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from entsoe_explorer import config
from entsoe_explorer.timestamps import parse_timestamp, reconstruct_timestamp, resolution_minutes

UTC = timezone.utc


@pytest.mark.parametrize("text, expected", [
    ("2024-01-01T00:00Z", datetime(2024, 1, 1, 0, 0, tzinfo=UTC)),
    ("2024-01-01T00:00:00Z", datetime(2024, 1, 1, 0, 0, tzinfo=UTC)),
    ("2024-06-01T00:00+02:00", datetime(2024, 5, 31, 22, 0, tzinfo=UTC)),
    ("2024-01-01T00:00:00", datetime(2024, 1, 1, 0, 0, tzinfo=UTC)),
])
def test_parse_timestamp(text, expected):
    parsed = parse_timestamp(text)
    assert parsed == expected
    assert parsed.utcoffset() == timedelta(0)


@pytest.mark.parametrize("text", [None, "", "   ", "Unknown", "not-a-date"])
def test_parse_timestamp_invalid_returns_none(text):
    assert parse_timestamp(text) is None


@pytest.mark.parametrize("code, minutes", [
    ("PT15M", 15),
    ("PT30M", 30),
    ("PT60M", 60),
    ("PT1H", 60),
])
def test_resolution_table(code, minutes):
    assert resolution_minutes(code) == minutes


def test_unknown_resolution_falls_back_with_warning(caplog):
    with caplog.at_level(logging.WARNING):
        assert resolution_minutes("P1D") == 60
    assert "Unrecognized resolution 'P1D'" in caplog.text


def test_fallback_follows_configuration(monkeypatch):
    monkeypatch.setattr(config, "DEFAULT_RESOLUTION_MINUTES", 15)
    assert resolution_minutes("PT5M") == 15
    assert resolution_minutes(None) == 15


def test_quarter_hour_positions():
    start = datetime(2024, 1, 1, tzinfo=UTC)
    instants = [reconstruct_timestamp(start, position, "PT15M") for position in range(1, 5)]
    assert [i.strftime("%H:%MZ") for i in instants] == ["00:00Z", "00:15Z", "00:30Z", "00:45Z"]


def test_unknown_resolution_uses_sixty_minutes():
    start = datetime(2024, 1, 1, tzinfo=UTC)
    assert reconstruct_timestamp(start, 3, "PT7M") == start + timedelta(hours=2)


def test_gaps_are_not_interpolated():
    start = datetime(2024, 1, 1, tzinfo=UTC)
    assert reconstruct_timestamp(start, 10, "PT30M") == start + timedelta(minutes=270)


def test_step_minutes_skips_lookup():
    start = datetime(2024, 1, 1, tzinfo=UTC)
    assert reconstruct_timestamp(start, 2, "garbage", step_minutes=15) == start + timedelta(minutes=15)


def test_start_seconds_are_carried_through():
    start = datetime(2024, 1, 1, 0, 0, 30, 500, tzinfo=UTC)
    assert reconstruct_timestamp(start, 2, "PT15M") == datetime(2024, 1, 1, 0, 15, 30, 500, tzinfo=UTC)


def test_missing_start_or_invalid_position():
    start = datetime(2024, 1, 1, tzinfo=UTC)
    assert reconstruct_timestamp(None, 1, "PT15M") is None
    assert reconstruct_timestamp(start, 0, "PT15M") is None
