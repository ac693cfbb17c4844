import asyncio
from datetime import date

import pytest

import weather
from weather import condition_emoji, fetch_forecast, format_day_label, get_weather_forecast

TODAY = date(2026, 10, 17)


def test_six_days_starting_today():
    days = fetch_forecast("Nellore", TODAY)

    assert len(days) == 6
    assert days[0].date == "Sat, Oct 17"
    assert days[5].date == "Thu, Oct 22"


def test_condition_pattern_and_temperatures():
    days = fetch_forecast("Nellore", TODAY)

    assert [d.condition for d in days] == [
        "Sunny", "Showers", "Partly Cloudy", "Sunny", "Showers", "Cloudy",
    ]
    assert [d.icon for d in days] == ["01d", "09d", "02d", "01d", "09d", "03d"]
    assert [(d.temp_min, d.temp_max) for d in days] == [(20 + i, 28 + i) for i in range(6)]
    assert all(d.temp_min <= d.temp_max for d in days)


def test_day_label_has_no_zero_padding():
    assert format_day_label(date(2026, 11, 3)) == "Tue, Nov 3"


@pytest.mark.parametrize("location", ["", "   ", None])
def test_blank_location_gives_no_forecast(location):
    assert asyncio.run(get_weather_forecast(location, TODAY, delay=0)) == []


def test_async_forecast_matches_sync_source():
    result = asyncio.run(get_weather_forecast("Nellore", TODAY, delay=0))
    assert result == fetch_forecast("Nellore", TODAY)


def test_source_failure_gives_empty_forecast(monkeypatch):
    def broken(location, today=None):
        raise RuntimeError("weather service down")

    monkeypatch.setattr(weather, "fetch_forecast", broken)
    assert asyncio.run(get_weather_forecast("Nellore", TODAY, delay=0)) == []


@pytest.mark.parametrize(
    "condition, emoji",
    [("Sunny", "☀️"), ("Partly Cloudy", "⛅"), ("Cloudy", "☁️"), ("Showers", "🌧️"), ("Fog", "🌥️")],
)
def test_condition_emoji(condition, emoji):
    assert condition_emoji(condition) == emoji
