"""
Six-day weather outlook for a farm location.

The source is simulated: the outlook is derived from today's date and a
fixed condition pattern. A real forecast client can replace
``fetch_forecast`` as long as it keeps returning six WeatherForecast items.
"""

import asyncio
import logging
from datetime import date, timedelta
from typing import List, Optional

from app_config import WEATHER_DELAY
from models import WeatherForecast

logger = logging.getLogger(__name__)

FORECAST_DAYS = 6

# day index -> (condition, icon)
CONDITION_PATTERN = {
    0: ("Sunny", "01d"),
    3: ("Sunny", "01d"),
    1: ("Showers", "09d"),
    4: ("Showers", "09d"),
    5: ("Cloudy", "03d"),
}
DEFAULT_CONDITION = ("Partly Cloudy", "02d")

CONDITION_EMOJI = [
    ("sunny", "☀️"),
    ("partly cloudy", "⛅"),
    ("cloudy", "☁️"),
    ("rain", "🌧️"),
    ("shower", "🌧️"),
]


def format_day_label(d: date) -> str:
    """'Sat, Oct 17' style label."""
    return f"{d.strftime('%a')}, {d.strftime('%b')} {d.day}"


def condition_emoji(condition: str) -> str:
    text = condition.lower()
    for needle, emoji in CONDITION_EMOJI:
        if needle in text:
            return emoji
    return "🌥️"


def fetch_forecast(location: str, today: Optional[date] = None) -> List[WeatherForecast]:
    today = today or date.today()
    forecasts = []
    for i in range(FORECAST_DAYS):
        day = today + timedelta(days=i)
        condition, icon = CONDITION_PATTERN.get(i, DEFAULT_CONDITION)
        forecasts.append(
            WeatherForecast(
                date=format_day_label(day),
                condition=condition,
                temp_min=20 + i,
                temp_max=28 + i,
                icon=icon,
            )
        )
    return forecasts


async def get_weather_forecast(
    location: str,
    today: Optional[date] = None,
    delay: float = WEATHER_DELAY,
) -> List[WeatherForecast]:
    """Return six daily forecasts for ``location``, or [] when unavailable."""
    if not location or not location.strip():
        return []
    logger.info("Fetching simulated weather for: %s", location)
    try:
        if delay > 0:
            await asyncio.sleep(delay)
        return fetch_forecast(location, today)
    except Exception as e:
        logger.error("Failed to fetch weather for %s: %s", location, e)
        return []
