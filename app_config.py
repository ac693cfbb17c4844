# app_config.py
"""
Application-level settings that are not about the model backend.

- DATA_DIR: folder holding the two JSON entries (profile, reports).
- MOCK_OTP: the fixed one-time code accepted by the phone verification step.
- MOCK_NETWORK_DELAY: seconds the mock OTP send/verify pretend to take.
- WEATHER_DELAY: seconds the simulated weather source pretends to take.
"""

import logging
import os


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


APP_NAME = "Digital Aqua"

DATA_DIR: str = os.getenv("DIGITAL_AQUA_DATA_DIR", "user_data")

MOCK_OTP: str = os.getenv("MOCK_OTP", "1234")

MOCK_NETWORK_DELAY: float = _float_env("MOCK_NETWORK_DELAY", 1.0)
WEATHER_DELAY: float = _float_env("WEATHER_DELAY", 0.5)

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging() -> None:
    """Set up root logging once for the app process."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
