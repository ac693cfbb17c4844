import os
import time

import pytest

from agents.base import LLMQuotaError
from models import UserProfile, WaterReportAnalysis, WeatherForecast, empty_parameters
from storage import LocalStore

# 1x1 PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000100e221bc330000000049454e44ae426082"
)


needs_tzset = pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")


def _set_local_tz(value):
    if value is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = value
    if hasattr(time, "tzset"):
        time.tzset()


@pytest.fixture(autouse=True)
def local_tz():
    """Pin local time to UTC; call the fixture value to switch zones."""
    previous = os.environ.get("TZ")
    _set_local_tz("UTC0")
    yield _set_local_tz
    _set_local_tz(previous)


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path / "user_data")


@pytest.fixture
def profile():
    return UserProfile(
        id="user-1700000000000",
        phone_number="9876543210",
        name="Ravi",
        farm_location="Visakhapatnam",
        farming_type="Shrimp",
        farm_size="5 ponds",
    )


@pytest.fixture
def forecasts():
    return [
        WeatherForecast(date=f"Day {i}", condition="Sunny", temp_min=20 + i, temp_max=28 + i, icon="01d")
        for i in range(6)
    ]


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "sheet.png"
    path.write_bytes(PNG_BYTES)
    return str(path)


def make_report(report_id, timestamp, user_id="user-1700000000000", **params):
    parameters = empty_parameters()
    parameters.update(params)
    return WaterReportAnalysis(
        id=report_id,
        user_id=user_id,
        timestamp=timestamp,
        parameters=parameters,
        status="Safe",
        suggestions=["Keep aerating."],
    )


class FakeExtractor:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def analyze_report_image(self, image_base64, mime_type="image/jpeg"):
        self.calls.append((image_base64, mime_type))
        if self.error is not None:
            raise self.error
        return self.result


class FakeAdvisor:
    def __init__(self, text="Threat: Low oxygen\nRisk: High", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def get_threat_analysis(self, profile, report, forecasts):
        self.calls.append((profile, report, forecasts))
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def quota_error():
    return LLMQuotaError("API request failed due to quota limits. Please check your API plan.")
