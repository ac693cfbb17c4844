import logging
from datetime import datetime
from typing import Dict, List, Optional

from agents.base import (
    LLMQuotaError,
    LLMResponseError,
    OpenAIStyleClient,
    looks_like_quota_error,
)
from agents.prompt_advisor import ADVISOR_PROMPT_V1, ADVISOR_SYSTEM_PROMPT, ADVISOR_TEST_REPLY
from llm_config import ADVISOR_MODEL_NAME, LLM_BASE_URL, UI_TEST_MODE
from models import (
    PARAMETER_DISPLAY_ORDER,
    UserProfile,
    WaterReportAnalysis,
    WeatherForecast,
    format_value,
    parameter_label,
)

logger = logging.getLogger(__name__)


class ThreatPreconditionError(ValueError):
    """Profile, report or forecast missing for a threat analysis."""


def format_report_date(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).astimezone().strftime("%Y-%m-%d")
    except ValueError:
        return timestamp


def build_threat_prompt(
    profile: UserProfile,
    report: WaterReportAnalysis,
    forecasts: List[WeatherForecast],
) -> str:
    """Render profile, report and forecast into the advisor prompt."""
    water_lines = [
        f"- {parameter_label(key)}: {format_value(key, report.parameters.get(key))}"
        for key in PARAMETER_DISPLAY_ORDER
        if report.parameters.get(key) is not None
    ]
    weather_lines = [
        f"- {day.date}: {day.condition}, Temp: {day.temp_min:g}°C - {day.temp_max:g}°C"
        for day in forecasts
    ]
    example_day = next(
        (
            day.date
            for day in forecasts
            if "cloudy" in day.condition.lower() or "rain" in day.condition.lower()
        ),
        "forecasted cloudy days",
    )
    current_do = report.parameters.get("dissolvedOxygen")

    return ADVISOR_PROMPT_V1.format(
        farming_type=profile.farming_type,
        farm_location=profile.farm_location,
        report_date=format_report_date(report.timestamp),
        water_quality_summary="\n".join(water_lines),
        overall_status=report.status,
        days=len(forecasts),
        weather_summary="\n".join(weather_lines),
        example_day=example_day,
        current_do="N/A" if current_do is None else f"{current_do:g}",
    )


class ThreatAdvisorAgent:
    """
    Writes a multi-day threat outlook from the latest report and the weather.

    The reply is plain text; callers format it line by line.
    """

    def __init__(self, client: Optional[OpenAIStyleClient] = None, test_mode: bool = UI_TEST_MODE):
        self.client = client or OpenAIStyleClient(LLM_BASE_URL, ADVISOR_MODEL_NAME)
        self.test_mode = test_mode

    def build_messages(
        self,
        profile: UserProfile,
        report: WaterReportAnalysis,
        forecasts: List[WeatherForecast],
    ) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": ADVISOR_SYSTEM_PROMPT},
            {"role": "user", "content": build_threat_prompt(profile, report, forecasts).strip()},
        ]

    def get_threat_analysis(
        self,
        profile: Optional[UserProfile],
        report: Optional[WaterReportAnalysis],
        forecasts: Optional[List[WeatherForecast]],
    ) -> str:
        if not self.test_mode:
            self.client.ensure_configured()
        if profile is None or report is None or not forecasts:
            raise ThreatPreconditionError("Missing required data for threat analysis.")
        if self.test_mode:
            return ADVISOR_TEST_REPLY

        messages = self.build_messages(profile, report, forecasts)
        try:
            return self.client.chat(messages, temperature=0.4)
        except Exception as e:
            logger.error("Error getting threat analysis: %s", e)
            if looks_like_quota_error(e):
                raise LLMQuotaError(
                    "API request failed due to quota limits. "
                    "Please check your API plan for threat analysis."
                ) from e
            raise LLMResponseError(f"Failed to get threat analysis. API error: {e}") from e


threat_advisor_agent = ThreatAdvisorAgent()
