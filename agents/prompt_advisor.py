ADVISOR_SYSTEM_PROMPT = (
    "You are an aquaculture expert providing risk assessment and advice to farmers. "
    "Focus on being concise and actionable."
)

ADVISOR_PROMPT_V1 = """
Farm Details:
- Farming Type: {farming_type}
- Location: {farm_location} (general area)

Current Water Quality Report (taken on {report_date}):
{water_quality_summary}
- Overall Status: {overall_status}

Weather Forecast for the next {days} days:
{weather_summary}

Task:
Based on the current water quality parameters and the provided {days}-day weather forecast, identify potential threats to the aquaculture stock ({farming_type}) over the next {days} days.
For each potential threat:
1. Briefly explain the cause (linking water quality and/or weather).
2. Estimate a risk level (Low, Medium, High).
3. Suggest 1-2 concise, actionable preventative or mitigative measures the farmer can take.

Format your response clearly. List each threat with its explanation, risk level, and suggestions.
If no significant immediate threats are apparent, state so but still offer general vigilance advice based on the forecast.
Prioritize the most impactful potential threats.
Example:
Threat: Potential Dissolved Oxygen Drop
Risk: Medium
Explanation: Upcoming cloudy days (e.g., {example_day}) might reduce photosynthesis. If current D.O. ({current_do} ppm) is borderline, it could drop further, especially during early morning hours.
Suggestions:
- Monitor D.O. levels closely, especially pre-dawn.
- Ensure backup aeration equipment is ready.

Start the analysis directly. Output should be plain text.
"""

ADVISOR_TEST_REPLY = """Threat: Potential Dissolved Oxygen Drop
Risk: Medium
Explanation: Showers and cloud cover in the coming days reduce photosynthesis, and pre-dawn oxygen may dip below safe levels.
Suggestions:
- Run aerators between 2 AM and 6 AM.
- Check D.O. before the first feed.

Threat: Temperature Rise
Risk: Low
Explanation: Daytime highs climb through the week, which speeds up ammonia build-up.
Suggestions:
- Reduce feed slightly on the hottest days.

Keep recording your water tests weekly."""
