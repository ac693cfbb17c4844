from logic.logic_session import (
    AppSession,
    ForecastResult,
    ThreatResult,
    apply_forecast,
    apply_threat_result,
    fetch_forecast_result,
    fetch_threat_narrative,
    latest_report_id,
    leave_analysis,
    view_report,
)
from logic.logic_views import respond


def view_report_action(session: AppSession, report_id):
    if not report_id:
        return respond(session)
    return respond(view_report(session, report_id))


def view_latest_report_action(session: AppSession):
    report_id = latest_report_id(session)
    if report_id is None:
        return respond(session)
    return respond(view_report(session, report_id))


def leave_analysis_action(session: AppSession):
    return respond(leave_analysis(session))


# The fetch callbacks write only to their own gr.State; the apply callbacks
# then merge the result into whatever the session is by then.


async def fetch_forecast_action(session: AppSession):
    return await fetch_forecast_result(session)


def apply_forecast_action(session: AppSession, result: ForecastResult | None):
    return respond(apply_forecast(session, result))


def fetch_threat_action(session: AppSession):
    """Chained after apply_forecast_action; None without a forecast."""
    return fetch_threat_narrative(session)


def apply_threat_action(session: AppSession, result: ThreatResult | None):
    return respond(apply_threat_result(session, result))
