"""
Session state for one farmer using the app.

``AppSession`` is the single owner of the in-memory profile, the report
history and the current view. The current view is one of the ``*View``
dataclasses below, each holding only what that screen needs. Every
transition takes a session and returns a new one; persistence writes happen
inside the transitions that change stored data.
"""

import asyncio
import base64
import logging
import math
import mimetypes
import re
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from agents.advisor import ThreatAdvisorAgent, ThreatPreconditionError, threat_advisor_agent
from agents.base import AgentError
from agents.extractor import ReportExtractorAgent, report_extractor_agent
from app_config import MOCK_NETWORK_DELAY, MOCK_OTP
from models import (
    FARMING_TYPES,
    PARAMETER_KEYS,
    UserProfile,
    WaterReportAnalysis,
    WeatherForecast,
)
from storage import LocalStore, load_profile, load_reports, now_iso, save_profile, save_reports
from weather import get_weather_forecast

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r"^\d{10}$")

SUPPORTED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp"}

# not every mimetypes table knows .webp
mimetypes.add_type("image/webp", ".webp")

MSG_BAD_PHONE = "Please enter a valid 10-digit phone number."
MSG_BAD_OTP = "Invalid OTP. Please try again."
MSG_MISSING_FIELDS = "Please fill all fields."
MSG_BAD_FARMING_TYPE = "Please select a valid farming type."
MSG_NO_IMAGE = "Please select an image file."
MSG_BAD_IMAGE_TYPE = "Unsupported image format. Supported formats: JPG, PNG, WebP."


# ================== View states ==================


@dataclass
class EntryView:
    pass


@dataclass
class OtpView:
    phone_number: str = ""
    otp_sent: bool = False
    error: str = ""


@dataclass
class RegistrationView:
    phone_number: str
    error: str = ""


@dataclass
class DashboardView:
    forecasts: List[WeatherForecast] = field(default_factory=list)


@dataclass
class UploadView:
    error: str = ""


@dataclass
class EditView:
    draft: WaterReportAnalysis


@dataclass
class AnalysisView:
    report: WaterReportAnalysis
    forecasts: List[WeatherForecast] = field(default_factory=list)
    threat_text: Optional[str] = None
    threat_error: Optional[str] = None


@dataclass
class PastReportsView:
    pass


View = Union[
    EntryView,
    OtpView,
    RegistrationView,
    DashboardView,
    UploadView,
    EditView,
    AnalysisView,
    PastReportsView,
]

KNOWN_VIEWS = (
    EntryView,
    OtpView,
    RegistrationView,
    DashboardView,
    UploadView,
    EditView,
    AnalysisView,
    PastReportsView,
)
PROFILED_VIEWS = (DashboardView, UploadView, EditView, AnalysisView, PastReportsView)


@dataclass
class AppSession:
    store: LocalStore
    profile: Optional[UserProfile] = None
    reports: List[WaterReportAnalysis] = field(default_factory=list)
    view: Any = field(default_factory=EntryView)


# ================== Helpers ==================


def _now_ms() -> int:
    return int(time.time() * 1000)


def _parse_timestamp(ts: str) -> datetime:
    try:
        dt = datetime.fromisoformat(ts)
    except (TypeError, ValueError):
        return datetime.min.replace(tzinfo=timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def sort_reports_newest_first(reports: List[WaterReportAnalysis]) -> List[WaterReportAnalysis]:
    return sorted(reports, key=lambda r: _parse_timestamp(r.timestamp), reverse=True)


def owned_reports(session: AppSession) -> List[WaterReportAnalysis]:
    """The signed-in farmer's reports, newest first."""
    if session.profile is None:
        return []
    mine = [r for r in session.reports if r.user_id == session.profile.id]
    return sort_reports_newest_first(mine)


def latest_report_id(session: AppSession) -> Optional[str]:
    mine = owned_reports(session)
    return mine[0].id if mine else None


def parse_reading(raw: Any) -> Optional[float]:
    """Edited field text -> number, or None for blank / non-numeric input."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        try:
            value = float(str(raw).strip())
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return value


def encode_image_file(path: str | Path) -> Dict[str, str]:
    """Read an uploaded image into base64 plus its MIME type and data URI."""
    p = Path(path)
    mime_type = mimetypes.guess_type(p.name)[0] or "application/octet-stream"
    data = base64.b64encode(p.read_bytes()).decode("ascii")
    return {
        "base64": data,
        "mime_type": mime_type,
        "data_uri": f"data:{mime_type};base64,{data}",
    }


def _with_view(session: AppSession, view: View) -> AppSession:
    return replace(session, view=view)


# ================== Startup / navigation ==================


def start_session(store: Optional[LocalStore] = None) -> AppSession:
    """Load whatever is stored and show the welcome screen."""
    store = store or LocalStore()
    return AppSession(
        store=store,
        profile=load_profile(store),
        reports=sort_reports_newest_first(load_reports(store)),
        view=EntryView(),
    )


def ensure_valid_view(session: AppSession) -> AppSession:
    """
    Fall back to the welcome screen when the view is unknown, or when a
    screen that needs a profile is shown without one.
    """
    if not isinstance(session.view, KNOWN_VIEWS):
        logger.error("Unknown view %r, resetting to entry.", session.view)
        return replace(session, profile=None, view=EntryView())
    if isinstance(session.view, PROFILED_VIEWS) and session.profile is None:
        return _with_view(session, EntryView())
    return session


def get_started(session: AppSession) -> AppSession:
    return _with_view(session, OtpView())


def back_to_entry(session: AppSession) -> AppSession:
    return _with_view(session, EntryView())


def back_to_dashboard(session: AppSession) -> AppSession:
    return ensure_valid_view(_with_view(session, DashboardView()))


def open_upload(session: AppSession) -> AppSession:
    return ensure_valid_view(_with_view(session, UploadView()))


def open_past_reports(session: AppSession) -> AppSession:
    return ensure_valid_view(_with_view(session, PastReportsView()))


# ================== Phone verification / registration ==================


async def send_otp(session: AppSession, phone_number: str, delay: float = MOCK_NETWORK_DELAY) -> AppSession:
    phone_number = (phone_number or "").strip()
    if not PHONE_RE.match(phone_number):
        return _with_view(session, OtpView(phone_number=phone_number, error=MSG_BAD_PHONE))

    if delay > 0:
        await asyncio.sleep(delay)
    logger.info("OTP sent (mock) to %s", phone_number)
    return _with_view(session, OtpView(phone_number=phone_number, otp_sent=True))


def change_number(session: AppSession) -> AppSession:
    phone = session.view.phone_number if isinstance(session.view, OtpView) else ""
    return _with_view(session, OtpView(phone_number=phone))


async def verify_otp(session: AppSession, code: str, delay: float = MOCK_NETWORK_DELAY) -> AppSession:
    view = session.view
    if not isinstance(view, OtpView) or not view.otp_sent:
        return session

    if (code or "").strip() != MOCK_OTP:
        return _with_view(session, replace(view, error=MSG_BAD_OTP))

    if delay > 0:
        await asyncio.sleep(delay)

    stored = load_profile(session.store)
    if stored is not None and stored.phone_number == view.phone_number:
        return replace(session, profile=stored, view=DashboardView())
    return replace(session, profile=None, view=RegistrationView(phone_number=view.phone_number))


def back_to_otp(session: AppSession) -> AppSession:
    phone = session.view.phone_number if isinstance(session.view, RegistrationView) else ""
    return _with_view(session, OtpView(phone_number=phone))


def register(
    session: AppSession,
    name: str,
    farm_location: str,
    farming_type: str,
    farm_size: str,
    now_ms: Optional[int] = None,
) -> AppSession:
    view = session.view
    if not isinstance(view, RegistrationView):
        return session

    name = (name or "").strip()
    farm_location = (farm_location or "").strip()
    farming_type = (farming_type or "").strip()
    farm_size = (farm_size or "").strip()

    if not name or not farm_location or not farming_type or not farm_size:
        return _with_view(session, replace(view, error=MSG_MISSING_FIELDS))
    if farming_type not in FARMING_TYPES:
        return _with_view(session, replace(view, error=MSG_BAD_FARMING_TYPE))

    profile = UserProfile(
        id=f"user-{now_ms if now_ms is not None else _now_ms()}",
        phone_number=view.phone_number,
        name=name,
        farm_location=farm_location,
        farming_type=farming_type,
        farm_size=farm_size,
    )
    save_profile(session.store, profile)
    logger.info("Registered profile %s", profile.id)
    return replace(session, profile=profile, view=DashboardView())


def logout(session: AppSession) -> AppSession:
    """Forget the signed-in profile; stored data stays where it is."""
    return replace(session, profile=None, view=EntryView())


# ================== Upload / edit / save ==================


def analyze_upload(
    session: AppSession,
    image_path: Optional[str],
    extractor: ReportExtractorAgent = report_extractor_agent,
    now: Optional[str] = None,
    now_ms: Optional[int] = None,
) -> AppSession:
    session = ensure_valid_view(session)
    if session.profile is None:
        return session
    if not image_path:
        return _with_view(session, UploadView(error=MSG_NO_IMAGE))

    try:
        image = encode_image_file(image_path)
    except OSError as e:
        logger.error("Could not read uploaded image %s: %s", image_path, e)
        return _with_view(session, UploadView(error=MSG_NO_IMAGE))
    if image["mime_type"] not in SUPPORTED_IMAGE_TYPES:
        return _with_view(session, UploadView(error=MSG_BAD_IMAGE_TYPE))

    try:
        result = extractor.analyze_report_image(image["base64"], image["mime_type"])
    except AgentError as e:
        return _with_view(session, UploadView(error=str(e)))

    draft = WaterReportAnalysis(
        id=f"report-{now_ms if now_ms is not None else _now_ms()}",
        user_id=session.profile.id,
        timestamp=now or now_iso(),
        parameters=dict(result["parameters"]),
        status=result["status"],
        suggestions=list(result["suggestions"]),
        alerts=[],
        image_url=image["data_uri"],
        notes="",
    )
    return _with_view(session, EditView(draft=draft))


def update_draft_parameter(session: AppSession, key: str, raw: Any) -> AppSession:
    view = session.view
    if not isinstance(view, EditView) or key not in PARAMETER_KEYS:
        return session
    parameters = dict(view.draft.parameters)
    parameters[key] = parse_reading(raw)
    return _with_view(session, EditView(draft=replace(view.draft, parameters=parameters)))


def update_draft_notes(session: AppSession, notes: str) -> AppSession:
    view = session.view
    if not isinstance(view, EditView):
        return session
    return _with_view(session, EditView(draft=replace(view.draft, notes=notes or "")))


def apply_draft_edits(session: AppSession, values: Dict[str, Any], notes: str) -> AppSession:
    """Apply every edited field of the review form at once."""
    for key, raw in values.items():
        session = update_draft_parameter(session, key, raw)
    return update_draft_notes(session, notes)


def cancel_edit(session: AppSession) -> AppSession:
    if not isinstance(session.view, EditView):
        return session
    return _with_view(session, UploadView())


def _merge_reports(*groups: List[WaterReportAnalysis]) -> List[WaterReportAnalysis]:
    """Union by id; the first occurrence of an id wins."""
    merged: Dict[str, WaterReportAnalysis] = {}
    for group in groups:
        for report in group:
            merged.setdefault(report.id, report)
    return list(merged.values())


def save_draft(session: AppSession) -> AppSession:
    """
    Store the draft and show it. What is already on disk is merged in, so a
    session holding an older copy of the list never drops saved reports.
    """
    view = session.view
    if not isinstance(view, EditView):
        return session

    report = view.draft
    stored = load_reports(session.store)
    reports = sort_reports_newest_first(_merge_reports([report], session.reports, stored))
    save_reports(session.store, reports)
    return replace(session, reports=reports, view=AnalysisView(report=report))


# ================== Viewing reports ==================


def view_report(session: AppSession, report_id: str) -> AppSession:
    session = ensure_valid_view(session)
    if session.profile is None:
        return session
    report = next((r for r in session.reports if r.id == report_id), None)
    if report is None:
        return session
    return _with_view(session, AnalysisView(report=report))


def leave_analysis(session: AppSession) -> AppSession:
    if len(owned_reports(session)) > 1:
        return open_past_reports(session)
    return back_to_dashboard(session)


# ================== Forecast / threat narrative ==================
#
# Fetches run while other events may change the session, so they only
# return a result tagged with what it was fetched for. The apply_* functions
# merge it into the live session when that still matches.


@dataclass
class ForecastResult:
    location: str
    report_id: Optional[str]  # None for the dashboard
    forecasts: List[WeatherForecast]


@dataclass
class ThreatResult:
    report_id: str
    text: Optional[str] = None
    error: Optional[str] = None


def _view_report_id(view: Any) -> Optional[str]:
    return view.report.id if isinstance(view, AnalysisView) else None


async def fetch_forecast_result(
    session: AppSession,
    provider: Callable[[str], Awaitable[List[WeatherForecast]]] = get_weather_forecast,
) -> Optional[ForecastResult]:
    """Fetch the outlook for the dashboard or the report being viewed."""
    view = session.view
    if session.profile is None or not isinstance(view, (DashboardView, AnalysisView)):
        return None
    location = session.profile.farm_location
    forecasts = await provider(location)
    return ForecastResult(location=location, report_id=_view_report_id(view), forecasts=list(forecasts))


def apply_forecast(session: AppSession, result: Optional[ForecastResult]) -> AppSession:
    view = session.view
    if result is None or session.profile is None:
        return session
    if session.profile.farm_location != result.location:
        return session
    if isinstance(view, DashboardView) and result.report_id is None:
        return _with_view(session, replace(view, forecasts=result.forecasts))
    if isinstance(view, AnalysisView) and view.report.id == result.report_id:
        return _with_view(session, replace(view, forecasts=result.forecasts))
    return session


async def load_forecast(
    session: AppSession,
    provider: Callable[[str], Awaitable[List[WeatherForecast]]] = get_weather_forecast,
) -> AppSession:
    return apply_forecast(session, await fetch_forecast_result(session, provider))


def fetch_threat_narrative(
    session: AppSession,
    advisor: ThreatAdvisorAgent = threat_advisor_agent,
) -> Optional[ThreatResult]:
    """
    Ask the advisor for a threat outlook, but only once the report, the
    profile and a non-empty forecast are all available.
    """
    view = session.view
    if not isinstance(view, AnalysisView) or session.profile is None or not view.forecasts:
        return None

    try:
        text = advisor.get_threat_analysis(session.profile, view.report, view.forecasts)
    except (AgentError, ThreatPreconditionError) as e:
        return ThreatResult(report_id=view.report.id, error=str(e))
    return ThreatResult(report_id=view.report.id, text=text)


def apply_threat_result(session: AppSession, result: Optional[ThreatResult]) -> AppSession:
    """Show the narrative only if the same report is still open."""
    view = session.view
    if result is None or not isinstance(view, AnalysisView) or view.report.id != result.report_id:
        if result is not None:
            logger.info("Dropping threat narrative for %s: report no longer open", result.report_id)
        return session
    return _with_view(session, replace(view, threat_text=result.text, threat_error=result.error))


def load_threat_narrative(
    session: AppSession,
    advisor: ThreatAdvisorAgent = threat_advisor_agent,
) -> AppSession:
    return apply_threat_result(session, fetch_threat_narrative(session, advisor))
