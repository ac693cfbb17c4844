"""
Turn an AppSession into Gradio component updates.

Every callback returns ``respond(session)``: the new session followed by one
update per name in RENDER_OUTPUTS. app.py binds the components in the same
order.
"""

import html
from typing import Any, List, Tuple

import gradio as gr

from app_config import MOCK_OTP
from logic.logic_reports import (
    history_choices,
    history_markdown,
    latest_report,
    latest_summary_markdown,
    parameter_bar_frame,
    report_date,
    short_id,
    suggestions_markdown,
    trend_frame,
)
from logic.logic_session import (
    AnalysisView,
    AppSession,
    DashboardView,
    EditView,
    EntryView,
    OtpView,
    PastReportsView,
    RegistrationView,
    UploadView,
    ensure_valid_view,
    owned_reports,
)
from logic.logic_status import has_status_disagreement, parameter_rows
from logic.logic_threats import render_threat_markdown
from models import PARAMETER_DISPLAY_ORDER, WeatherForecast
from weather import condition_emoji

PANELS = [
    ("entry_panel", EntryView),
    ("otp_panel", OtpView),
    ("registration_panel", RegistrationView),
    ("dashboard_panel", DashboardView),
    ("upload_panel", UploadView),
    ("edit_panel", EditView),
    ("analysis_panel", AnalysisView),
    ("history_panel", PastReportsView),
]

EDIT_FIELD_NAMES = [f"edit_{key}" for key in PARAMETER_DISPLAY_ORDER]

RENDER_OUTPUTS: List[str] = (
    [name for name, _ in PANELS]
    + [
        "logout_btn",
        # phone verification
        "otp_phone_group",
        "otp_code_group",
        "otp_sent_info",
        "otp_error",
        "otp_code",
        # registration
        "reg_phone_info",
        "reg_error",
        # dashboard
        "dash_greeting",
        "dash_latest",
        "dash_view_latest_btn",
        "dash_history_btn",
        "dash_weather",
        "dash_trend",
        "dash_empty",
        # upload
        "upload_error",
        "upload_image",
        # edit
        "edit_image",
        "edit_notes",
    ]
    + EDIT_FIELD_NAMES
    + [
        # analysis
        "analysis_header",
        "analysis_threat",
        "analysis_mismatch",
        "analysis_quality",
        "analysis_suggestions",
        "analysis_notes",
        "analysis_image",
        "analysis_weather",
        "analysis_chart",
        "analysis_back_btn",
        # history
        "history_dropdown",
        "history_list",
    ]
)

STATUS_BADGES = {"Safe": "🟢", "Warning": "🟡", "Critical": "🔴", "Normal": "⚪"}


def weather_markdown(forecasts: List[WeatherForecast]) -> str:
    if not forecasts:
        return "### 🌦️ 6-Day Weather Outlook\nWeather data not available."
    lines = ["### 🌦️ 6-Day Weather Outlook"]
    for day in forecasts[:6]:
        lines.append(
            f"- {condition_emoji(day.condition)} **{day.date}** · {day.condition} · "
            f"{day.temp_min:g}°-{day.temp_max:g}°C"
        )
    return "\n".join(lines)


def quality_markdown(report) -> str:
    lines = [
        f"### Water Quality Parameters\n**Overall Status:** {report.status}\n",
        "| Parameter | Value | Status |",
        "|---|---|---|",
    ]
    for row in parameter_rows(report.parameters):
        badge = STATUS_BADGES.get(row["status"], "")
        lines.append(f"| {row['label']} | {row['value']} | {badge} {row['status']} |")
    return "\n".join(lines)


def threat_markdown(view: AnalysisView) -> str:
    header = "### 🔮 6-Day Threat Outlook & Advice\n"
    if view.threat_error:
        return header + f"❌ Failed to generate threat analysis: {view.threat_error}"
    if view.threat_text:
        return header + render_threat_markdown(view.threat_text)
    if not view.forecasts:
        return header + "No threat analysis available at this time."
    return header + "Analyzing potential threats based on current water quality and 6-day weather forecast..."


def image_html(data_uri: str | None) -> str:
    if not data_uri:
        return ""
    return (
        f'<img src="{html.escape(data_uri, quote=True)}" alt="Water report" '
        'style="max-width:100%;max-height:24rem;border-radius:6px;" />'
    )


def _error_md(message: str) -> str:
    return f"❌ {message}" if message else ""


def render_session(session: AppSession) -> Tuple[Any, ...]:
    view = session.view
    profile = session.profile
    reports = owned_reports(session)
    keep = gr.update()
    out = {name: keep for name in RENDER_OUTPUTS}

    for name, view_type in PANELS:
        out[name] = gr.update(visible=isinstance(view, view_type))
    out["logout_btn"] = gr.update(visible=profile is not None and not isinstance(view, (EntryView, OtpView)))

    if isinstance(view, OtpView):
        out["otp_phone_group"] = gr.update(visible=not view.otp_sent)
        out["otp_code_group"] = gr.update(visible=view.otp_sent)
        out["otp_sent_info"] = f"OTP sent to {view.phone_number}. (Mock: {MOCK_OTP})" if view.otp_sent else ""
        out["otp_error"] = _error_md(view.error)
        out["otp_code"] = gr.update(value="")

    if isinstance(view, RegistrationView):
        out["reg_phone_info"] = f"Registering for phone: {view.phone_number}"
        out["reg_error"] = _error_md(view.error)

    if isinstance(view, DashboardView) and profile is not None:
        latest = latest_report(reports)
        trend = trend_frame(reports, "pH")
        out["dash_greeting"] = f"## Welcome back, {profile.name}!"
        out["dash_latest"] = latest_summary_markdown(latest) if latest else ""
        out["dash_view_latest_btn"] = gr.update(visible=latest is not None)
        out["dash_history_btn"] = gr.update(
            value=f"View Past Reports ({len(reports)})",
            interactive=bool(reports),
        )
        out["dash_weather"] = weather_markdown(view.forecasts)
        out["dash_trend"] = gr.update(value=trend, visible=not trend.empty)
        out["dash_empty"] = (
            "" if reports
            else "ℹ️ No reports yet. Upload your first water quality report to see analysis and trends."
        )

    if isinstance(view, UploadView):
        out["upload_error"] = _error_md(view.error)
    else:
        out["upload_image"] = gr.update(value=None)

    if isinstance(view, EditView):
        draft = view.draft
        out["edit_image"] = image_html(draft.image_url)
        out["edit_notes"] = gr.update(value=draft.notes)
        for key, name in zip(PARAMETER_DISPLAY_ORDER, EDIT_FIELD_NAMES):
            value = draft.parameters.get(key)
            out[name] = gr.update(value="" if value is None else repr(value))

    if isinstance(view, AnalysisView):
        report = view.report
        out["analysis_header"] = (
            "## Water Analysis Report\n"
            f"Report ID: {short_id(report)} | Date: {report_date(report, '%b %d, %Y %H:%M')}"
        )
        out["analysis_threat"] = threat_markdown(view)
        out["analysis_mismatch"] = (
            "⚠️ Some readings are critical even though the overall status says Safe. "
            "Please double-check the values."
            if has_status_disagreement(report) else ""
        )
        out["analysis_quality"] = quality_markdown(report)
        out["analysis_suggestions"] = "### Suggestions & Alerts\n" + suggestions_markdown(report)
        out["analysis_notes"] = f"### Your Notes\n{report.notes}" if report.notes else ""
        out["analysis_image"] = image_html(report.image_url)
        out["analysis_weather"] = weather_markdown(view.forecasts)
        out["analysis_chart"] = gr.update(value=parameter_bar_frame(report.parameters))
        out["analysis_back_btn"] = gr.update(
            value="Back to Past Reports" if len(reports) > 1 else "Back to Dashboard"
        )

    if isinstance(view, PastReportsView):
        out["history_dropdown"] = gr.update(choices=history_choices(reports), value=None)
        out["history_list"] = history_markdown(reports)

    return tuple(out[name] for name in RENDER_OUTPUTS)


def respond(session: AppSession) -> Tuple[Any, ...]:
    """New session state followed by all view updates."""
    session = ensure_valid_view(session)
    return (session,) + render_session(session)
