from logic.logic_session import (
    AppSession,
    analyze_upload,
    apply_draft_edits,
    back_to_dashboard,
    cancel_edit,
    open_past_reports,
    open_upload,
    save_draft,
)
from logic.logic_views import EDIT_FIELD_NAMES, respond
from models import PARAMETER_DISPLAY_ORDER


# ================== Navigation ==================


def open_upload_action(session: AppSession):
    return respond(open_upload(session))


def open_past_reports_action(session: AppSession):
    return respond(open_past_reports(session))


def back_to_dashboard_action(session: AppSession):
    return respond(back_to_dashboard(session))


# ================== Upload / review / save ==================


def analyze_upload_action(session: AppSession, image_path):
    """Gradio callback: send the uploaded photo to the extractor."""
    return respond(analyze_upload(session, image_path))


def cancel_edit_action(session: AppSession):
    return respond(cancel_edit(session))


def save_edits_action(session: AppSession, notes, *field_values):
    """
    Gradio callback: apply the review form and save the report.

    field_values arrive in PARAMETER_DISPLAY_ORDER, matching EDIT_FIELD_NAMES.
    """
    if len(field_values) != len(EDIT_FIELD_NAMES):
        raise ValueError(f"expected {len(EDIT_FIELD_NAMES)} parameter fields, got {len(field_values)}")
    values = dict(zip(PARAMETER_DISPLAY_ORDER, field_values))
    session = apply_draft_edits(session, values, notes)
    return respond(save_draft(session))
