import pytest

from conftest import make_report
from logic.logic_analysis import (
    apply_threat_action,
    fetch_threat_action,
    view_latest_report_action,
    view_report_action,
)
from logic.logic_session import (
    AnalysisView,
    AppSession,
    DashboardView,
    EditView,
    EntryView,
    PastReportsView,
    ThreatResult,
)
from logic.logic_upload import save_edits_action
from logic.logic_user import load_session_action
from logic.logic_views import EDIT_FIELD_NAMES, RENDER_OUTPUTS
from storage import load_reports, save_profile


def test_save_edits_action_maps_fields_in_display_order(store, profile):
    draft = make_report("report-1", "2026-10-17T09:00:00+00:00")
    session = AppSession(store=store, profile=profile, view=EditView(draft=draft))
    fields = [""] * len(EDIT_FIELD_NAMES)
    fields[0] = "8.0"  # pH is shown first

    new_session, *updates = save_edits_action(session, "checked twice", *fields)

    assert isinstance(new_session.view, AnalysisView)
    assert new_session.view.report.parameters["pH"] == 8.0
    assert new_session.view.report.notes == "checked twice"
    assert len(updates) == len(RENDER_OUTPUTS)
    assert [r.id for r in load_reports(store)] == ["report-1"]


def test_save_edits_action_rejects_wrong_field_count(store, profile):
    draft = make_report("report-1", "2026-10-17T09:00:00+00:00")
    session = AppSession(store=store, profile=profile, view=EditView(draft=draft))

    with pytest.raises(ValueError):
        save_edits_action(session, "", "8.0")


def test_empty_dropdown_selection_keeps_view(store, profile):
    session = AppSession(store=store, profile=profile, view=DashboardView())
    new_session, *_ = view_report_action(session, None)
    assert isinstance(new_session.view, DashboardView)


def test_view_latest_opens_newest_owned_report(store, profile):
    reports = [
        make_report("report-2", "2026-10-02T00:00:00+00:00"),
        make_report("report-1", "2026-10-01T00:00:00+00:00"),
    ]
    session = AppSession(store=store, profile=profile, reports=reports, view=DashboardView())
    new_session, *_ = view_latest_report_action(session)

    assert new_session.view.report.id == "report-2"


def test_page_load_rereads_storage(store, profile):
    save_profile(store, profile)
    new_session, *_ = load_session_action(AppSession(store=store))

    assert new_session.profile == profile
    assert isinstance(new_session.view, EntryView)


def test_no_threat_fetch_outside_a_report(store, profile):
    assert fetch_threat_action(AppSession(store=store, profile=profile, view=DashboardView())) is None


def test_threat_result_merges_into_live_session_only(store, profile):
    report = make_report("report-1", "2026-10-01T00:00:00+00:00")
    result = ThreatResult(report_id="report-1", text="Threat: Heat")

    live = AppSession(store=store, profile=profile, reports=[report], view=PastReportsView())
    after, *_ = apply_threat_action(live, result)
    assert isinstance(after.view, PastReportsView)

    live = AppSession(store=store, profile=profile, reports=[report], view=AnalysisView(report=report))
    after, *_ = apply_threat_action(live, result)
    assert after.view.threat_text == "Threat: Heat"
