import json

from conftest import make_report
from storage import (
    PROFILE_KEY,
    REPORTS_KEY,
    LocalStore,
    load_profile,
    load_reports,
    save_profile,
    save_reports,
)


def test_profile_round_trip_survives_restart(store, profile):
    save_profile(store, profile)

    restarted = LocalStore(store.base_dir)
    assert load_profile(restarted) == profile


def test_profile_is_stored_under_fixed_key_with_camel_case_fields(store, profile):
    save_profile(store, profile)

    with store.path_for(PROFILE_KEY).open(encoding="utf-8") as f:
        data = json.load(f)
    assert data["phoneNumber"] == "9876543210"
    assert data["farmLocation"] == "Visakhapatnam"
    assert store.path_for(PROFILE_KEY).name == "digitalAquaUserProfile.json"


def test_corrupted_profile_is_cleared(store):
    store.base_dir.mkdir(parents=True)
    store.path_for(PROFILE_KEY).write_text("{not json", encoding="utf-8")

    assert load_profile(store) is None
    assert not store.has(PROFILE_KEY)


def test_profile_with_missing_fields_is_cleared(store):
    store.set(PROFILE_KEY, {"id": "user-1"})

    assert load_profile(store) is None
    assert not store.has(PROFILE_KEY)


def test_missing_entries_load_as_empty(store):
    assert load_profile(store) is None
    assert load_reports(store) == []


def test_reports_round_trip(store):
    reports = [
        make_report("report-2", "2026-10-02T08:00:00+00:00", pH=8.1),
        make_report("report-1", "2026-10-01T08:00:00+00:00", pH=7.7),
    ]
    reports[0].notes = "pond 3"
    reports[0].image_url = "data:image/png;base64,AAAA"
    save_reports(store, reports)

    loaded = load_reports(store)
    assert [r.id for r in loaded] == ["report-2", "report-1"]
    assert loaded[0].notes == "pond 3"
    assert loaded[0].image_url == "data:image/png;base64,AAAA"
    assert len(loaded[1].parameters) == 15


def test_report_list_that_is_not_an_array_is_cleared(store):
    store.set(REPORTS_KEY, {"oops": True})

    assert load_reports(store) == []
    assert not store.has(REPORTS_KEY)


def test_remove_missing_key_is_noop(store):
    store.remove(PROFILE_KEY)
    assert not store.has(PROFILE_KEY)
