import pytest

from conftest import make_report
from logic.logic_status import (
    ParameterStatus,
    get_parameter_status,
    has_status_disagreement,
    parameter_rows,
)
from models import IDEAL_RANGES, PARAMETER_KEYS


@pytest.mark.parametrize("key", sorted(IDEAL_RANGES))
def test_below_minimum_is_critical_only_for_dissolved_oxygen(key):
    low, _ = IDEAL_RANGES[key]
    status = get_parameter_status(key, low - 0.01)
    if key == "dissolvedOxygen":
        assert status is ParameterStatus.CRITICAL
    else:
        assert status is ParameterStatus.WARNING


@pytest.mark.parametrize("key", ["totalAmmoniaNitrogen", "nitrite"])
def test_toxic_keys_escalate_above_one_and_a_half_times_max(key):
    _, high = IDEAL_RANGES[key]
    assert get_parameter_status(key, high * 1.5 + 0.001) is ParameterStatus.CRITICAL
    assert get_parameter_status(key, high * 1.5) is ParameterStatus.WARNING
    assert get_parameter_status(key, high + 0.001) is ParameterStatus.WARNING


def test_other_keys_above_max_stay_warning():
    assert get_parameter_status("pH", 12) is ParameterStatus.WARNING
    assert get_parameter_status("temperature", 60) is ParameterStatus.WARNING


@pytest.mark.parametrize("key", PARAMETER_KEYS)
def test_missing_value_is_normal(key):
    assert get_parameter_status(key, None) is ParameterStatus.NORMAL


def test_unconfigured_key_is_normal():
    assert get_parameter_status("iron", 99) is ParameterStatus.NORMAL
    assert get_parameter_status("notAKey", 1) is ParameterStatus.NORMAL


def test_bounds_are_inclusive():
    assert get_parameter_status("pH", 7.5) is ParameterStatus.SAFE
    assert get_parameter_status("pH", 8.5) is ParameterStatus.SAFE
    assert get_parameter_status("dissolvedOxygen", 6) is ParameterStatus.SAFE


def test_parameter_rows_cover_every_key_in_display_order():
    rows = parameter_rows({"pH": 9.0, "dissolvedOxygen": 3.0})
    assert [r["key"] for r in rows][:3] == ["pH", "salinity", "dissolvedOxygen"]
    assert len(rows) == 15
    by_key = {r["key"]: r for r in rows}
    assert by_key["pH"]["status"] == "Warning"
    assert by_key["dissolvedOxygen"]["value"] == "3 ppm"
    assert by_key["dissolvedOxygen"]["status"] == "Critical"
    assert by_key["iron"]["value"] == "N/A"


def test_overall_status_is_not_recomputed_but_disagreement_is_flagged():
    report = make_report("report-1", "2026-10-01T08:00:00+00:00", dissolvedOxygen=2.0)
    assert report.status == "Safe"
    assert has_status_disagreement(report)

    report.status = "Critical"
    assert not has_status_disagreement(report)
