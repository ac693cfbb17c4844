from enum import Enum
from typing import Dict, List, Optional

from models import (
    IDEAL_RANGES,
    PARAMETER_DISPLAY_ORDER,
    WaterReportAnalysis,
    format_value,
    parameter_label,
)

# Above max by more than this factor is acute for these keys
TOXIC_KEYS = {"totalAmmoniaNitrogen", "nitrite"}
TOXIC_FACTOR = 1.5


class ParameterStatus(str, Enum):
    SAFE = "Safe"
    WARNING = "Warning"
    CRITICAL = "Critical"
    NORMAL = "Normal"


def get_parameter_status(key: str, value: Optional[float]) -> ParameterStatus:
    """
    Classify a single reading against its ideal range.

    Missing readings and keys without a configured range are Normal. Low
    dissolved oxygen is Critical; any other low reading is a Warning. High
    ammonia or nitrite beyond 1.5x the max is Critical, any other high
    reading is a Warning.
    """
    if value is None:
        return ParameterStatus.NORMAL
    bounds = IDEAL_RANGES.get(key)
    if bounds is None:
        return ParameterStatus.NORMAL

    low, high = bounds
    if value < low:
        if key == "dissolvedOxygen":
            return ParameterStatus.CRITICAL
        return ParameterStatus.WARNING
    if value > high:
        if key in TOXIC_KEYS and value > high * TOXIC_FACTOR:
            return ParameterStatus.CRITICAL
        return ParameterStatus.WARNING
    return ParameterStatus.SAFE


def parameter_rows(parameters: Dict[str, Optional[float]]) -> List[Dict[str, str]]:
    """Rows for the parameter table, in display order."""
    rows = []
    for key in PARAMETER_DISPLAY_ORDER:
        value = parameters.get(key)
        rows.append(
            {
                "key": key,
                "label": parameter_label(key),
                "value": format_value(key, value),
                "status": get_parameter_status(key, value).value,
            }
        )
    return rows


def has_status_disagreement(report: WaterReportAnalysis) -> bool:
    """
    True when the model called the water Safe but a reading is Critical.

    The overall status is never recomputed; this only lets the view point
    out the mismatch.
    """
    if report.status != "Safe":
        return False
    return any(
        get_parameter_status(key, value) is ParameterStatus.CRITICAL
        for key, value in report.parameters.items()
    )
