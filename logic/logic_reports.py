from datetime import datetime
from typing import Dict, List, Optional, Tuple

import pandas as pd

from models import (
    IDEAL_RANGES,
    PARAMETER_KEYS,
    WaterReportAnalysis,
    format_value,
    parameter_label,
)

BAR_CHART_KEYS = ["pH", "dissolvedOxygen", "totalAmmoniaNitrogen", "nitrite", "salinity", "temperature"]

STATUS_EMOJI = {"Safe": "🟢", "Warning": "🟡", "Critical": "🔴", "Unknown": "⚪"}


def report_date(report: WaterReportAnalysis, fmt: str = "%b %d, %Y") -> str:
    try:
        return datetime.fromisoformat(report.timestamp).astimezone().strftime(fmt)
    except ValueError:
        return report.timestamp


def short_id(report: WaterReportAnalysis) -> str:
    return f"...{report.id[-6:]}"


def latest_report(reports: List[WaterReportAnalysis]) -> Optional[WaterReportAnalysis]:
    """Reports are kept newest first, so this is just the head."""
    return reports[0] if reports else None


def latest_summary_markdown(report: WaterReportAnalysis) -> str:
    p = report.parameters
    return (
        "### Latest Report Summary\n"
        f"Date: {report_date(report)}  \n"
        f"**Overall Status: {STATUS_EMOJI.get(report.status, '')} {report.status}**\n\n"
        f"pH: {format_value('pH', p.get('pH'))} · "
        f"D.O: {format_value('dissolvedOxygen', p.get('dissolvedOxygen'))} · "
        f"Ammonia: {format_value('totalAmmoniaNitrogen', p.get('totalAmmoniaNitrogen'))} · "
        f"Nitrite: {format_value('nitrite', p.get('nitrite'))}"
    )


def suggestions_markdown(report: WaterReportAnalysis) -> str:
    items = list(report.suggestions) + list(report.alerts)
    if not items:
        return "No specific suggestions at this time. Monitor regularly."
    return "\n".join(f"- {s}" for s in items)


def history_choices(reports: List[WaterReportAnalysis]) -> List[Tuple[str, str]]:
    """(label, report id) pairs for the past-reports dropdown."""
    return [
        (f"{report_date(r)} · {short_id(r)} · {r.status}", r.id)
        for r in reports
    ]


def history_markdown(reports: List[WaterReportAnalysis]) -> str:
    if not reports:
        return "No past reports found. Upload your first report to get started!"
    lines = []
    for r in reports:
        p = r.parameters
        line = (
            f"- **{report_date(r)}** · Report ID: {short_id(r)} · Status: **{r.status}** · "
            f"pH: {format_value('pH', p.get('pH'))} | "
            f"D.O: {format_value('dissolvedOxygen', p.get('dissolvedOxygen'))}"
        )
        if r.suggestions:
            line += f"  \n  Suggestion: {r.suggestions[0]}"
        lines.append(line)
    return "\n".join(lines)


def parameter_bar_frame(parameters: Dict[str, Optional[float]]) -> pd.DataFrame:
    """Key parameters with their ideal bounds; missing readings are left out."""
    rows = []
    for key in BAR_CHART_KEYS:
        value = parameters.get(key)
        if value is None:
            continue
        low, high = IDEAL_RANGES.get(key, (None, None))
        rows.append(
            {
                "parameter": parameter_label(key),
                "value": value,
                "ideal_min": low,
                "ideal_max": high,
            }
        )
    return pd.DataFrame(rows, columns=["parameter", "value", "ideal_min", "ideal_max"])


def trend_frame(reports: List[WaterReportAnalysis], key: str) -> pd.DataFrame:
    """
    One parameter across reports, oldest first for plotting. Empty when
    fewer than two readings exist.
    """
    columns = ["date", "value"]
    if key not in PARAMETER_KEYS:
        return pd.DataFrame(columns=columns)
    rows = [
        {"date": report_date(r, "%b %d"), "value": r.parameters.get(key)}
        for r in reversed(reports)
        if r.parameters.get(key) is not None
    ]
    if len(rows) < 2:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(rows, columns=columns)
