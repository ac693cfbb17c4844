"""
Record types shared by storage, the session logic and the agents.

Persisted records keep the camelCase keys of the stored JSON so that a
profile or report written by one version of the app reads back unchanged.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class FarmingType(str, Enum):
    SHRIMP = "Shrimp"
    FISH = "Fish"
    OTHER = "Other"


FARMING_TYPES: List[str] = [ft.value for ft in FarmingType]

REPORT_STATUSES: Tuple[str, ...] = ("Safe", "Warning", "Critical", "Unknown")

PARAMETER_KEYS: Tuple[str, ...] = (
    "pH",
    "salinity",
    "co2",
    "hco3",
    "totalMg",
    "totalCa",
    "totalHardness",
    "totalAmmoniaNitrogen",
    "unionizedAmmonia",
    "dissolvedOxygen",
    "iron",
    "h2s",
    "nitrite",
    "temperature",
    "chlorine",
)

PARAMETER_DISPLAY_ORDER: List[str] = [
    "pH", "salinity", "dissolvedOxygen", "temperature",
    "totalAmmoniaNitrogen", "unionizedAmmonia", "nitrite",
    "hco3", "co2", "totalHardness", "totalCa", "totalMg",
    "iron", "h2s", "chlorine",
]

PARAMETER_LABELS: Dict[str, str] = {
    "pH": "pH",
    "salinity": "Salinity",
    "co2": "CO2",
    "hco3": "HCO3",
    "totalMg": "Total Mg",
    "totalCa": "Total Ca",
    "totalHardness": "Total Hardness",
    "totalAmmoniaNitrogen": "Total Ammonia Nitrogen",
    "unionizedAmmonia": "Unionized Ammonia",
    "dissolvedOxygen": "Dissolved Oxygen",
    "iron": "Iron",
    "h2s": "H2S",
    "nitrite": "Nitrite",
    "temperature": "Temperature",
    "chlorine": "Chlorine",
}

PARAMETER_UNITS: Dict[str, str] = {
    "pH": "",
    "salinity": "ppt",
    "co2": "ppm",
    "hco3": "ppm",
    "totalMg": "ppm",
    "totalCa": "ppm",
    "totalHardness": "ppm",
    "totalAmmoniaNitrogen": "ppm",
    "unionizedAmmonia": "ppm",
    "dissolvedOxygen": "ppm",
    "iron": "ppm",
    "h2s": "ppm",
    "nitrite": "ppm",
    "temperature": "°C",
    "chlorine": "ppm",
}

# (min, max); salinity and temperature vary a lot by species
IDEAL_RANGES: Dict[str, Tuple[float, float]] = {
    "pH": (7.5, 8.5),
    "dissolvedOxygen": (5.0, 10.0),
    "totalAmmoniaNitrogen": (0.0, 0.5),
    "nitrite": (0.0, 0.2),
    "salinity": (5.0, 30.0),
    "temperature": (25.0, 32.0),
}


def parameter_label(key: str, with_unit: bool = False) -> str:
    label = PARAMETER_LABELS.get(key, key)
    unit = PARAMETER_UNITS.get(key, "")
    if with_unit and unit:
        return f"{label} ({unit})"
    return label


def format_value(key: str, value: Optional[float]) -> str:
    """Render a reading with its unit, or N/A when it is missing."""
    if value is None:
        return "N/A"
    return f"{value:g} {PARAMETER_UNITS.get(key, '')}".strip()


def empty_parameters() -> Dict[str, Optional[float]]:
    return {key: None for key in PARAMETER_KEYS}


def coerce_number(value: Any) -> Optional[float]:
    """Keep real numbers, turn everything else (bools, strings, NaN) into None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


def coerce_parameters(raw: Any) -> Dict[str, Optional[float]]:
    """
    Build a full 15-key parameter dict from whatever the caller passed.

    Unknown keys are dropped and missing keys become None, so the result
    always has exactly PARAMETER_KEYS.
    """
    params = empty_parameters()
    if not isinstance(raw, dict):
        return params
    for key in PARAMETER_KEYS:
        params[key] = coerce_number(raw.get(key))
    return params


@dataclass(frozen=True)
class UserProfile:
    id: str
    phone_number: str
    name: str
    farm_location: str
    farming_type: str
    farm_size: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "phoneNumber": self.phone_number,
            "name": self.name,
            "farmLocation": self.farm_location,
            "farmingType": self.farming_type,
            "farmSize": self.farm_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        """Raise KeyError/TypeError on a malformed record."""
        return cls(
            id=str(data["id"]),
            phone_number=str(data["phoneNumber"]),
            name=str(data["name"]),
            farm_location=str(data["farmLocation"]),
            farming_type=str(data["farmingType"]),
            farm_size=str(data["farmSize"]),
        )


@dataclass
class WaterReportAnalysis:
    id: str
    user_id: str
    timestamp: str
    parameters: Dict[str, Optional[float]]
    status: str
    suggestions: List[str] = field(default_factory=list)
    alerts: List[str] = field(default_factory=list)
    image_url: Optional[str] = None
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "userId": self.user_id,
            "timestamp": self.timestamp,
            "parameters": dict(self.parameters),
            "status": self.status,
            "suggestions": list(self.suggestions),
            "alerts": list(self.alerts),
            "notes": self.notes,
        }
        if self.image_url:
            data["imageUrl"] = self.image_url
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WaterReportAnalysis":
        return cls(
            id=str(data["id"]),
            user_id=str(data["userId"]),
            timestamp=str(data["timestamp"]),
            parameters=coerce_parameters(data.get("parameters")),
            status=str(data.get("status", "Unknown")),
            suggestions=[str(s) for s in data.get("suggestions") or []],
            alerts=[str(a) for a in data.get("alerts") or []],
            image_url=data.get("imageUrl"),
            notes=data.get("notes") or "",
        )


@dataclass(frozen=True)
class WeatherForecast:
    date: str
    condition: str
    temp_min: float
    temp_max: float
    icon: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "condition": self.condition,
            "tempMin": self.temp_min,
            "tempMax": self.temp_max,
            "icon": self.icon,
        }
