import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from app_config import DATA_DIR
from models import UserProfile, WaterReportAnalysis

logger = logging.getLogger(__name__)

PROFILE_KEY = "digitalAquaUserProfile"
REPORTS_KEY = "digitalAquaWaterReports"


class CorruptedEntryError(ValueError):
    """A stored entry exists but cannot be decoded."""


def atomic_write_json(path: str | Path, obj: Any) -> None:
    p = Path(path)
    parent = p.parent
    parent.mkdir(parents=True, exist_ok=True)

    fd, tmp = tempfile.mkstemp(prefix=".tmp_entry_", dir=str(parent), text=True)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
    os.replace(tmp, str(p))


def now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class LocalStore:
    """
    Key-value store with one JSON file per key, the on-disk counterpart of
    browser local storage. Writes go through a temp file and a rename.
    """

    def __init__(self, base_dir: str | Path = DATA_DIR):
        self.base_dir = Path(base_dir)

    def path_for(self, key: str) -> Path:
        return self.base_dir / f"{key}.json"

    def has(self, key: str) -> bool:
        return self.path_for(key).exists()

    def get(self, key: str) -> Any:
        """Return the decoded value, None if absent; raise CorruptedEntryError if unreadable."""
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptedEntryError(f"{key}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        atomic_write_json(self.path_for(key), value)

    def remove(self, key: str) -> None:
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            pass


# ================== Profile / reports ==================


def load_profile(store: LocalStore) -> Optional[UserProfile]:
    """Load the stored profile; a corrupted entry is removed and treated as absent."""
    try:
        data = store.get(PROFILE_KEY)
        if data is None:
            return None
        return UserProfile.from_dict(data)
    except (CorruptedEntryError, KeyError, TypeError) as e:
        logger.warning("Discarding stored profile: %s", e)
        store.remove(PROFILE_KEY)
        return None


def save_profile(store: LocalStore, profile: UserProfile) -> None:
    store.set(PROFILE_KEY, profile.to_dict())


def load_reports(store: LocalStore) -> List[WaterReportAnalysis]:
    try:
        data = store.get(REPORTS_KEY)
        if data is None:
            return []
        if not isinstance(data, list):
            raise TypeError("report list is not a JSON array")
        return [WaterReportAnalysis.from_dict(item) for item in data]
    except (CorruptedEntryError, KeyError, TypeError) as e:
        logger.warning("Discarding stored reports: %s", e)
        store.remove(REPORTS_KEY)
        return []


def save_reports(store: LocalStore, reports: List[WaterReportAnalysis]) -> None:
    store.set(REPORTS_KEY, [r.to_dict() for r in reports])
