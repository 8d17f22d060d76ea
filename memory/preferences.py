"""Per-user preference storage for analytics settings and dismissals."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from logic.neglect import DEFAULT_THRESHOLD_DAYS, resolve_neglect_threshold, validate_neglect_threshold

logger = logging.getLogger(__name__)


@dataclass
class UserPreferences:
    user_id: str
    neglect_threshold_days: Any = None
    dismissed_gap_ids: List[str] = field(default_factory=list)
    dismissed_resale_ids: List[str] = field(default_factory=list)
    resale_prompts_enabled: bool = True
    resale_prompt_log: Dict[str, str] = field(default_factory=dict)
    last_neglect_compute_at: Optional[str] = None


class UserPreferenceStore:
    """Simple JSON-backed preference store, one file per user."""

    def __init__(
        self, base_dir: str = "data/preferences", default_threshold_days: int = DEFAULT_THRESHOLD_DAYS
    ) -> None:
        self.base_dir = Path(base_dir)
        self.default_threshold_days = resolve_neglect_threshold(default_threshold_days)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, user_id: str) -> Path:
        safe_id = re.sub(r"[^A-Za-z0-9_.-]", "_", user_id)
        return self.base_dir / f"{safe_id}.json"

    def load(self, user_id: str) -> UserPreferences:
        path = self._path(user_id)
        if not path.exists():
            return UserPreferences(user_id=user_id)
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable preference file for user %s", user_id)
            return UserPreferences(user_id=user_id)
        known = {key: value for key, value in data.items() if key in UserPreferences.__dataclass_fields__}
        known["user_id"] = user_id
        return UserPreferences(**known)

    def save(self, preferences: UserPreferences) -> UserPreferences:
        self._path(preferences.user_id).write_text(json.dumps(asdict(preferences), indent=2))
        return preferences

    # Neglect threshold
    def get_neglect_threshold(self, user_id: str) -> int:
        return resolve_neglect_threshold(
            self.load(user_id).neglect_threshold_days, default=self.default_threshold_days
        )

    def set_neglect_threshold(self, user_id: str, days: Any) -> int:
        validated = validate_neglect_threshold(days)
        preferences = self.load(user_id)
        preferences.neglect_threshold_days = validated
        self.save(preferences)
        return validated

    def get_last_neglect_compute(self, user_id: str) -> Optional[datetime]:
        raw = self.load(user_id).last_neglect_compute_at
        return datetime.fromisoformat(raw) if raw else None

    def set_last_neglect_compute(self, user_id: str, when: datetime) -> None:
        preferences = self.load(user_id)
        preferences.last_neglect_compute_at = when.isoformat()
        self.save(preferences)

    # Gap dismissals
    def get_dismissed_gaps(self, user_id: str) -> Set[str]:
        return set(self.load(user_id).dismissed_gap_ids)

    def dismiss_gap(self, user_id: str, gap_id: str) -> Set[str]:
        preferences = self.load(user_id)
        if gap_id not in preferences.dismissed_gap_ids:
            preferences.dismissed_gap_ids.append(gap_id)
            self.save(preferences)
        return set(preferences.dismissed_gap_ids)

    def undismiss_gap(self, user_id: str, gap_id: str) -> Set[str]:
        preferences = self.load(user_id)
        if gap_id in preferences.dismissed_gap_ids:
            preferences.dismissed_gap_ids.remove(gap_id)
            self.save(preferences)
        return set(preferences.dismissed_gap_ids)

    # Resale prompts
    def get_dismissed_resale(self, user_id: str) -> Set[str]:
        return set(self.load(user_id).dismissed_resale_ids)

    def dismiss_resale(self, user_id: str, item_id: str) -> None:
        preferences = self.load(user_id)
        if item_id not in preferences.dismissed_resale_ids:
            preferences.dismissed_resale_ids.append(item_id)
            self.save(preferences)

    def reset_resale_dismissals(self, user_id: str) -> None:
        preferences = self.load(user_id)
        preferences.dismissed_resale_ids = []
        self.save(preferences)

    def resale_prompts_enabled(self, user_id: str) -> bool:
        return bool(self.load(user_id).resale_prompts_enabled)

    def set_resale_prompts_enabled(self, user_id: str, enabled: bool) -> None:
        preferences = self.load(user_id)
        preferences.resale_prompts_enabled = bool(enabled)
        self.save(preferences)

    def record_resale_prompt(self, user_id: str, item_id: str, when: datetime) -> None:
        preferences = self.load(user_id)
        preferences.resale_prompt_log[item_id] = when.isoformat()
        self.save(preferences)

    def get_resale_prompt_log(self, user_id: str) -> Dict[str, datetime]:
        return {
            item_id: datetime.fromisoformat(stamp)
            for item_id, stamp in self.load(user_id).resale_prompt_log.items()
        }


__all__ = ["UserPreferenceStore", "UserPreferences"]
