"""Neglect threshold preferences and a debounced recompute of neglect flags."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from closet_app.logging_config import get_logger, log_event
from logic.neglect import NeglectStats, get_neglect_stats, is_neglected
from memory.preferences import UserPreferenceStore
from tools.observability import instrument_tool
from tools.wardrobe_source import WardrobeSource

COMPUTE_DEBOUNCE = timedelta(hours=24)

logger = get_logger(__name__)


class NeglectService:
    def __init__(
        self,
        source: WardrobeSource,
        preferences: UserPreferenceStore,
        clock: Optional[Callable[[], datetime]] = None,
        debounce: timedelta = COMPUTE_DEBOUNCE,
    ) -> None:
        self.source = source
        self.preferences = preferences
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.debounce = debounce

    def get_threshold(self, user_id: str) -> int:
        return self.preferences.get_neglect_threshold(user_id)

    def set_threshold(self, user_id: str, days: Any) -> int:
        """Persist a new threshold; raises ``ValueError`` outside 30-365 days."""

        stored = self.preferences.set_neglect_threshold(user_id, days)
        log_event(logger, logging.INFO, "neglect_threshold_updated", user_id=user_id, days=stored)
        return stored

    @instrument_tool("neglect.recompute")
    def recompute_statuses(self, user_id: str, force: bool = False) -> Optional[Dict[str, bool]]:
        """Refresh every item's neglect flag at most once per debounce window.

        Returns the computed flags, or ``None`` when the run was skipped.
        """

        now = self.clock()
        last = self.preferences.get_last_neglect_compute(user_id)
        if not force and last is not None and now - last < self.debounce:
            log_event(logger, logging.DEBUG, "neglect_recompute_skipped", user_id=user_id)
            return None

        threshold = self.get_threshold(user_id)
        statuses = {
            item.item_id: is_neglected(item, threshold, now) for item in self.source.list_items(user_id)
        }
        changed = self.source.update_neglect_statuses(user_id, statuses)
        self.preferences.set_last_neglect_compute(user_id, now)
        log_event(
            logger,
            logging.INFO,
            "neglect_recomputed",
            user_id=user_id,
            threshold_days=threshold,
            items=len(statuses),
            changed=changed,
        )
        return statuses

    def get_stats(self, user_id: str) -> NeglectStats:
        return get_neglect_stats(self.source.list_items(user_id), now=self.clock())


__all__ = ["NeglectService"]
