"""Resale prompts gated by a global toggle, dismissals and a prompt cooldown."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from closet_app.logging_config import get_logger, log_event
from logic.brand_analytics import CURRENCY_SYMBOL
from logic.resale import ResaleCandidate, ResalePrompt, get_resale_candidates, select_resale_prompts
from memory.preferences import UserPreferenceStore
from tools.observability import instrument_tool
from tools.wardrobe_source import WardrobeSource

PROMPT_COOLDOWN = timedelta(days=30)

logger = get_logger(__name__)


class ResalePromptService:
    def __init__(
        self,
        source: WardrobeSource,
        preferences: UserPreferenceStore,
        clock: Optional[Callable[[], datetime]] = None,
        currency: str = CURRENCY_SYMBOL,
    ) -> None:
        self.source = source
        self.preferences = preferences
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.currency = currency

    def _recently_prompted(self, user_id: str, now: datetime) -> set[str]:
        return {
            item_id
            for item_id, prompted_at in self.preferences.get_resale_prompt_log(user_id).items()
            if now - prompted_at < PROMPT_COOLDOWN
        }

    @instrument_tool("resale.prompts")
    def get_prompts(self, user_id: str) -> List[ResalePrompt]:
        if not self.preferences.resale_prompts_enabled(user_id):
            return []
        now = self.clock()
        return select_resale_prompts(
            self.source.list_items(user_id),
            dismissed_ids=self.preferences.get_dismissed_resale(user_id),
            recently_prompted_ids=self._recently_prompted(user_id, now),
            now=now,
            currency=self.currency,
        )

    def mark_prompted(self, user_id: str, item_id: str) -> None:
        self.preferences.record_resale_prompt(user_id, item_id, self.clock())

    def dismiss(self, user_id: str, item_id: str) -> None:
        self.preferences.dismiss_resale(user_id, item_id)
        log_event(logger, logging.INFO, "resale_prompt_dismissed", user_id=user_id, item_id=item_id)

    def reset_dismissals(self, user_id: str) -> None:
        self.preferences.reset_resale_dismissals(user_id)

    def set_enabled(self, user_id: str, enabled: bool) -> None:
        self.preferences.set_resale_prompts_enabled(user_id, enabled)

    def get_candidates(self, user_id: str) -> List[ResaleCandidate]:
        return get_resale_candidates(self.source.list_items(user_id), now=self.clock())


__all__ = ["PROMPT_COOLDOWN", "ResalePromptService"]
