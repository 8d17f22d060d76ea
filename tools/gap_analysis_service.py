"""Gap analysis with per-user dismissals and a short-lived result cache."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from closet_app.logging_config import get_logger, log_event
from logic.gap_analysis import GapAnalysisResult, apply_dismissals, detect_basic_gaps
from models.taxonomy import GENDER_SKIP_CATEGORIES
from logic.validation import GapAnalysisRequest
from memory.preferences import UserPreferenceStore
from memory.result_cache import ResultCache
from tools.observability import instrument_tool
from tools.wardrobe_source import WardrobeSource

DEFAULT_CACHE_TTL_SECONDS = 24 * 60 * 60

logger = get_logger(__name__)


def gender_variant(gender: Optional[str]) -> str:
    """Genders without category skips share the unfiltered result."""

    return gender if gender in GENDER_SKIP_CATEGORIES else "any"


def cache_key(user_id: str, gender: Optional[str] = None) -> str:
    return f"gap_analysis_{user_id}_{gender_variant(gender)}"


class GapAnalysisService:
    """Runs gap detection, caching raw gaps and applying dismissals on every read."""

    def __init__(
        self,
        source: WardrobeSource,
        preferences: UserPreferenceStore,
        cache: ResultCache,
        ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
    ) -> None:
        self.source = source
        self.preferences = preferences
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self.cache.clock(), tz=timezone.utc)

    @instrument_tool("gap_analysis.analyze", input_model=GapAnalysisRequest)
    def analyze_wardrobe(
        self, *, user_id: str, gender: Optional[str] = None, force_refresh: bool = False
    ) -> GapAnalysisResult:
        dismissed = self.preferences.get_dismissed_gaps(user_id)

        if not force_refresh:
            cached = self.cache.get(cache_key(user_id, gender), ttl_seconds=self.ttl_seconds)
            if cached is not None:
                raw = GapAnalysisResult.from_dict(cached)
                log_event(logger, logging.DEBUG, "gap_analysis_cache_hit", user_id=user_id)
                return apply_dismissals(raw.gaps, dismissed, analyzed_at=raw.last_analyzed_at)

        analyzed_at = self._now()
        items = self.source.list_items(user_id)
        gaps = detect_basic_gaps(items, gender=gender, today=analyzed_at.date())
        raw = GapAnalysisResult(
            gaps=gaps,
            total_gaps=len(gaps),
            critical_count=sum(1 for gap in gaps if gap.severity == "critical"),
            last_analyzed_at=analyzed_at,
        )
        # Cached without dismissals so dismissing never requires a re-run.
        self.cache.set(cache_key(user_id, gender), raw.to_dict(), stored_at=analyzed_at.timestamp())
        return apply_dismissals(gaps, dismissed, analyzed_at=analyzed_at)

    def dismiss_gap(self, user_id: str, gap_id: str) -> None:
        self.preferences.dismiss_gap(user_id, gap_id)
        log_event(logger, logging.INFO, "gap_dismissed", user_id=user_id, gap_id=gap_id)

    def undismiss_gap(self, user_id: str, gap_id: str) -> None:
        self.preferences.undismiss_gap(user_id, gap_id)
        log_event(logger, logging.INFO, "gap_undismissed", user_id=user_id, gap_id=gap_id)

    def invalidate_cache(self, user_id: str) -> None:
        for variant in ("any", *GENDER_SKIP_CATEGORIES):
            self.cache.invalidate(cache_key(user_id, variant))


__all__ = ["GapAnalysisService", "cache_key", "gender_variant"]
