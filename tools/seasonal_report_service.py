"""Seasonal reports with year-over-year comparison from cached history."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from closet_app.logging_config import get_logger, log_event
from logic.periods import get_season_date_range, get_season_for_month, get_season_year, get_transition_alert
from logic.seasonal_readiness import SeasonalReport, build_comparison_text, build_seasonal_report
from logic.validation import SeasonalReportRequest
from memory.result_cache import ResultCache
from tools.observability import instrument_tool
from tools.wardrobe_source import WardrobeSource

logger = get_logger(__name__)


@dataclass
class SeasonalReportResult:
    current_season: str
    current_year: int
    current_report: SeasonalReport
    previous_year_report: Optional[SeasonalReport]
    comparison_text: str
    transition_alert: Optional[str] = None


def history_key(user_id: str, season: str, year: int) -> str:
    return f"seasonal_report_{user_id}_{season}_{year}"


class SeasonalReportService:
    """Builds the current report, caches it, and compares against last year's."""

    def __init__(
        self,
        source: WardrobeSource,
        cache: ResultCache,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.source = source
        self.cache = cache
        self.today = today or date.today

    def _generate(self, user_id: str, season: str, year: int) -> SeasonalReport:
        period = get_season_date_range(season, year)
        items = self.source.list_items(user_id)
        wear_logs = self.source.list_wear_logs(user_id, period.start, period.end)
        return build_seasonal_report(items, wear_logs, season, year)

    def _previous_report(self, user_id: str, season: str, year: int) -> Optional[SeasonalReport]:
        cached = self.cache.get(history_key(user_id, season, year))
        if cached is not None:
            return SeasonalReport.from_dict(cached)

        report = self._generate(user_id, season, year)
        if report.total_items_for_season == 0 and report.total_wears == 0:
            return None
        self.cache.set(history_key(user_id, season, year), report.to_dict())
        return report

    @instrument_tool("seasonal_report.get", input_model=SeasonalReportRequest)
    def get_seasonal_report(
        self, *, user_id: str, season: Optional[str] = None, year: Optional[int] = None
    ) -> SeasonalReportResult:
        today = self.today()
        target_season = season or get_season_for_month(today.month)
        # Jan/Feb belong to the winter that started the previous December.
        target_year = year or (get_season_year(today) if season is None else today.year)

        current = self._generate(user_id, target_season, target_year)
        self.cache.set(history_key(user_id, target_season, target_year), current.to_dict())

        previous = self._previous_report(user_id, target_season, target_year - 1)
        comparison = build_comparison_text(
            target_season, current.total_wears, previous.total_wears if previous else None
        )
        log_event(
            logger,
            logging.INFO,
            "seasonal_report_generated",
            season=target_season,
            year=target_year,
            readiness_score=current.readiness_score,
            has_previous=previous is not None,
        )
        return SeasonalReportResult(
            current_season=target_season,
            current_year=target_year,
            current_report=current,
            previous_year_report=previous,
            comparison_text=comparison,
            transition_alert=get_transition_alert(today),
        )


__all__ = ["SeasonalReportResult", "SeasonalReportService", "history_key"]
