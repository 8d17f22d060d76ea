"""Closet insights app bootstrap: wires data source, stores and services."""

from __future__ import annotations

from datetime import date, datetime, timezone
import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from pydantic import ValidationError

from closet_app.config import AnalyticsConfig
from closet_app.logging_config import configure_logging, get_logger, log_event, operation_context
from logic.brand_analytics import BrandAnalytics, get_brand_analytics
from logic.health_score import HealthScore, calculate_health_score
from logic.heatmap import DayDetail, HeatmapData, build_heatmap, day_detail
from logic.periods import get_date_range
from logic.sustainability import SustainabilityScore, calculate_sustainability_score
from logic.trip_packing import DayEvent, OutfitSelector, PackingList, TripEvent, build_packing_list
from logic.validation import HeatmapRequest, TripInput, validation_failure
from logic.wardrobe_stats import WardrobeStats, calculate_wardrobe_stats
from memory.preferences import UserPreferenceStore
from memory.result_cache import build_result_cache
from tools.gap_analysis_service import GapAnalysisService
from tools.neglect_service import NeglectService
from tools.resale_prompt_service import ResalePromptService
from tools.seasonal_report_service import SeasonalReportService
from tools.wardrobe_source import InMemoryWardrobeSource, WardrobeSource

LOGGER = get_logger(__name__)


class ClosetInsightsApp:
    """Single entry point for wardrobe analytics over one data source."""

    def __init__(
        self,
        config: AnalyticsConfig | None = None,
        source: WardrobeSource | None = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = config or AnalyticsConfig.from_env()
        configure_logging()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

        self.source = source or InMemoryWardrobeSource()
        self.preferences = UserPreferenceStore(
            self.config.preferences_path, default_threshold_days=self.config.neglect_threshold_days
        )
        self.cache = build_result_cache(
            self.config.cache_backend,
            self.config.cache_path,
            clock=lambda: self.clock().timestamp(),
        )

        self.gap_analysis = GapAnalysisService(
            self.source, self.preferences, self.cache, ttl_seconds=self.config.gap_cache_ttl_seconds
        )
        self.seasonal_reports = SeasonalReportService(self.source, self.cache, today=self.today)
        self.neglect = NeglectService(self.source, self.preferences, clock=self.clock)
        self.resale_prompts = ResalePromptService(
            self.source, self.preferences, clock=self.clock, currency=self.config.currency_symbol
        )

    def today(self) -> date:
        return self.clock().date()

    def health_score(self, user_id: str) -> HealthScore:
        return calculate_health_score(self.source.list_items(user_id))

    def sustainability_score(
        self, user_id: str, resale_statuses: Optional[Mapping[str, str]] = None
    ) -> SustainabilityScore:
        """``resale_statuses`` maps item ids to their resale state, as tracked by the caller."""

        return calculate_sustainability_score(
            self.source.list_items(user_id),
            self.source.list_wear_logs(user_id),
            resale_statuses=resale_statuses,
            now=self.clock(),
        )

    def brand_analytics(self, user_id: str, category_filter: Optional[str] = None) -> BrandAnalytics:
        return get_brand_analytics(
            self.source.list_items(user_id),
            self.source.list_wear_logs(user_id),
            category_filter=category_filter,
            currency=self.config.currency_symbol,
        )

    def wardrobe_stats(self, user_id: str) -> WardrobeStats:
        return calculate_wardrobe_stats(
            self.source.list_items(user_id),
            self.source.list_wear_logs(user_id),
            today=self.today(),
            threshold_days=self.neglect.get_threshold(user_id),
            now=self.clock(),
            currency=self.config.currency_symbol,
        )

    def heatmap(self, payload: Dict[str, Any]) -> HeatmapData | Dict[str, Any]:
        """Heatmap for a period; invalid payloads return a review payload instead of raising."""

        try:
            request = HeatmapRequest.model_validate(payload)
        except ValidationError as exc:
            log_event(LOGGER, logging.WARNING, "app_request_invalid", method="heatmap", details=str(exc))
            return validation_failure("Invalid heatmap request", exc)

        today = self.today()
        period = get_date_range(request.view, request.reference_date or today)
        wear_logs = self.source.list_wear_logs(request.user_id, period.start, period.end)
        return build_heatmap(wear_logs, request.view, request.reference_date or today, today=today)

    def day_detail(self, user_id: str, day: date) -> DayDetail:
        return day_detail(day, self.source.list_wear_logs(user_id, day, day), self.source.list_items(user_id))

    def packing_list(
        self,
        payload: Dict[str, Any],
        user_id: str,
        events: Iterable[DayEvent] = (),
        select_outfit: Optional[OutfitSelector] = None,
    ) -> PackingList | Dict[str, Any]:
        try:
            trip_input = TripInput.model_validate(payload)
        except ValidationError as exc:
            log_event(LOGGER, logging.WARNING, "app_request_invalid", method="packing_list", details=str(exc))
            return validation_failure("Invalid trip", exc)

        trip = TripEvent(
            trip_id=trip_input.trip_id,
            title=trip_input.title,
            start_date=trip_input.start_date,
            end_date=trip_input.end_date,
            location=trip_input.location,
        )
        return build_packing_list(
            trip, events, self.source.list_items(user_id), select_outfit, generated_at=self.clock()
        )

    def dashboard(self, user_id: str) -> Dict[str, Any]:
        """Everything the insights screen shows, computed from one snapshot."""

        with operation_context(LOGGER, "app:dashboard") as correlation_id:
            self.neglect.recompute_statuses(user_id)
            items = self.source.list_items(user_id)
            wear_logs = self.source.list_wear_logs(user_id)
            now = self.clock()
            dashboard = {
                "health": calculate_health_score(items),
                "brands": get_brand_analytics(items, wear_logs, currency=self.config.currency_symbol),
                "stats": calculate_wardrobe_stats(
                    items,
                    wear_logs,
                    today=now.date(),
                    threshold_days=self.neglect.get_threshold(user_id),
                    now=now,
                    currency=self.config.currency_symbol,
                ),
                "neglect": self.neglect.get_stats(user_id),
                "sustainability": calculate_sustainability_score(items, wear_logs, now=now),
                "gaps": self.gap_analysis.analyze_wardrobe(user_id=user_id),
                "resale_prompts": self.resale_prompts.get_prompts(user_id),
            }
            log_event(
                LOGGER,
                logging.INFO,
                "app_call_completed",
                method="dashboard",
                correlation_id=correlation_id,
                item_count=len(items),
                health_score=dashboard["health"].score,
            )
            return dashboard


__all__ = ["ClosetInsightsApp"]
