"""Simple entrypoint to run closet insights locally against sample data."""

from datetime import date, datetime, timedelta, timezone

from closet_app.app import ClosetInsightsApp
from closet_app.config import AnalyticsConfig
from models.wardrobe_item import WardrobeItem, WearLogEntry
from tools.wardrobe_source import InMemoryWardrobeSource

DEMO_USER = "demo-user"


def _sample_source(today: date) -> InMemoryWardrobeSource:
    worn = datetime.combine(today - timedelta(days=3), datetime.min.time(), tzinfo=timezone.utc)
    items = [
        WardrobeItem("t1", DEMO_USER, "tops", name="White Tee", brand="Uniqlo", colors=["white"],
                     seasons=["summer", "spring"], purchase_price=15, wear_count=12, last_worn_at=worn),
        WardrobeItem("t2", DEMO_USER, "tops", name="Oxford Shirt", brand="Uniqlo", colors=["blue"],
                     seasons=["fall"], occasions=["work"], purchase_price=40, wear_count=6, last_worn_at=worn),
        WardrobeItem("b1", DEMO_USER, "bottoms", name="Dark Jeans", brand="Uniqlo", colors=["navy"],
                     seasons=["fall", "winter"], purchase_price=50, wear_count=20, last_worn_at=worn),
        WardrobeItem("s1", DEMO_USER, "shoes", name="Loafers", brand="Gucci", colors=["brown"],
                     purchase_price=650, wear_count=0, created_at="2025-01-10T00:00:00Z"),
    ]
    logs = [WearLogEntry(item_id="t1", worn_date=today - timedelta(days=offset)) for offset in range(3)]
    return InMemoryWardrobeSource(items, logs)


def main() -> None:
    today = date.today()
    app = ClosetInsightsApp(config=AnalyticsConfig(), source=_sample_source(today))
    dashboard = app.dashboard(DEMO_USER)
    print(f"Health: {dashboard['health'].score} ({dashboard['health'].tier})")
    print(dashboard["brands"].insight)
    for gap in dashboard["gaps"].gaps:
        print(f"[{gap.severity}] {gap.title}")
    for prompt in dashboard["resale_prompts"]:
        print(prompt.message)
    print(app.heatmap({"user_id": DEMO_USER, "view": "month"}).insight)


if __name__ == "__main__":
    main()
