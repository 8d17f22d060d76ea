"""Wardrobe data sources: in-memory and SQLite backends."""

from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from models.wardrobe_item import WardrobeItem, WearLogEntry
from tools.wardrobe_source import InMemoryWardrobeSource, SQLiteWardrobeSource


def _coat(user_id: str = "u1") -> WardrobeItem:
    return WardrobeItem(
        "coat",
        user_id,
        "outerwear",
        name="Wool Coat",
        colors=["camel"],
        seasons=["autumn", "winter"],
        purchase_price=180,
        wear_count=4,
        last_worn_at=datetime(2026, 2, 1, tzinfo=timezone.utc),
    )


def test_sqlite_source_round_trips_items(tmp_path: Path) -> None:
    source = SQLiteWardrobeSource(tmp_path / "db" / "wardrobe.db")
    source.add_item(_coat())
    source.add_item(WardrobeItem("tee", "u2", "tops"))

    items = source.list_items("u1")
    assert len(items) == 1
    coat = items[0]
    assert coat.seasons == ["fall", "winter"]
    assert coat.purchase_price == 180
    assert coat.last_worn_at == datetime(2026, 2, 1, tzinfo=timezone.utc)
    assert not coat.neglect_status


def test_sqlite_wear_logs_filter_by_user_and_range(tmp_path: Path) -> None:
    source = SQLiteWardrobeSource(tmp_path / "wardrobe.db")
    for day in (date(2026, 3, 1), date(2026, 3, 15), date(2026, 4, 2)):
        source.log_wear(WearLogEntry("coat", day, user_id="u1"))
    source.log_wear(WearLogEntry("coat", date(2026, 3, 10), user_id="u2"))

    logs = source.list_wear_logs("u1", date(2026, 3, 1), date(2026, 3, 31))
    assert [log.worn_date for log in logs] == [date(2026, 3, 1), date(2026, 3, 15)]
    assert len(source.list_wear_logs("u1")) == 3

    with pytest.raises(ValueError):
        source.log_wear(WearLogEntry("coat", date(2026, 3, 1)))


def test_neglect_flags_only_count_real_changes(tmp_path: Path) -> None:
    sqlite_source = SQLiteWardrobeSource(tmp_path / "wardrobe.db")
    memory_source = InMemoryWardrobeSource()
    for source in (sqlite_source, memory_source):
        source.add_item(_coat())
        source.add_item(WardrobeItem("tee", "u2", "tops"))

        assert source.update_neglect_statuses("u1", {"coat": True, "ghost": True}) == 1
        assert source.update_neglect_statuses("u1", {"coat": True}) == 0
        assert source.list_items("u1")[0].neglect_status


def test_in_memory_wear_logs_include_unattributed_rows_for_owned_items() -> None:
    source = InMemoryWardrobeSource([_coat()])
    source.log_wear(WearLogEntry("coat", date(2026, 3, 1)))
    source.log_wear(WearLogEntry("other", date(2026, 3, 2)))

    assert [log.item_id for log in source.list_wear_logs("u1")] == ["coat"]
