"""Wardrobe data sources feeding the analytics services."""
from __future__ import annotations

import json
import sqlite3
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from models.wardrobe_item import WardrobeItem, WearLogEntry


class WardrobeSource:
    """Read interface for items and wear logs, plus the neglect flag write-back."""

    def list_items(self, user_id: str) -> List[WardrobeItem]:
        raise NotImplementedError

    def list_wear_logs(
        self, user_id: str, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[WearLogEntry]:
        raise NotImplementedError

    def update_neglect_statuses(self, user_id: str, statuses: Dict[str, bool]) -> int:
        raise NotImplementedError


def _in_range(log: WearLogEntry, start: Optional[date], end: Optional[date]) -> bool:
    if start and log.worn_date < start:
        return False
    if end and log.worn_date > end:
        return False
    return True


class InMemoryWardrobeSource(WardrobeSource):
    """Holds items and wear logs in memory; used by tests and the local demo."""

    def __init__(
        self, items: Iterable[WardrobeItem] = (), wear_logs: Iterable[WearLogEntry] = ()
    ) -> None:
        self._items: Dict[str, WardrobeItem] = {item.item_id: item for item in items}
        self._wear_logs: List[WearLogEntry] = list(wear_logs)

    def add_item(self, item: WardrobeItem) -> WardrobeItem:
        self._items[item.item_id] = item
        return item

    def log_wear(self, entry: WearLogEntry) -> WearLogEntry:
        self._wear_logs.append(entry)
        return entry

    def list_items(self, user_id: str) -> List[WardrobeItem]:
        return [item for item in self._items.values() if item.user_id == user_id]

    def list_wear_logs(
        self, user_id: str, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[WearLogEntry]:
        owned = {item.item_id for item in self.list_items(user_id)}
        return [
            log
            for log in self._wear_logs
            if (log.user_id == user_id or (log.user_id is None and log.item_id in owned))
            and _in_range(log, start, end)
        ]

    def update_neglect_statuses(self, user_id: str, statuses: Dict[str, bool]) -> int:
        changed = 0
        for item_id, neglected in statuses.items():
            item = self._items.get(item_id)
            if item is None or item.user_id != user_id or item.neglect_status == neglected:
                continue
            self._items[item_id] = replace(item, neglect_status=neglected)
            changed += 1
        return changed


class SQLiteWardrobeSource(WardrobeSource):
    """Local SQLite-backed source for items and wear logs."""

    def __init__(self, database_path: str | Path = "data/wardrobe.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS items (
                    user_id TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    category TEXT NOT NULL,
                    sub_category TEXT,
                    brand TEXT,
                    name TEXT,
                    colors TEXT,
                    seasons TEXT,
                    occasions TEXT,
                    wear_count INTEGER DEFAULT 0,
                    purchase_price REAL,
                    last_worn_at TEXT,
                    created_at TEXT,
                    neglect_status INTEGER DEFAULT 0,
                    status TEXT DEFAULT 'complete',
                    image_url TEXT,
                    PRIMARY KEY (user_id, item_id)
                );
                CREATE TABLE IF NOT EXISTS wear_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    worn_date TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS wear_logs_user_date ON wear_logs (user_id, worn_date);
                """
            )

    @staticmethod
    def _serialise_list(values: Optional[List[object]]) -> str:
        return json.dumps(values or [])

    @staticmethod
    def _deserialise_list(raw: str) -> List[object]:
        return json.loads(raw) if raw else []

    def add_item(self, item: WardrobeItem) -> WardrobeItem:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO items (
                    user_id, item_id, category, sub_category, brand, name, colors, seasons,
                    occasions, wear_count, purchase_price, last_worn_at, created_at,
                    neglect_status, status, image_url
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.user_id,
                    item.item_id,
                    item.category,
                    item.sub_category,
                    item.brand,
                    item.name,
                    self._serialise_list(item.colors),
                    self._serialise_list(item.seasons),
                    self._serialise_list(item.occasions),
                    item.wear_count,
                    item.purchase_price,
                    item.last_worn_at.isoformat() if item.last_worn_at else None,
                    item.created_at.isoformat() if item.created_at else None,
                    int(item.neglect_status),
                    item.status,
                    item.image_url,
                ),
            )
        return item

    def log_wear(self, entry: WearLogEntry) -> WearLogEntry:
        if not entry.user_id:
            raise ValueError("Wear log entries stored in SQLite need a user_id")
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO wear_logs (user_id, item_id, worn_date) VALUES (?, ?, ?)",
                (entry.user_id, entry.item_id, entry.worn_date.isoformat()),
            )
        return entry

    def _row_to_item(self, row: sqlite3.Row) -> WardrobeItem:
        return WardrobeItem(
            item_id=row["item_id"],
            user_id=row["user_id"],
            category=row["category"],
            sub_category=row["sub_category"],
            brand=row["brand"],
            name=row["name"],
            colors=self._deserialise_list(row["colors"]),
            seasons=self._deserialise_list(row["seasons"]),
            occasions=self._deserialise_list(row["occasions"]),
            wear_count=row["wear_count"] or 0,
            purchase_price=row["purchase_price"],
            last_worn_at=row["last_worn_at"],
            created_at=row["created_at"],
            neglect_status=bool(row["neglect_status"]),
            status=row["status"] or "complete",
            image_url=row["image_url"],
        )

    def list_items(self, user_id: str) -> List[WardrobeItem]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM items WHERE user_id = ? ORDER BY created_at, item_id",
                (user_id,),
            )
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def list_wear_logs(
        self, user_id: str, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[WearLogEntry]:
        query = "SELECT item_id, worn_date, user_id FROM wear_logs WHERE user_id = ?"
        params: list = [user_id]
        if start:
            query += " AND worn_date >= ?"
            params.append(start.isoformat())
        if end:
            query += " AND worn_date <= ?"
            params.append(end.isoformat())
        query += " ORDER BY worn_date, id"
        with self._connect() as conn:
            cursor = conn.execute(query, params)
            return [
                WearLogEntry(item_id=row["item_id"], worn_date=row["worn_date"], user_id=row["user_id"])
                for row in cursor.fetchall()
            ]

    def update_neglect_statuses(self, user_id: str, statuses: Dict[str, bool]) -> int:
        with self._connect() as conn:
            changed = 0
            for item_id, neglected in statuses.items():
                cursor = conn.execute(
                    "UPDATE items SET neglect_status = ? WHERE user_id = ? AND item_id = ? AND neglect_status != ?",
                    (int(neglected), user_id, item_id, int(neglected)),
                )
                changed += cursor.rowcount
            return changed


__all__ = ["InMemoryWardrobeSource", "SQLiteWardrobeSource", "WardrobeSource"]
