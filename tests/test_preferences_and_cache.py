"""Unit tests for the preference store and result caches."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from memory.preferences import UserPreferenceStore
from memory.result_cache import InMemoryResultCache, JSONResultCache, build_result_cache


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_threshold_defaults_and_validates(tmp_path: Path) -> None:
    store = UserPreferenceStore(base_dir=tmp_path)
    assert store.get_neglect_threshold("u1") == 180

    assert store.set_neglect_threshold("u1", 90) == 90
    assert store.get_neglect_threshold("u1") == 90

    with pytest.raises(ValueError, match="between 30 and 365"):
        store.set_neglect_threshold("u1", 400)
    assert store.get_neglect_threshold("u1") == 90


def test_corrupt_stored_threshold_falls_back(tmp_path: Path) -> None:
    (tmp_path / "u1.json").write_text(json.dumps({"user_id": "u1", "neglect_threshold_days": "forever"}))
    assert UserPreferenceStore(base_dir=tmp_path).get_neglect_threshold("u1") == 180

    (tmp_path / "u2.json").write_text("{not json")
    assert UserPreferenceStore(base_dir=tmp_path).get_neglect_threshold("u2") == 180


def test_gap_dismissals_persist_per_user(tmp_path: Path) -> None:
    store = UserPreferenceStore(base_dir=tmp_path)
    store.dismiss_gap("u1", "cat-tops")
    store.dismiss_gap("u1", "cat-tops")
    store.dismiss_gap("u1", "color-dark")

    reopened = UserPreferenceStore(base_dir=tmp_path)
    assert reopened.get_dismissed_gaps("u1") == {"cat-tops", "color-dark"}
    assert reopened.get_dismissed_gaps("u2") == set()

    assert reopened.undismiss_gap("u1", "cat-tops") == {"color-dark"}


def test_resale_preferences(tmp_path: Path) -> None:
    store = UserPreferenceStore(base_dir=tmp_path)
    assert store.resale_prompts_enabled("u1")

    store.set_resale_prompts_enabled("u1", False)
    store.dismiss_resale("u1", "item-1")
    prompted_at = datetime(2026, 5, 1, tzinfo=timezone.utc)
    store.record_resale_prompt("u1", "item-2", prompted_at)

    assert not store.resale_prompts_enabled("u1")
    assert store.get_dismissed_resale("u1") == {"item-1"}
    assert store.get_resale_prompt_log("u1") == {"item-2": prompted_at}

    store.reset_resale_dismissals("u1")
    assert store.get_dismissed_resale("u1") == set()


def test_unknown_keys_in_stored_preferences_are_ignored(tmp_path: Path) -> None:
    (tmp_path / "u1.json").write_text(json.dumps({"user_id": "u1", "theme": "dark", "dismissed_gap_ids": ["x"]}))
    assert UserPreferenceStore(base_dir=tmp_path).get_dismissed_gaps("u1") == {"x"}


def test_in_memory_cache_expires_by_ttl() -> None:
    clock = FakeClock()
    cache = InMemoryResultCache(clock=clock)
    cache.set("k", {"value": 1})

    clock.now += 59
    assert cache.get("k", ttl_seconds=60) == {"value": 1}
    clock.now += 1
    assert cache.get("k", ttl_seconds=60) is None
    assert cache.get("k") == {"value": 1}

    cache.invalidate("k")
    cache.invalidate("k")
    assert cache.get("k") is None


def test_explicit_timestamps_override_the_clock() -> None:
    cache = InMemoryResultCache(clock=FakeClock(5_000))
    entry = cache.set("k", "old", stored_at=0)
    assert entry.age(5_000) == 5_000
    assert cache.get("k", ttl_seconds=100) is None


def test_json_cache_persists_between_instances(tmp_path: Path) -> None:
    clock = FakeClock()
    JSONResultCache(base_dir=tmp_path, clock=clock).set("gap_analysis/u1", {"gaps": []})

    reopened = JSONResultCache(base_dir=tmp_path, clock=clock)
    assert reopened.get("gap_analysis/u1", ttl_seconds=10) == {"gaps": []}
    reopened.invalidate("gap_analysis/u1")
    assert reopened.get("gap_analysis/u1") is None


def test_build_result_cache_rejects_unknown_backends(tmp_path: Path) -> None:
    assert isinstance(build_result_cache("memory"), InMemoryResultCache)
    assert isinstance(build_result_cache("json", str(tmp_path)), JSONResultCache)
    with pytest.raises(ValueError):
        build_result_cache("redis")


def test_store_default_threshold_backs_unusable_values(tmp_path: Path) -> None:
    (tmp_path / "u1.json").write_text(json.dumps({"user_id": "u1", "neglect_threshold_days": 5}))
    store = UserPreferenceStore(base_dir=tmp_path, default_threshold_days=45)

    assert store.get_neglect_threshold("u1") == 45
    assert store.get_neglect_threshold("new-user") == 45
    assert UserPreferenceStore(base_dir=tmp_path / "other", default_threshold_days=9999).get_neglect_threshold("u1") == 180


def test_user_ids_cannot_escape_the_preference_directory(tmp_path: Path) -> None:
    base_dir = tmp_path / "prefs"
    store = UserPreferenceStore(base_dir=base_dir)
    store.dismiss_gap("../outside", "cat-tops")

    assert not (tmp_path / "outside.json").exists()
    assert [path.parent for path in base_dir.iterdir()] == [base_dir]
    assert store.get_dismissed_gaps("../outside") == {"cat-tops"}
