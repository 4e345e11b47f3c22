"""Unit tests for TableKeyRegistry and InsertionTracker."""

from src.domain.keys import DEFAULT_KEY_COLUMNS, TableKeyRegistry
from src.domain.tracker import InsertionTracker


class TestTableKeyRegistry:
    """Key column lookup with the ``id`` default."""

    def test_unconfigured_table_uses_id(self) -> None:
        registry = TableKeyRegistry()
        assert registry.keys_for("users") == ("id",)
        assert DEFAULT_KEY_COLUMNS == ("id",)

    def test_configured_table_returns_keys_in_order(self) -> None:
        registry = TableKeyRegistry()
        registry.configure("memberships", ["user_id", "org_id"])

        assert registry.keys_for("memberships") == ("user_id", "org_id")
        assert "memberships" in registry
        assert "users" not in registry

    def test_reconfigure_overrides(self) -> None:
        registry = TableKeyRegistry()
        registry.configure("settings", ["key"])
        registry.configure("settings", ["scope", "key"])

        assert registry.keys_for("settings") == ("scope", "key")

    def test_configured_keys_are_copied(self) -> None:
        keys = ["user_id"]
        registry = TableKeyRegistry()
        registry.configure("memberships", keys)
        keys.append("org_id")

        assert registry.keys_for("memberships") == ("user_id",)


class TestInsertionTracker:
    """Tracking of attempted inserts."""

    def test_new_tracker_is_empty(self) -> None:
        tracker = InsertionTracker()
        assert not tracker
        assert len(tracker) == 0
        assert tracker.snapshot() == {}

    def test_track_keeps_only_key_columns(self) -> None:
        tracker = InsertionTracker()

        key_tuple = tracker.track("users", {"id": 1, "name": "a"}, ("id",))

        assert key_tuple == {"id": 1}
        assert tracker.snapshot() == {"users": [{"id": 1}]}

    def test_track_preserves_processing_order(self) -> None:
        tracker = InsertionTracker()
        tracker.track("orders", {"id": 10}, ("id",))
        tracker.track("users", {"id": 1}, ("id",))
        tracker.track("orders", {"id": 11}, ("id",))

        assert list(tracker.tables()) == [
            ("orders", [{"id": 10}, {"id": 11}]),
            ("users", [{"id": 1}]),
        ]
        assert len(tracker) == 3

    def test_record_without_keys_not_tracked(self) -> None:
        tracker = InsertionTracker()

        assert tracker.track("users", {"name": "a"}, ("id",)) is None
        assert not tracker

    def test_partial_composite_key_tracked(self) -> None:
        tracker = InsertionTracker()

        tracker.track("memberships", {"user_id": 1, "role": "x"}, ("user_id", "org_id"))

        assert tracker.snapshot() == {"memberships": [{"user_id": 1}]}

    def test_clear_empties_tracker(self) -> None:
        tracker = InsertionTracker()
        tracker.track("users", {"id": 1}, ("id",))

        tracker.clear()

        assert not tracker
        assert tracker.snapshot() == {}

    def test_snapshot_is_independent_copy(self) -> None:
        tracker = InsertionTracker()
        tracker.track("users", {"id": 1}, ("id",))

        snapshot = tracker.snapshot()
        snapshot["users"][0]["id"] = 99

        assert tracker.snapshot() == {"users": [{"id": 1}]}
