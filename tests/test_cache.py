"""Tests for the TTL cache and availability classification."""

from __future__ import annotations

import pytest

from portal_catalog.availability import availability_color, availability_status
from portal_catalog.cache import TTLCache


class FakeClock:
    """Manually advanced time source."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestTTLCache:
    """Tests for TTLCache."""

    def test_get_missing_key(self) -> None:
        """Test that an unknown key returns None."""
        assert TTLCache().get("services_x") is None

    def test_set_and_get(self) -> None:
        """Test that a fresh value is returned."""
        cache = TTLCache()
        cache.set("metadata_x", {"name": "x"})

        assert cache.get("metadata_x") == {"name": "x"}
        assert "metadata_x" in cache

    def test_entry_expires_after_ttl(self) -> None:
        """Test that an entry is ignored once it is ttl seconds old."""
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=300, clock=clock)
        cache.set("k", "v")

        clock.now += 299.9
        assert cache.get("k") == "v"

        clock.now += 0.1
        assert cache.get("k") is None
        assert "k" not in cache

    def test_set_refreshes_age(self) -> None:
        """Test that re-setting a key restarts its lifetime."""
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=10, clock=clock)
        cache.set("k", 1)
        clock.now += 9
        cache.set("k", 2)
        clock.now += 9

        assert cache.get("k") == 2

    def test_expired_entries_are_not_evicted(self) -> None:
        """Test that stale entries stay stored until overwritten or cleared."""
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=1, clock=clock)
        cache.set("a", 1)
        clock.now += 5

        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0


class TestAvailability:
    """Tests for response-time classification."""

    @pytest.mark.parametrize(
        ("response_time", "color", "status"),
        [
            (0, "green", "Good"),
            (499, "green", "Good"),
            (500, "orange", "Warning"),
            ("999", "orange", "Warning"),
            (1000, "red", "Problem"),
            (12_000.5, "red", "Problem"),
            (None, "black", "Available"),
            ("N/A", "black", "Available"),
            (float("nan"), "black", "Available"),
        ],
    )
    def test_classification(self, response_time, color: str, status: str) -> None:
        """Test the color and status for a range of response times."""
        assert availability_color(response_time) == color
        assert availability_status(response_time) == status
