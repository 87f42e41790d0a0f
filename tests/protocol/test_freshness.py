"""Tests for the timestamp freshness window."""
from themestats.protocol.freshness import TIMESTAMP_TOLERANCE_MS, is_fresh

NOW = 1_700_000_000_000


class TestIsFresh:
    def test_now_is_fresh(self) -> None:
        assert is_fresh(NOW, now=NOW)

    def test_boundary_inclusive_both_directions(self) -> None:
        assert is_fresh(NOW - TIMESTAMP_TOLERANCE_MS, now=NOW)
        assert is_fresh(NOW + TIMESTAMP_TOLERANCE_MS, now=NOW)

    def test_just_outside_window(self) -> None:
        assert not is_fresh(NOW - TIMESTAMP_TOLERANCE_MS - 1, now=NOW)
        assert not is_fresh(NOW + TIMESTAMP_TOLERANCE_MS + 1, now=NOW)

    def test_tolerance_is_five_minutes(self) -> None:
        assert TIMESTAMP_TOLERANCE_MS == 300_000
