"""
Tests for weighted version selection.
"""
import random
from collections import Counter

import pytest

from imagemgmt.services.weighted_selector import (
    percentage_ranges,
    random_draw,
    select_version,
    sort_entries,
)


@pytest.fixture
def entries(entry_factory):
    """Three versions at 10, 30 and 60 percent."""
    return [entry_factory("v1", 10), entry_factory("v2", 30), entry_factory("v3", 60)]


class TestSelectVersion:
    """Tests for select_version."""

    @pytest.mark.parametrize("draw, expected", [
        (1, "v1"),
        (5, "v1"),
        (10, "v1"),
        (11, "v2"),
        (40, "v2"),
        (41, "v3"),
        (100, "v3"),
    ])
    def test_range_boundaries(self, entries, draw, expected):
        """Test each draw lands in the range owned by the expected version."""
        assert select_version(entries, draw).version == expected

    def test_unsorted_input_is_sorted_by_percentage(self, entry_factory):
        """Test entries are ranged in ascending percentage order."""
        entries = [entry_factory("big", 60), entry_factory("small", 10), entry_factory("mid", 30)]

        assert select_version(entries, 10).version == "small"
        assert select_version(entries, 11).version == "mid"
        assert select_version(entries, 41).version == "big"

    def test_equal_percentages_keep_plan_order(self, entry_factory):
        """Test ties are broken by original order."""
        entries = [entry_factory("first", 50), entry_factory("second", 50)]

        assert select_version(entries, 50).version == "first"
        assert select_version(entries, 51).version == "second"

    def test_every_draw_maps_to_exactly_one_entry(self, entries):
        """Test totality: every draw in [1, 100] selects a version."""
        covered = Counter(select_version(entries, draw).version for draw in range(1, 101))

        assert covered == {"v1": 10, "v2": 30, "v3": 60}

    def test_zero_percentage_entry_never_selected(self, entry_factory):
        """Test an UNSTABLE entry forced to 0 percent is never selected."""
        entries = [entry_factory("v1", 0, "unstable"), entry_factory("v2", 100)]

        selected = {select_version(entries, draw).version for draw in range(1, 101)}

        assert selected == {"v2"}

    def test_returns_none_when_plan_does_not_cover_draw(self, entry_factory):
        """Test a plan summing below 100 yields no match for uncovered draws."""
        entries = [entry_factory("v1", 40), entry_factory("v2", 50)]

        assert select_version(entries, 90).version == "v2"
        assert select_version(entries, 91) is None

    @pytest.mark.parametrize("draw", [0, 101, -5])
    def test_rejects_out_of_range_draw(self, entries, draw):
        """Test draws outside [1, 100] raise ValueError."""
        with pytest.raises(ValueError):
            select_version(entries, draw)


class TestPercentageRanges:
    """Tests for range computation."""

    def test_ranges_accumulate(self, entries):
        """Test ranges are built from the running total."""
        ranges = [(e.version, low, high) for e, low, high in percentage_ranges(entries)]

        assert ranges == [("v1", 1, 10), ("v2", 11, 40), ("v3", 41, 100)]

    def test_sort_is_stable(self, entry_factory):
        """Test sort_entries keeps input order among equal percentages."""
        entries = [entry_factory("a", 20), entry_factory("b", 0), entry_factory("c", 20), entry_factory("d", 60)]

        assert [e.version for e in sort_entries(entries)] == ["b", "a", "c", "d"]


class TestRandomDraw:
    """Tests for random_draw."""

    def test_draw_within_bounds(self):
        """Test random draws stay in [1, 100]."""
        rng = random.Random(7)

        draws = {random_draw(rng) for _ in range(5000)}

        assert min(draws) == 1
        assert max(draws) == 100

    def test_injected_generator_is_reproducible(self):
        """Test the same seed produces the same draws."""
        first = [random_draw(random.Random(3)) for _ in range(5)]
        second = [random_draw(random.Random(3)) for _ in range(5)]

        assert first == second

    def test_frequencies_converge_to_percentages(self, entries):
        """Test empirical selection frequency matches configured percentages."""
        rng = random.Random(2024)
        trials = 50000

        counts = Counter(select_version(entries, random_draw(rng)).version for _ in range(trials))

        assert counts["v1"] / trials == pytest.approx(0.10, abs=0.015)
        assert counts["v2"] / trials == pytest.approx(0.30, abs=0.015)
        assert counts["v3"] / trials == pytest.approx(0.60, abs=0.015)
