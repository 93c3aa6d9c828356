"""Tests for hot range selection."""

import pytest

from range_balancer.exceptions import NoKeyRangesError
from range_balancer.selector import select_hot_range
from range_balancer.types import KeyRange, Weights

from conftest import cpu_range, make_server


class TestSelectHotRange:
    """Tests for select_hot_range()."""

    def test_selects_highest_scoring_range(self, hot_server, weights):
        """The range with the highest combined score is chosen."""
        hot = select_hot_range(hot_server, weights)
        assert (hot.start_key, hot.end_key) == ("a000", "a999")

    def test_hottest_range_need_not_be_first(self, cpu_only_weights):
        """Position in the list does not matter."""
        server = make_server(
            "s1",
            [cpu_range("a", "b", 5), cpu_range("c", "d", 50), cpu_range("e", "f", 20)],
        )
        assert select_hot_range(server, cpu_only_weights).start_key == "c"

    def test_first_range_wins_ties(self, cpu_only_weights):
        """Equal scores keep the first range."""
        server = make_server(
            "s1",
            [cpu_range("a", "b", 10), cpu_range("c", "d", 30), cpu_range("e", "f", 30)],
        )
        assert select_hot_range(server, cpu_only_weights).start_key == "c"

    def test_weights_change_the_pick(self, cpu_only_weights):
        """Scoring a different dimension picks a different range."""
        memory_only = Weights(
            cpu_weight=0.0,
            memory_weight=1.0,
            storage_weight=0.0,
            access_frequency_weight=0.0,
            migration_penalty=0.0,
        )
        server = make_server(
            "s1",
            [
                KeyRange("a", "b", processing_load=100, memory_usage=0),
                KeyRange("c", "d", processing_load=0, memory_usage=50),
            ],
        )
        assert select_hot_range(server, cpu_only_weights).start_key == "a"
        assert select_hot_range(server, memory_only).start_key == "c"

    def test_server_without_ranges_raises(self, weights):
        """Selection is undefined for a server with no ranges."""
        server = make_server("empty", [])
        with pytest.raises(NoKeyRangesError) as exc_info:
            select_hot_range(server, weights)
        assert exc_info.value.instance_id == "empty"
        assert "empty" in str(exc_info.value)
