"""
Key range rebalancing planner for sharded keyspaces.

Given a snapshot of server reports, decides whether the fleet is
imbalanced and, if so, plans a single range migration (a whole-range move,
or a split whose halves go to the least-loaded servers) without exceeding
the destination's CPU or memory capacity. It includes:

- plan_migrations / evaluate_rebalance: The planning engine
- Load scoring, imbalance detection, hot range selection
- Split/move policy and range splitting
- Snapshot and weights validation
- File schemas for snapshots, weights and plans
"""

from range_balancer.balancer import RebalanceResult, evaluate_rebalance, plan_migrations
from range_balancer.detector import IMBALANCE_THRESHOLD, find_load_extremes, is_imbalanced
from range_balancer.exceptions import (
    ConfigurationError,
    NoKeyRangesError,
    RebalanceError,
    SnapshotValidationError,
)
from range_balancer.policy import can_move, decide_action, should_split
from range_balancer.scoring import combined_load, range_load, server_load
from range_balancer.selector import select_hot_range
from range_balancer.splitter import (
    midpoint_key,
    rank_servers_by_load,
    split_destinations,
    split_key_range,
)
from range_balancer.types import (
    KeyRange,
    MigrationPlan,
    RebalanceAction,
    ServerReport,
    SplitStrategy,
    UsageVector,
    Weights,
)
from range_balancer.validation import validate_snapshot

__all__ = [
    # Engine
    "plan_migrations",
    "evaluate_rebalance",
    "RebalanceResult",
    # Steps
    "combined_load",
    "server_load",
    "range_load",
    "IMBALANCE_THRESHOLD",
    "find_load_extremes",
    "is_imbalanced",
    "select_hot_range",
    "should_split",
    "can_move",
    "decide_action",
    "midpoint_key",
    "split_key_range",
    "rank_servers_by_load",
    "split_destinations",
    "validate_snapshot",
    # Types
    "KeyRange",
    "ServerReport",
    "UsageVector",
    "Weights",
    "MigrationPlan",
    "RebalanceAction",
    "SplitStrategy",
    # Errors
    "RebalanceError",
    "SnapshotValidationError",
    "NoKeyRangesError",
    "ConfigurationError",
]
