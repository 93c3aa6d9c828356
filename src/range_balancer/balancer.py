"""
Rebalance planning engine.

This module wires the decision steps together in strict sequence:
1. Detect imbalance between the most- and least-loaded servers
2. Select the hottest key range on the most-loaded server
3. Decide whether that range can move whole or must be split
4. Emit one plan (move) or two plans (split)

The engine is a pure function of its inputs: it performs no I/O, keeps no
state between calls and never mutates the snapshot it is given. Callers
re-invoke it periodically and apply the resulting plans themselves.

Example:
    ```python
    weights = Weights(
        cpu_weight=0.5,
        memory_weight=0.5,
        storage_weight=0.3,
        access_frequency_weight=0.1,
        migration_penalty=1.0,
    )
    for plan in plan_migrations(servers, weights):
        print(f"Move {plan.start_key}-{plan.end_key} "
              f"from {plan.source_instance} to {plan.destination_instance}")
    ```
"""

import logging
from dataclasses import dataclass, field

from range_balancer.detector import (
    IMBALANCE_THRESHOLD,
    find_load_extremes,
    is_imbalanced,
)
from range_balancer.policy import decide_action
from range_balancer.scoring import server_load
from range_balancer.selector import select_hot_range
from range_balancer.splitter import midpoint_key, split_destinations, split_key_range
from range_balancer.types import (
    InstanceId,
    KeyRange,
    MigrationPlan,
    RebalanceAction,
    ServerReport,
    SplitStrategy,
    Weights,
)
from range_balancer.validation import validate_snapshot

logger = logging.getLogger(__name__)


@dataclass
class RebalanceResult:
    """
    Outcome of one planning pass, with the decisions that led to it.

    Attributes:
        plans: Emitted migration plans (zero, one or two)
        most_loaded: Instance ID of the most-loaded server, if any
        least_loaded: Instance ID of the least-loaded server, if any
        most_loaded_score: Combined score of the most-loaded server
        least_loaded_score: Combined score of the least-loaded server
        imbalanced: Whether the gap exceeded the threshold
        hot_range: Range selected for migration, if imbalanced
        action: Split/move decision for the hot range, if imbalanced
    """

    plans: list[MigrationPlan] = field(default_factory=list)
    most_loaded: InstanceId | None = None
    least_loaded: InstanceId | None = None
    most_loaded_score: float = 0.0
    least_loaded_score: float = 0.0
    imbalanced: bool = False
    hot_range: KeyRange | None = None
    action: RebalanceAction | None = None


def evaluate_rebalance(
    servers: list[ServerReport],
    weights: Weights,
    *,
    imbalance_threshold: float = IMBALANCE_THRESHOLD,
    split_strategy: SplitStrategy = SplitStrategy.FIRST_CHARACTER,
    validate: bool = True,
) -> RebalanceResult:
    """
    Run one planning pass and report every decision taken.

    Args:
        servers: Fleet snapshot. An empty fleet yields no plans.
        weights: Scoring weights
        imbalance_threshold: Relative gap that triggers action (default 10%)
        split_strategy: How the midpoint key of a split is derived
        validate: Reject ill-formed snapshots before scoring

    Returns:
        RebalanceResult with the emitted plans

    Raises:
        SnapshotValidationError: If validate is set and the input is ill-formed
        NoKeyRangesError: If the most-loaded server owns no key ranges
    """
    if validate:
        validate_snapshot(servers, weights)

    result = RebalanceResult()
    if not servers:
        logger.debug("Empty fleet, nothing to rebalance")
        return result

    most, least = find_load_extremes(servers, weights)
    result.most_loaded = most.instance_id
    result.least_loaded = least.instance_id
    result.most_loaded_score = server_load(most, weights)
    result.least_loaded_score = server_load(least, weights)

    result.imbalanced = is_imbalanced(most, least, weights, imbalance_threshold)
    if not result.imbalanced:
        logger.debug("Fleet within imbalance threshold, no plans")
        return result

    hot_range = select_hot_range(most, weights)
    result.hot_range = hot_range
    result.action = decide_action(hot_range, least)

    if result.action is RebalanceAction.SPLIT:
        midpoint = midpoint_key(hot_range.start_key, hot_range.end_key, split_strategy)
        lower, upper = split_key_range(hot_range, midpoint)
        first, second = split_destinations(servers, weights)
        result.plans.append(_plan_for(lower, most, first))
        result.plans.append(_plan_for(upper, most, second))
    elif result.action is RebalanceAction.MOVE:
        result.plans.append(_plan_for(hot_range, most, least))

    for plan in result.plans:
        logger.info(
            f"Planned {result.action.value}: {plan.start_key}-{plan.end_key} "
            f"from {plan.source_instance} to {plan.destination_instance}"
        )
    return result


def plan_migrations(
    servers: list[ServerReport],
    weights: Weights,
    *,
    imbalance_threshold: float = IMBALANCE_THRESHOLD,
    split_strategy: SplitStrategy = SplitStrategy.FIRST_CHARACTER,
    validate: bool = True,
) -> list[MigrationPlan]:
    """
    Compute the migration plans for a fleet snapshot.

    See evaluate_rebalance for arguments and errors.

    Returns:
        Ordered list of plans: empty when balanced, one for a whole-range
        move, or two (lower half first) for a split.
    """
    return evaluate_rebalance(
        servers,
        weights,
        imbalance_threshold=imbalance_threshold,
        split_strategy=split_strategy,
        validate=validate,
    ).plans


def _plan_for(
    key_range: KeyRange, source: ServerReport, destination: ServerReport
) -> MigrationPlan:
    return MigrationPlan(
        start_key=key_range.start_key,
        end_key=key_range.end_key,
        source_instance=source.instance_id,
        destination_instance=destination.instance_id,
    )
