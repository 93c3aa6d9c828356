"""
Split-or-move policy for the hot range.

Projects the hot range onto the least-loaded server's current totals and
checks the result against its CPU and memory ceilings. Storage and access
frequency are scored but never capacity-checked.

Boundary semantics: landing exactly on a ceiling is allowed, so equality
favors moving the whole range. For finite input the two checks are exact
complements and every call resolves to SPLIT or MOVE; a NaN projection
fails both and yields no action.
"""

import logging

from range_balancer.types import KeyRange, RebalanceAction, ServerReport

logger = logging.getLogger(__name__)


def project_usage(key_range: KeyRange, destination: ServerReport) -> tuple[float, float]:
    """Return (cpu, memory) the destination would carry after taking the range."""
    projected_cpu = destination.total_processing_load + key_range.processing_load
    projected_memory = destination.total_memory_usage + key_range.memory_usage
    return projected_cpu, projected_memory


def should_split(key_range: KeyRange, destination: ServerReport) -> bool:
    """True if the whole range would push the destination over either ceiling."""
    projected_cpu, projected_memory = project_usage(key_range, destination)
    return (
        projected_cpu > destination.max_cpu_capacity
        or projected_memory > destination.max_memory_capacity
    )


def can_move(key_range: KeyRange, destination: ServerReport) -> bool:
    """True if the whole range fits within both of the destination's ceilings."""
    projected_cpu, projected_memory = project_usage(key_range, destination)
    return (
        projected_cpu <= destination.max_cpu_capacity
        and projected_memory <= destination.max_memory_capacity
    )


def decide_action(
    key_range: KeyRange, destination: ServerReport
) -> RebalanceAction | None:
    """
    Choose between splitting the range and moving it whole.

    Args:
        key_range: Hot range selected on the most-loaded server
        destination: Least-loaded server

    Returns:
        RebalanceAction.SPLIT, RebalanceAction.MOVE, or None if neither
        check holds (only possible with non-finite metrics)
    """
    projected_cpu, projected_memory = project_usage(key_range, destination)
    logger.debug(
        f"Projected {destination.instance_id} after taking "
        f"{key_range.start_key}-{key_range.end_key}: "
        f"cpu {projected_cpu:.2f}/{destination.max_cpu_capacity:.2f}, "
        f"memory {projected_memory:.2f}/{destination.max_memory_capacity:.2f}"
    )

    if should_split(key_range, destination):
        return RebalanceAction.SPLIT
    if can_move(key_range, destination):
        return RebalanceAction.MOVE
    return None
