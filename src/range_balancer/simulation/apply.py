"""
Apply migration plans to a snapshot.

This is the bookkeeping a caller performs after executing plans: range
ownership moves from source to destination and both servers' totals are
adjusted by the moved range's metrics.

Plans for split halves do not match an owned range exactly. They are
carved out of the source range they bound: a plan sharing the range's
start_key takes the lower half, one sharing its end_key takes the upper
half, each with halved metrics.
"""

import logging
from dataclasses import replace

from range_balancer.splitter import split_key_range
from range_balancer.types import KeyRange, MigrationPlan, ServerReport

logger = logging.getLogger(__name__)


def _add_usage(server: ServerReport, key_range: KeyRange, sign: float) -> None:
    # Float subtraction can undershoot zero
    server.total_processing_load = max(
        0.0, server.total_processing_load + sign * key_range.processing_load
    )
    server.total_storage_utilization = max(
        0.0, server.total_storage_utilization + sign * key_range.storage_utilization
    )
    server.total_access_frequency = max(
        0.0, server.total_access_frequency + sign * key_range.access_frequency
    )
    server.total_memory_usage = max(
        0.0, server.total_memory_usage + sign * key_range.memory_usage
    )


def _owns_exactly(server: ServerReport, plan: MigrationPlan) -> bool:
    return any(
        r.start_key == plan.start_key and r.end_key == plan.end_key
        for r in server.key_ranges
    )


def _detach(source: ServerReport, plan: MigrationPlan) -> KeyRange | None:
    """Remove the planned range from source and return it, or None if absent."""
    for index, key_range in enumerate(source.key_ranges):
        if key_range.start_key == plan.start_key and key_range.end_key == plan.end_key:
            return source.key_ranges.pop(index)

    for index, key_range in enumerate(source.key_ranges):
        if key_range.start_key == plan.start_key:
            moved, kept = split_key_range(key_range, plan.end_key)
        elif key_range.end_key == plan.end_key:
            kept, moved = split_key_range(key_range, plan.start_key)
        else:
            continue
        # Totals drop by the moved half only; the caller subtracts it
        source.key_ranges[index] = kept
        return moved

    return None


def apply_plans(
    servers: list[ServerReport], plans: list[MigrationPlan]
) -> list[ServerReport]:
    """
    Return the snapshot that results from executing plans in order.

    Plans naming an unknown server or range are skipped with a warning.
    A plan whose source and destination are the same server and which
    names a whole owned range is a no-op.

    Returns:
        New list of ServerReport in input order. The input snapshot is not
        modified.
    """
    fleet = {
        server.instance_id: replace(server, key_ranges=list(server.key_ranges))
        for server in servers
    }

    for plan in plans:
        source = fleet.get(plan.source_instance)
        destination = fleet.get(plan.destination_instance)
        if source is None or destination is None:
            logger.warning(
                f"Skipping plan {plan.start_key}-{plan.end_key}: unknown server "
                f"{plan.source_instance if source is None else plan.destination_instance}"
            )
            continue

        if source is destination and _owns_exactly(source, plan):
            continue

        moved = _detach(source, plan)
        if moved is None:
            logger.warning(
                f"Skipping plan {plan.start_key}-{plan.end_key}: "
                f"range not owned by {plan.source_instance}"
            )
            continue

        _add_usage(source, moved, -1)
        destination.key_ranges.append(moved)
        destination.key_ranges.sort(key=lambda r: r.start_key)
        _add_usage(destination, moved, 1)
        logger.debug(
            f"Applied {moved.start_key}-{moved.end_key}: "
            f"{source.instance_id} -> {destination.instance_id}"
        )

    return list(fleet.values())
