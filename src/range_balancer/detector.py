"""
Imbalance detection across the fleet.

The detector finds the most- and least-loaded servers by combined score
and decides whether the gap between them is worth acting on. The gap must
exceed a fraction of the most-loaded score (10% by default), which also
means a single server, or a fleet of identical scores, never triggers a
rebalance.
"""

import logging

from range_balancer.scoring import server_load
from range_balancer.types import ServerReport, Weights

logger = logging.getLogger(__name__)

IMBALANCE_THRESHOLD = 0.1
"""Relative gap (as a fraction of the most-loaded score) that triggers action."""


def find_load_extremes(
    servers: list[ServerReport], weights: Weights
) -> tuple[ServerReport, ServerReport]:
    """
    Find the most- and least-loaded servers.

    Ties are broken by input order: the first server encountered wins,
    since a later server must score strictly higher (or lower) to replace
    the current pick.

    Args:
        servers: Non-empty fleet snapshot
        weights: Scoring weights

    Returns:
        Tuple of (most_loaded, least_loaded)

    Raises:
        ValueError: If servers is empty
    """
    if not servers:
        raise ValueError("Cannot find load extremes of an empty fleet")

    most = least = servers[0]
    most_score = least_score = server_load(servers[0], weights)

    for server in servers[1:]:
        score = server_load(server, weights)
        if score > most_score:
            most, most_score = server, score
        if score < least_score:
            least, least_score = server, score

    return most, least


def is_imbalanced(
    most: ServerReport,
    least: ServerReport,
    weights: Weights,
    threshold: float = IMBALANCE_THRESHOLD,
) -> bool:
    """
    Check whether the load gap warrants a rebalance.

    Returns:
        True if score(most) - score(least) > threshold * score(most)
    """
    most_score = server_load(most, weights)
    least_score = server_load(least, weights)
    difference = most_score - least_score

    logger.debug(
        f"Load gap {difference:.2f} between {most.instance_id} ({most_score:.2f}) "
        f"and {least.instance_id} ({least_score:.2f}), "
        f"threshold {threshold * most_score:.2f}"
    )
    return difference > threshold * most_score
