"""Outcome scoring for simulation runs."""

from range_balancer.scoring import server_load
from range_balancer.types import MigrationPlan, ServerReport, Weights


def load_spread(servers: list[ServerReport], weights: Weights) -> float:
    """Gap between the highest and lowest combined server score."""
    if not servers:
        return 0.0
    loads = [server_load(server, weights) for server in servers]
    return max(loads) - min(loads)


def balance_score(
    servers: list[ServerReport], plans: list[MigrationPlan], weights: Weights
) -> float:
    """
    Score a run by final balance, penalizing every migration.

    The balance term is 100 / (1 + spread), so a perfectly even fleet earns
    100. Each plan costs weights.migration_penalty. Higher is better.
    """
    balance = 1 / (1 + load_spread(servers, weights))
    return balance * 100 - len(plans) * weights.migration_penalty
