"""Weighted load scoring shared by servers and key ranges."""

from range_balancer.types import KeyRange, ServerReport, UsageVector, Weights


def combined_load(usage: UsageVector, weights: Weights) -> float:
    """
    Reduce a usage vector to a single comparable score.

    A zero weight neutralizes its dimension.
    """
    return (
        usage.processing_load * weights.cpu_weight
        + usage.storage_utilization * weights.storage_weight
        + usage.access_frequency * weights.access_frequency_weight
        + usage.memory_usage * weights.memory_weight
    )


def server_load(server: ServerReport, weights: Weights) -> float:
    """Score a server by its aggregate totals."""
    return combined_load(server.usage, weights)


def range_load(key_range: KeyRange, weights: Weights) -> float:
    """Score a single key range by its own metrics."""
    return combined_load(key_range.usage, weights)
