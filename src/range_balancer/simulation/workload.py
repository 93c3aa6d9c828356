"""Synthetic per-key workload that fluctuates over time."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, replace

from range_balancer.types import ServerReport, UsageVector


@dataclass(frozen=True)
class KeyBehavior:
    """
    Usage pattern of a single key.

    Access frequency, storage and memory oscillate sinusoidally around
    their base values with the given period. Processing load is derived
    from access frequency.

    Attributes:
        key: The key this behavior applies to.
        base_access_frequency: Mean access frequency.
        access_fluctuation: Amplitude of access frequency oscillation.
        base_storage_usage: Mean storage usage.
        storage_fluctuation: Amplitude of storage oscillation.
        processing_load_multiplier: Processing load per unit of access frequency.
        base_memory_usage: Mean memory usage.
        memory_fluctuation: Amplitude of memory oscillation.
        fluctuation_period: Period of the oscillation, in time steps.
    """

    key: str
    base_access_frequency: float
    access_fluctuation: float
    base_storage_usage: float
    storage_fluctuation: float
    processing_load_multiplier: float
    base_memory_usage: float
    memory_fluctuation: float
    fluctuation_period: float

    def usage_at(self, time: float) -> UsageVector:
        """Usage of this key at the given time step."""
        factor = math.sin(2 * math.pi * time / self.fluctuation_period)
        access_frequency = self.base_access_frequency + self.access_fluctuation * factor
        return UsageVector(
            processing_load=access_frequency * self.processing_load_multiplier,
            storage_utilization=self.base_storage_usage + self.storage_fluctuation * factor,
            access_frequency=access_frequency,
            memory_usage=self.base_memory_usage + self.memory_fluctuation * factor,
        )


DEFAULT_KEY_BEHAVIORS: Mapping[str, KeyBehavior] = {
    "a000": KeyBehavior("a000", 100, 50, 50, 20, 1.5, 20, 10, 5),
    "a500": KeyBehavior("a500", 80, 30, 30, 15, 1.2, 15, 7, 7),
    "b000": KeyBehavior("b000", 120, 60, 40, 25, 1.3, 18, 12, 6),
    "b500": KeyBehavior("b500", 90, 40, 20, 10, 1.1, 10, 8, 8),
}


def simulate_server_load(
    server: ServerReport,
    time: float,
    behaviors: Mapping[str, KeyBehavior] = DEFAULT_KEY_BEHAVIORS,
) -> ServerReport:
    """
    Recompute a server's range metrics and totals at a time step.

    Each range accumulates the usage of every key with
    start_key <= key <= end_key; totals are the sums over ranges.

    Returns:
        New ServerReport; the input report and its ranges are not modified.
    """
    key_ranges = []
    for key_range in server.key_ranges:
        processing = storage = access = memory = 0.0
        for key, behavior in behaviors.items():
            if key_range.start_key <= key <= key_range.end_key:
                usage = behavior.usage_at(time)
                processing += usage.processing_load
                storage += usage.storage_utilization
                access += usage.access_frequency
                memory += usage.memory_usage
        key_ranges.append(
            replace(
                key_range,
                processing_load=processing,
                storage_utilization=storage,
                access_frequency=access,
                memory_usage=memory,
            )
        )

    return replace(
        server,
        key_ranges=key_ranges,
        total_processing_load=sum(r.processing_load for r in key_ranges),
        total_storage_utilization=sum(r.storage_utilization for r in key_ranges),
        total_access_frequency=sum(r.access_frequency for r in key_ranges),
        total_memory_usage=sum(r.memory_usage for r in key_ranges),
    )
