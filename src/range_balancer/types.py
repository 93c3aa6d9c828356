"""
Shared data types for the range balancer.

This module defines the core data structures used to represent a sharded
keyspace: the key ranges a server owns, the usage snapshot each server
reports, the weights that reduce usage to a single score, and the migration
plans the engine emits. These are internal types used by the engine and the
simulation harness - not file schemas.

All types use @dataclass for simplicity. Pydantic models are reserved for
snapshot/config file parsing (see range_balancer.schema).
"""

from dataclasses import dataclass, field
from enum import Enum

# Type aliases for common patterns
InstanceId = str
"""Unique identifier for a server, stable across snapshots."""


@dataclass(frozen=True)
class UsageVector:
    """
    Four-dimensional resource usage.

    This is the shape scored by range_balancer.scoring.combined_load. Both
    a KeyRange (its own share) and a ServerReport (its totals) expose one
    via their ``usage`` property, so servers and ranges are always scored
    by the same formula.

    Attributes:
        processing_load: CPU-equivalent request processing load.
        storage_utilization: Storage used.
        access_frequency: Data access frequency.
        memory_usage: Memory used.
    """

    processing_load: float
    storage_utilization: float
    access_frequency: float
    memory_usage: float


@dataclass
class KeyRange:
    """
    A contiguous slice of the keyspace owned by exactly one server.

    Keys are ordered strings with ``start_key <= end_key``. The four usage
    metrics are this range's share of the owning server's totals.

    Attributes:
        start_key: First key of the range.
        end_key: Last key of the range.
        access_frequency: Data access frequency attributed to the range.
        storage_utilization: Storage attributed to the range.
        processing_load: Processing load attributed to the range.
        memory_usage: Memory attributed to the range.
    """

    start_key: str
    end_key: str
    access_frequency: float = 0.0
    storage_utilization: float = 0.0
    processing_load: float = 0.0
    memory_usage: float = 0.0

    @property
    def usage(self) -> UsageVector:
        """Usage of this range as a UsageVector."""
        return UsageVector(
            processing_load=self.processing_load,
            storage_utilization=self.storage_utilization,
            access_frequency=self.access_frequency,
            memory_usage=self.memory_usage,
        )


@dataclass
class ServerReport:
    """
    Snapshot of one server's ownership and usage.

    The four totals are expected to equal the sum of the same metric
    across ``key_ranges``. The engine trusts this; callers keep totals and
    ranges consistent.

    Attributes:
        instance_id: Unique server identifier.
        total_storage_utilization: Sum of storage across owned ranges.
        total_processing_load: Sum of processing load across owned ranges.
        total_access_frequency: Sum of access frequency across owned ranges.
        total_memory_usage: Sum of memory across owned ranges.
        max_cpu_capacity: Hard ceiling for processing load.
        max_memory_capacity: Hard ceiling for memory usage.
        key_ranges: Ranges owned by this server, in key order.
    """

    instance_id: InstanceId
    total_storage_utilization: float
    total_processing_load: float
    total_access_frequency: float
    total_memory_usage: float
    max_cpu_capacity: float
    max_memory_capacity: float
    key_ranges: list[KeyRange] = field(default_factory=list)

    @property
    def usage(self) -> UsageVector:
        """Aggregate totals of this server as a UsageVector."""
        return UsageVector(
            processing_load=self.total_processing_load,
            storage_utilization=self.total_storage_utilization,
            access_frequency=self.total_access_frequency,
            memory_usage=self.total_memory_usage,
        )


@dataclass(frozen=True)
class Weights:
    """
    Weights combining the four usage dimensions into one score.

    Every field is required: the engine has no implicit defaults. Defaults
    for the command line live in range_balancer.config.

    Attributes:
        cpu_weight: Weight of processing load.
        memory_weight: Weight of memory usage.
        storage_weight: Weight of storage utilization.
        access_frequency_weight: Weight of access frequency.
        migration_penalty: Cost per emitted plan. Only used by the
            simulation harness when scoring outcomes, never by the engine.
    """

    cpu_weight: float
    memory_weight: float
    storage_weight: float
    access_frequency_weight: float
    migration_penalty: float


@dataclass(frozen=True)
class MigrationPlan:
    """
    Instruction to move ownership of a key range between servers.

    A plan only describes the intended action; executing it (and updating
    both servers' totals afterwards) is the caller's responsibility.
    """

    start_key: str
    end_key: str
    source_instance: InstanceId
    destination_instance: InstanceId


class RebalanceAction(str, Enum):
    """Outcome of the split/move policy for the hot range."""

    SPLIT = "split"
    MOVE = "move"


class SplitStrategy(str, Enum):
    """How the midpoint key of a split range is derived."""

    FIRST_CHARACTER = "first_character"
    LEXICOGRAPHIC = "lexicographic"
