"""Shared fixtures for range balancer tests."""

import pytest

from range_balancer.types import KeyRange, ServerReport, Weights


def make_server(
    instance_id: str,
    ranges: list[KeyRange],
    max_cpu_capacity: float = 10_000.0,
    max_memory_capacity: float = 10_000.0,
) -> ServerReport:
    """Build a server whose totals are the sums of its ranges."""
    return ServerReport(
        instance_id=instance_id,
        total_storage_utilization=sum(r.storage_utilization for r in ranges),
        total_processing_load=sum(r.processing_load for r in ranges),
        total_access_frequency=sum(r.access_frequency for r in ranges),
        total_memory_usage=sum(r.memory_usage for r in ranges),
        max_cpu_capacity=max_cpu_capacity,
        max_memory_capacity=max_memory_capacity,
        key_ranges=ranges,
    )


def cpu_range(start_key: str, end_key: str, processing_load: float) -> KeyRange:
    """Range with only processing load set."""
    return KeyRange(start_key=start_key, end_key=end_key, processing_load=processing_load)


@pytest.fixture
def weights():
    """Reference weights."""
    return Weights(
        cpu_weight=0.5,
        memory_weight=0.5,
        storage_weight=0.3,
        access_frequency_weight=0.1,
        migration_penalty=1.0,
    )


@pytest.fixture
def cpu_only_weights():
    """Weights that score processing load alone."""
    return Weights(
        cpu_weight=1.0,
        memory_weight=0.0,
        storage_weight=0.0,
        access_frequency_weight=0.0,
        migration_penalty=0.0,
    )


@pytest.fixture
def hot_server():
    """Heavily loaded server; its a000-a999 range is the hottest."""
    return ServerReport(
        instance_id="server-1234",
        total_storage_utilization=800,
        total_processing_load=4450,
        total_access_frequency=15500,
        total_memory_usage=2500,
        max_cpu_capacity=5000,
        max_memory_capacity=3000,
        key_ranges=[
            KeyRange("a000", "a999", 12000, 500, 3500, 1500),
            KeyRange("b000", "b999", 3000, 200, 800, 500),
            KeyRange("c000", "c999", 500, 100, 150, 500),
        ],
    )


@pytest.fixture
def cool_server():
    """Lightly loaded server with a 4000 CPU ceiling."""
    return ServerReport(
        instance_id="server-5678",
        total_storage_utilization=400,
        total_processing_load=2000,
        total_access_frequency=8000,
        total_memory_usage=1000,
        max_cpu_capacity=4000,
        max_memory_capacity=2000,
        key_ranges=[
            KeyRange("d000", "d999", 4000, 150, 1200, 300),
            KeyRange("e000", "e999", 2000, 100, 600, 200),
            KeyRange("f000", "f999", 2000, 150, 200, 500),
        ],
    )


@pytest.fixture
def reference_fleet(hot_server, cool_server):
    """Two-server fleet where moving the hot range would overload the destination."""
    return [hot_server, cool_server]
