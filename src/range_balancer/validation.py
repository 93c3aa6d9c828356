"""
Pre-flight validation of snapshots and weights.

Ill-formed input is a caller contract violation: scoring it would compare
undefined values (NaN never compares greater) and could produce a plan
from garbage. Validation collects ALL errors before raising, giving callers
complete feedback rather than failing on the first issue.

Not checked here:
- That totals equal the sum of range metrics (trusted)
- That ranges partition the keyspace without gaps or overlaps, or that
  start_key <= end_key (trusted; first-character splits can emit a lower
  half whose start sorts after its end)
- That the most-loaded server owns ranges (checked by the selector, since
  servers without ranges are legal destinations)

Example:
    ```python
    try:
        validate_snapshot(servers, weights)
    except SnapshotValidationError as e:
        print(e)  # "Invalid snapshot: server s1: max_cpu_capacity must be > 0, got 0"
    ```
"""

import logging
import math

from range_balancer.exceptions import SnapshotValidationError
from range_balancer.types import ServerReport, Weights

logger = logging.getLogger(__name__)

_RANGE_METRICS = (
    "access_frequency",
    "storage_utilization",
    "processing_load",
    "memory_usage",
)

_SERVER_TOTALS = (
    "total_storage_utilization",
    "total_processing_load",
    "total_access_frequency",
    "total_memory_usage",
)

_CAPACITIES = ("max_cpu_capacity", "max_memory_capacity")

_WEIGHT_FIELDS = (
    "cpu_weight",
    "memory_weight",
    "storage_weight",
    "access_frequency_weight",
    "migration_penalty",
)


def _check_non_negative(value: float, label: str, errors: list[str]) -> None:
    """Append an error unless value is a finite number >= 0."""
    if not math.isfinite(value) or value < 0:
        errors.append(f"{label} must be a finite value >= 0, got {value}")


def _check_positive(value: float, label: str, errors: list[str]) -> None:
    """Append an error unless value is a finite number > 0."""
    if not math.isfinite(value) or value <= 0:
        errors.append(f"{label} must be a finite value > 0, got {value}")


def weight_errors(weights: Weights) -> list[str]:
    """Return every problem with a weights configuration."""
    errors: list[str] = []
    for name in _WEIGHT_FIELDS:
        _check_non_negative(getattr(weights, name), f"weights.{name}", errors)
    return errors


def snapshot_errors(servers: list[ServerReport]) -> list[str]:
    """
    Return every problem with a fleet snapshot.

    Checks:
    1. Instance IDs are unique
    2. Totals and range metrics are finite and non-negative
    3. Capacities are finite and positive
    """
    errors: list[str] = []
    seen: set[str] = set()

    for server in servers:
        prefix = f"server {server.instance_id}"
        if server.instance_id in seen:
            errors.append(f"duplicate instance_id '{server.instance_id}'")
        seen.add(server.instance_id)

        for name in _SERVER_TOTALS:
            _check_non_negative(getattr(server, name), f"{prefix}: {name}", errors)
        for name in _CAPACITIES:
            _check_positive(getattr(server, name), f"{prefix}: {name}", errors)

        for key_range in server.key_ranges:
            range_label = f"{prefix}: range {key_range.start_key}-{key_range.end_key}"
            for name in _RANGE_METRICS:
                _check_non_negative(
                    getattr(key_range, name), f"{range_label}: {name}", errors
                )

    return errors


def validate_snapshot(servers: list[ServerReport], weights: Weights) -> None:
    """
    Validate a snapshot and its weights together.

    Raises:
        SnapshotValidationError: If validation fails (contains all errors)
    """
    errors = weight_errors(weights) + snapshot_errors(servers)
    if errors:
        logger.warning(f"Snapshot rejected with {len(errors)} error(s)")
        raise SnapshotValidationError(errors)
