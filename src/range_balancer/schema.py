"""
Pydantic file schemas for snapshots, weights and plans.

This module provides Pydantic models for parsing the files the command
line and simulation harness read and write:
- Snapshot files: a list of server reports (or {"servers": [...]})
- Weights files: the five scoring weights
- Plan output: migration plans as plain dicts

These are file schemas for external data validation. Internal types
(ServerReport, KeyRange, etc.) are dataclasses in range_balancer.types.

Notes:
- Files are read with yaml.safe_load, so JSON files parse too
- Field names from monitoring exports are accepted as aliases:
  request_processing_load, data_access_frequency, total_request_*,
  total_data_* and camelCase weight names (cpuWeight, ...)
- NaN/inf are rejected at parse time
"""

from dataclasses import asdict
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from range_balancer.exceptions import SnapshotValidationError
from range_balancer.types import KeyRange, MigrationPlan, ServerReport, Weights


def _metric(*aliases: str, gt: float | None = None) -> Any:
    """Non-negative (or positive) finite float field accepting aliases."""
    if gt is not None:
        return Field(validation_alias=AliasChoices(*aliases), gt=gt, allow_inf_nan=False)
    return Field(
        default=0.0,
        validation_alias=AliasChoices(*aliases),
        ge=0,
        allow_inf_nan=False,
    )


class KeyRangeModel(BaseModel):
    """Single key range entry in a snapshot file."""

    model_config = ConfigDict(populate_by_name=True)

    start_key: str
    end_key: str
    access_frequency: float = _metric("access_frequency", "data_access_frequency")
    storage_utilization: float = _metric("storage_utilization")
    processing_load: float = _metric("processing_load", "request_processing_load")
    memory_usage: float = _metric("memory_usage")

    def to_key_range(self) -> KeyRange:
        return KeyRange(**self.model_dump())


class ServerReportModel(BaseModel):
    """
    Single server entry in a snapshot file.

    Example entry:
    {
        "instance_id": "server-1234",
        "total_storage_utilization": 800,
        "total_request_processing_load": 4450,
        "total_data_access_frequency": 15500,
        "total_memory_usage": 2500,
        "max_cpu_capacity": 5000,
        "max_memory_capacity": 3000,
        "key_ranges": [{"start_key": "a000", "end_key": "a999", ...}]
    }
    """

    model_config = ConfigDict(populate_by_name=True)

    instance_id: str
    total_storage_utilization: float = _metric("total_storage_utilization")
    total_processing_load: float = _metric(
        "total_processing_load", "total_request_processing_load"
    )
    total_access_frequency: float = _metric(
        "total_access_frequency", "total_data_access_frequency"
    )
    total_memory_usage: float = _metric("total_memory_usage")
    max_cpu_capacity: float = _metric("max_cpu_capacity", gt=0)
    max_memory_capacity: float = _metric("max_memory_capacity", gt=0)
    key_ranges: list[KeyRangeModel] = Field(default_factory=list)

    def to_server_report(self) -> ServerReport:
        return ServerReport(
            instance_id=self.instance_id,
            total_storage_utilization=self.total_storage_utilization,
            total_processing_load=self.total_processing_load,
            total_access_frequency=self.total_access_frequency,
            total_memory_usage=self.total_memory_usage,
            max_cpu_capacity=self.max_cpu_capacity,
            max_memory_capacity=self.max_memory_capacity,
            key_ranges=[r.to_key_range() for r in self.key_ranges],
        )


class SnapshotModel(BaseModel):
    """A fleet snapshot: every server report at one point in time."""

    servers: list[ServerReportModel] = Field(default_factory=list)

    def to_server_reports(self) -> list[ServerReport]:
        return [s.to_server_report() for s in self.servers]


class WeightsModel(BaseModel):
    """Scoring weights file. All weights are required and non-negative."""

    model_config = ConfigDict(populate_by_name=True)

    cpu_weight: float = Field(
        validation_alias=AliasChoices("cpu_weight", "cpuWeight"), ge=0, allow_inf_nan=False
    )
    memory_weight: float = Field(
        validation_alias=AliasChoices("memory_weight", "memoryWeight"),
        ge=0,
        allow_inf_nan=False,
    )
    storage_weight: float = Field(
        validation_alias=AliasChoices("storage_weight", "storageWeight"),
        ge=0,
        allow_inf_nan=False,
    )
    access_frequency_weight: float = Field(
        validation_alias=AliasChoices("access_frequency_weight", "accessFrequencyWeight"),
        ge=0,
        allow_inf_nan=False,
    )
    migration_penalty: float = Field(
        validation_alias=AliasChoices("migration_penalty", "migrationPenalty"),
        ge=0,
        allow_inf_nan=False,
    )

    def to_weights(self) -> Weights:
        return Weights(**self.model_dump())


class MigrationPlanModel(BaseModel):
    """Migration plan as written to plan output."""

    start_key: str
    end_key: str
    source_instance: str
    destination_instance: str


def _format_validation_error(source: str, error: ValidationError) -> list[str]:
    """Flatten pydantic errors into "source: loc: message" strings."""
    messages = []
    for detail in error.errors():
        loc = ".".join(str(part) for part in detail["loc"])
        messages.append(f"{source}: {loc}: {detail['msg']}")
    return messages


def _read_yaml(path: Path) -> Any:
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SnapshotValidationError([f"{path}: {e}"]) from e


def parse_snapshot(data: Any, source: str = "snapshot") -> list[ServerReport]:
    """
    Validate raw snapshot data and convert it to server reports.

    Accepts either a list of server entries or a mapping with a
    "servers" key.

    Raises:
        SnapshotValidationError: On schema violations (contains all errors)
    """
    if data is None:
        data = []
    if isinstance(data, list):
        data = {"servers": data}
    try:
        return SnapshotModel.model_validate(data).to_server_reports()
    except ValidationError as e:
        raise SnapshotValidationError(_format_validation_error(source, e)) from e


def parse_weights(data: Any, source: str = "weights") -> Weights:
    """
    Validate raw weights data.

    Raises:
        SnapshotValidationError: On schema violations (contains all errors)
    """
    try:
        return WeightsModel.model_validate(data or {}).to_weights()
    except ValidationError as e:
        raise SnapshotValidationError(_format_validation_error(source, e)) from e


def load_snapshot(path: Path) -> list[ServerReport]:
    """Load and validate a snapshot from a YAML or JSON file."""
    return parse_snapshot(_read_yaml(path), source=str(path))


def load_weights(path: Path) -> Weights:
    """Load and validate weights from a YAML or JSON file."""
    return parse_weights(_read_yaml(path), source=str(path))


def dump_plans(plans: list[MigrationPlan]) -> list[dict[str, str]]:
    """Convert plans to JSON-serializable dicts."""
    return [MigrationPlanModel(**asdict(plan)).model_dump() for plan in plans]


def dump_snapshot(servers: list[ServerReport]) -> list[dict[str, Any]]:
    """Convert server reports to JSON-serializable dicts."""
    return [asdict(server) for server in servers]
