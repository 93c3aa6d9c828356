"""
Simulation harness for exercising the planner over time.

Each time step:
1. Recompute every server's load from the synthetic key workload
2. Plan migrations for the resulting snapshot
3. Apply the plans to the snapshot

The weight search runs one simulation per weight combination from a
TuningGrid (YAML-loadable) and keeps the best-scoring combination.
"""

import logging
import math
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from itertools import product
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

from range_balancer.balancer import plan_migrations
from range_balancer.detector import IMBALANCE_THRESHOLD
from range_balancer.simulation.apply import apply_plans
from range_balancer.simulation.scoring import balance_score, load_spread
from range_balancer.simulation.workload import (
    DEFAULT_KEY_BEHAVIORS,
    KeyBehavior,
    simulate_server_load,
)
from range_balancer.types import (
    KeyRange,
    MigrationPlan,
    ServerReport,
    SplitStrategy,
    Weights,
)

logger = logging.getLogger(__name__)

DEFAULT_STEPS = 20

BALANCED_SPREAD = 1000.0
"""Final load spread above which a run is reported as still imbalanced."""


def default_fleet() -> list[ServerReport]:
    """Two servers, each owning one range, with no load yet."""
    return [
        ServerReport(
            instance_id="server-1234",
            total_storage_utilization=0.0,
            total_processing_load=0.0,
            total_access_frequency=0.0,
            total_memory_usage=0.0,
            max_cpu_capacity=5000.0,
            max_memory_capacity=3000.0,
            key_ranges=[KeyRange(start_key="a000", end_key="a999")],
        ),
        ServerReport(
            instance_id="server-5678",
            total_storage_utilization=0.0,
            total_processing_load=0.0,
            total_access_frequency=0.0,
            total_memory_usage=0.0,
            max_cpu_capacity=4000.0,
            max_memory_capacity=2000.0,
            key_ranges=[KeyRange(start_key="b000", end_key="b999")],
        ),
    ]


@dataclass
class SimulationStep:
    """
    One time step of a simulation.

    Attributes:
        time: Time step index (0-based)
        servers: Snapshot after the step's plans were applied
        plans: Plans emitted during this step
    """

    time: int
    servers: list[ServerReport]
    plans: list[MigrationPlan]


@dataclass
class SimulationResult:
    """
    Outcome of a full simulation run.

    Attributes:
        weights: Weights the run was planned with
        steps: Per-step records in order
        score: balance_score of the final snapshot over all plans
        load_spread: Final gap between highest and lowest server score
    """

    weights: Weights
    steps: list[SimulationStep] = field(default_factory=list)
    score: float = 0.0
    load_spread: float = 0.0

    @property
    def plans(self) -> list[MigrationPlan]:
        """Every plan emitted during the run, in order."""
        return [plan for step in self.steps for plan in step.plans]

    @property
    def final_servers(self) -> list[ServerReport]:
        """Snapshot after the last step."""
        return self.steps[-1].servers if self.steps else []

    @property
    def balanced(self) -> bool:
        """True if the final spread is within BALANCED_SPREAD."""
        return self.load_spread <= BALANCED_SPREAD


def run_simulation(
    weights: Weights,
    *,
    servers: list[ServerReport] | None = None,
    steps: int = DEFAULT_STEPS,
    behaviors: Mapping[str, KeyBehavior] = DEFAULT_KEY_BEHAVIORS,
    imbalance_threshold: float = IMBALANCE_THRESHOLD,
    split_strategy: SplitStrategy = SplitStrategy.FIRST_CHARACTER,
) -> SimulationResult:
    """
    Run the planner against a fluctuating workload.

    Args:
        weights: Weights passed to the planner and used for scoring
        servers: Initial fleet (default_fleet() if None)
        steps: Number of time steps
        behaviors: Key workload, keyed by key
        imbalance_threshold: Passed through to the planner
        split_strategy: Passed through to the planner

    Returns:
        SimulationResult with per-step snapshots and the final score
    """
    current = servers if servers is not None else default_fleet()
    result = SimulationResult(weights=weights)

    for time in range(steps):
        current = [simulate_server_load(server, time, behaviors) for server in current]
        plans = plan_migrations(
            current,
            weights,
            imbalance_threshold=imbalance_threshold,
            split_strategy=split_strategy,
        )
        current = apply_plans(current, plans)
        result.steps.append(SimulationStep(time=time, servers=current, plans=plans))

    result.score = balance_score(current, result.plans, weights)
    result.load_spread = load_spread(current, weights)
    logger.debug(
        f"Simulation finished: {len(result.plans)} plans, "
        f"spread {result.load_spread:.2f}, score {result.score:.4f}"
    )
    return result


class WeightRange(BaseModel):
    """Inclusive range of values to try for one weight."""

    start: float = Field(ge=0)
    stop: float = Field(ge=0)
    step: float = Field(gt=0)

    @model_validator(mode="after")
    def check_order(self) -> "WeightRange":
        if self.stop < self.start:
            raise ValueError(f"stop ({self.stop}) must be >= start ({self.start})")
        return self

    def values(self) -> list[float]:
        """Values from start to stop inclusive, tolerant of float drift."""
        count = math.floor((self.stop - self.start) / self.step + 1e-9)
        return [round(self.start + i * self.step, 10) for i in range(count + 1)]


class TuningGrid(BaseModel):
    """Weight search space with validation. Defaults cover the full sweep."""

    cpu_weight: WeightRange = WeightRange(start=0.5, stop=5.0, step=0.5)
    memory_weight: WeightRange = WeightRange(start=0.5, stop=5.0, step=0.5)
    storage_weight: WeightRange = WeightRange(start=0.1, stop=3.0, step=0.2)
    access_frequency_weight: WeightRange = WeightRange(start=0.1, stop=3.0, step=0.2)
    migration_penalty: WeightRange = WeightRange(start=1.0, stop=20.0, step=1.0)
    steps: int = Field(default=DEFAULT_STEPS, ge=1)

    def combinations(self) -> Iterator[Weights]:
        """Generate every weight combination (cpu varies slowest)."""
        for cpu, memory, storage, access, penalty in product(
            self.cpu_weight.values(),
            self.memory_weight.values(),
            self.storage_weight.values(),
            self.access_frequency_weight.values(),
            self.migration_penalty.values(),
        ):
            yield Weights(
                cpu_weight=cpu,
                memory_weight=memory,
                storage_weight=storage,
                access_frequency_weight=access,
                migration_penalty=penalty,
            )

    def size(self) -> int:
        """Number of combinations in the grid."""
        return math.prod(
            len(r.values())
            for r in (
                self.cpu_weight,
                self.memory_weight,
                self.storage_weight,
                self.access_frequency_weight,
                self.migration_penalty,
            )
        )


def load_tuning_grid(path: Path) -> TuningGrid:
    """Load and validate a tuning grid from a YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return TuningGrid.model_validate(data or {})


@dataclass
class TuningResult:
    """
    Best weights found by a grid search.

    Attributes:
        weights: Best-scoring combination
        score: Its simulation score
        evaluated: Number of combinations simulated
    """

    weights: Weights
    score: float
    evaluated: int


def tune_weights(
    grid: TuningGrid,
    *,
    servers: list[ServerReport] | None = None,
    behaviors: Mapping[str, KeyBehavior] = DEFAULT_KEY_BEHAVIORS,
    on_result: Callable[[SimulationResult], None] | None = None,
) -> TuningResult:
    """
    Simulate every combination in the grid and keep the best one.

    The first combination reaching the best score wins ties.

    Args:
        grid: Weight search space
        servers: Initial fleet for every run (default_fleet() if None)
        behaviors: Key workload
        on_result: Called with each run's result, e.g. to report progress
    """
    best: SimulationResult | None = None
    evaluated = 0

    for weights in grid.combinations():
        run_servers = servers if servers is not None else default_fleet()
        result = run_simulation(
            weights, servers=run_servers, steps=grid.steps, behaviors=behaviors
        )
        evaluated += 1
        if on_result is not None:
            on_result(result)
        if best is None or result.score > best.score:
            best = result

    if best is None:
        raise ValueError("Tuning grid produced no weight combinations")

    logger.info(f"Best of {evaluated} combinations scored {best.score:.4f}")
    return TuningResult(weights=best.weights, score=best.score, evaluated=evaluated)
