"""
Simulation harness for the range balancer.

Exercises the planner against a synthetic, time-varying workload and
searches for weights that keep the fleet balanced with few migrations:

- KeyBehavior / simulate_server_load: Synthetic per-key workload
- apply_plans: Caller-side bookkeeping after plans execute
- balance_score: Outcome score (the only use of migration_penalty)
- run_simulation / tune_weights: Time-step loop and weight grid search
"""

from range_balancer.simulation.apply import apply_plans
from range_balancer.simulation.harness import (
    BALANCED_SPREAD,
    SimulationResult,
    SimulationStep,
    TuningGrid,
    TuningResult,
    WeightRange,
    default_fleet,
    load_tuning_grid,
    run_simulation,
    tune_weights,
)
from range_balancer.simulation.scoring import balance_score, load_spread
from range_balancer.simulation.workload import (
    DEFAULT_KEY_BEHAVIORS,
    KeyBehavior,
    simulate_server_load,
)

__all__ = [
    "apply_plans",
    "balance_score",
    "load_spread",
    "KeyBehavior",
    "DEFAULT_KEY_BEHAVIORS",
    "simulate_server_load",
    "BALANCED_SPREAD",
    "SimulationResult",
    "SimulationStep",
    "run_simulation",
    "default_fleet",
    "WeightRange",
    "TuningGrid",
    "TuningResult",
    "load_tuning_grid",
    "tune_weights",
]
