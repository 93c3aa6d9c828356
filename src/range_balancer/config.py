"""Environment-based configuration for the range balancer command line."""

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from range_balancer.detector import IMBALANCE_THRESHOLD
from range_balancer.exceptions import ConfigurationError
from range_balancer.types import SplitStrategy, Weights


class BalancerSettings(BaseSettings):
    """Range balancer configuration.

    Supplies the weights used when no weights file is given, plus the
    planning knobs. All settings can be overridden via environment
    variables with RANGE_BALANCER_ prefix. For example:
        RANGE_BALANCER_CPU_WEIGHT=1.0
        RANGE_BALANCER_SPLIT_STRATEGY=lexicographic

    The engine itself never reads these; they are resolved at the edge and
    passed in explicitly.
    """

    # Scoring weights
    cpu_weight: float = Field(default=0.5, ge=0)
    memory_weight: float = Field(default=0.5, ge=0)
    storage_weight: float = Field(default=0.3, ge=0)
    access_frequency_weight: float = Field(default=0.1, ge=0)
    migration_penalty: float = Field(default=1.0, ge=0)

    # Planning
    imbalance_threshold: float = Field(default=IMBALANCE_THRESHOLD, ge=0)
    split_strategy: SplitStrategy = SplitStrategy.FIRST_CHARACTER

    model_config = {"env_prefix": "RANGE_BALANCER_"}

    def weights(self) -> Weights:
        """Build the Weights value passed to the engine."""
        return Weights(
            cpu_weight=self.cpu_weight,
            memory_weight=self.memory_weight,
            storage_weight=self.storage_weight,
            access_frequency_weight=self.access_frequency_weight,
            migration_penalty=self.migration_penalty,
        )


def load_settings() -> BalancerSettings:
    """
    Read settings from the environment.

    Raises:
        ConfigurationError: If any RANGE_BALANCER_* value is invalid
            (contains all errors)
    """
    try:
        return BalancerSettings()
    except ValidationError as e:
        prefix = BalancerSettings.model_config["env_prefix"]
        raise ConfigurationError(
            [
                f"{prefix}{'_'.join(str(part) for part in detail['loc']).upper()}: "
                f"{detail['msg']}"
                for detail in e.errors()
            ]
        ) from e
