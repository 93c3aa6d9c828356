"""
Exception classes for rebalance planning.

- RebalanceError: Base class for all planning errors
- SnapshotValidationError: The snapshot or weights violate the input contract
- NoKeyRangesError: The most-loaded server owns no key ranges
- ConfigurationError: RANGE_BALANCER_* environment settings are invalid

Per project patterns:
- Store context data in attributes for error handling
- Include descriptive message with relevant details
"""


class RebalanceError(Exception):
    """Base class for errors raised while planning a rebalance."""


class SnapshotValidationError(RebalanceError):
    """
    Raised when a snapshot or weights configuration is ill-formed.

    Collects every problem found rather than failing on the first one,
    so callers get complete feedback.

    Attributes:
        errors: List of human-readable error messages
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"Invalid snapshot: {'; '.join(self.errors)}"


class NoKeyRangesError(RebalanceError):
    """
    Raised when the most-loaded server owns no key ranges.

    Hot range selection is undefined for such a server.

    Attributes:
        instance_id: The server that was selected as most loaded
    """

    def __init__(self, instance_id: str) -> None:
        self.instance_id = instance_id
        super().__init__(
            f"Server {instance_id} is the most loaded but owns no key ranges; "
            f"its reported totals do not match its ranges."
        )


class ConfigurationError(RebalanceError):
    """
    Raised when settings read from the environment are invalid.

    Attributes:
        errors: List of human-readable error messages
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"Invalid settings: {'; '.join(self.errors)}"
