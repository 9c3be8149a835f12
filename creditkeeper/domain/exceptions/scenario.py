"""Scenario-related domain exceptions."""

from .base import DomainException


class InvalidScenarioException(DomainException):
    """Raised when a scenario cannot be projected."""

    def __init__(self, scenario_type: str, reason: str = "unrecognized scenario type"):
        super().__init__(
            message=f"Invalid scenario '{scenario_type}': {reason}",
            code="INVALID_SCENARIO",
        )
        self.scenario_type = scenario_type


class InvalidScenarioRequestException(DomainException):
    """Raised when a scenario request fails boundary validation."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_SCENARIO_REQUEST",
        )
