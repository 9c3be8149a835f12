"""Profile-related domain exceptions."""

from .base import DomainException


class ProfileNotFoundException(DomainException):
    """Raised when a financial profile cannot be found."""

    def __init__(self, profile_id: str):
        super().__init__(
            message=f"Profile not found: {profile_id}",
            code="PROFILE_NOT_FOUND",
        )
        self.profile_id = profile_id


class UnknownArchetypeException(DomainException):
    """Raised when a synthetic profile is requested for an unknown archetype."""

    def __init__(self, archetype: str):
        super().__init__(
            message=f"Unknown profile archetype: {archetype}",
            code="UNKNOWN_ARCHETYPE",
        )
        self.archetype = archetype
