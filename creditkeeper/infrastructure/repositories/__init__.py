"""Repository implementations."""

from .in_memory_profile_repository import InMemoryProfileRepository

__all__ = [
    "InMemoryProfileRepository",
]
