"""Repository interfaces for profile storage."""

from abc import ABC, abstractmethod
from typing import List, Optional

from creditkeeper.domain.entities import FinancialSnapshot


class ProfileRepository(ABC):
    """
    Abstract repository for FinancialSnapshot storage.

    The scoring core never holds profiles itself; callers look a snapshot up
    here and hand it to the engine. Implementations may use in-memory maps,
    a database, etc.
    """

    @abstractmethod
    def get(self, profile_id: str) -> Optional[FinancialSnapshot]:
        """
        Retrieve a snapshot by profile ID.

        Args:
            profile_id: The profile's unique identifier

        Returns:
            The snapshot if found, None otherwise
        """
        ...

    @abstractmethod
    def put(self, profile_id: str, snapshot: FinancialSnapshot) -> FinancialSnapshot:
        """
        Store a snapshot under a profile ID, replacing any previous one.

        Args:
            profile_id: The profile's unique identifier
            snapshot: The snapshot to store

        Returns:
            The stored snapshot
        """
        ...

    @abstractmethod
    def list_ids(self) -> List[str]:
        """
        List all stored profile IDs.

        Returns:
            Profile IDs in insertion order
        """
        ...
