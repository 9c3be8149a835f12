"""In-memory repository implementation for financial profiles."""

from typing import Dict, List, Optional

from creditkeeper.domain.entities import FinancialSnapshot
from creditkeeper.domain.interfaces import ProfileRepository


class InMemoryProfileRepository(ProfileRepository):
    """
    Dictionary-backed profile repository.

    Snapshots are copied on the way in and on the way out, so callers never
    share a mutable snapshot with the store.
    """

    def __init__(self):
        self._profiles: Dict[str, FinancialSnapshot] = {}

    def get(self, profile_id: str) -> Optional[FinancialSnapshot]:
        snapshot = self._profiles.get(profile_id)
        if snapshot is None:
            return None
        return snapshot.clone()

    def put(self, profile_id: str, snapshot: FinancialSnapshot) -> FinancialSnapshot:
        self._profiles[profile_id] = snapshot.clone()
        return snapshot

    def list_ids(self) -> List[str]:
        return list(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)
