"""
On-demand observation sync.

Makes a given set of observations searchable right away instead of waiting
for a background sweep: one bulk read from the session store, normalization,
one batched hand-off to the Chroma indexer.
"""

from typing import Any, List, Optional, Protocol, Sequence
from memsync.models import (
    GetObservationsOptions, ObservationRecord, StoredObservation,
    SyncErrorKind, SyncResult
)
from memsync.normalize import to_stored_observation
from memsync.logging import get_logger

logger = get_logger(__name__)

NO_MATCHES_MESSAGE = "No observations found for given IDs"

class ObservationStore(Protocol):
    def get_observations_by_ids(
        self, ids: Sequence[int], options: Optional[GetObservationsOptions] = None
    ) -> List[ObservationRecord]:
        ...

class ObservationIndexer(Protocol):
    def sync_stored_observations(self, observations: Sequence[StoredObservation]) -> int:
        ...

def validate_ids(ids: Any) -> Optional[str]:
    """Return an error message for unusable ids, ``None`` when they are fine."""
    if not ids or not isinstance(ids, list):
        return "ids array is required"
    # bool is an int subclass but never a valid id
    if any(isinstance(i, bool) or not isinstance(i, int) or i < 1 for i in ids):
        return "ids must be positive integers"
    return None

class SyncService:
    """Synchronizes specific observations from the session store into Chroma."""

    def __init__(self, store: ObservationStore, indexer: ObservationIndexer):
        self.store = store
        self.indexer = indexer

    def sync_observations(self, ids: Any) -> SyncResult:
        error = validate_ids(ids)
        if error:
            return SyncResult(success=False, error_message=error, error_kind=SyncErrorKind.INVALID_INPUT)

        logger.info(f"Syncing {len(ids)} observations to Chroma (first ids: {ids[:5]})")

        try:
            records = self.store.get_observations_by_ids(ids, GetObservationsOptions())
        except Exception as e:
            logger.error(f"Failed to fetch observations: {e}")
            return SyncResult(
                success=False,
                error_message=f"Sync failed: {e}",
                error_kind=SyncErrorKind.LOOKUP_FAILURE,
            )

        if not records:
            return SyncResult(success=True, embedded_count=0, message=NO_MATCHES_MESSAGE)

        try:
            documents = [to_stored_observation(record) for record in records]
        except Exception as e:
            logger.error(f"Failed to normalize observations: {e}")
            return SyncResult(
                success=False,
                error_message=f"Sync failed: {e}",
                error_kind=SyncErrorKind.TRANSFORM_FAILURE,
            )

        try:
            embedded_count = self.indexer.sync_stored_observations(documents)
        except Exception as e:
            logger.error(f"Failed to sync observations: {e}")
            return SyncResult(
                success=False,
                error_message=f"Sync failed: {e}",
                error_kind=SyncErrorKind.DELEGATION_FAILURE,
            )

        logger.info(f"Synced {embedded_count}/{len(records)} observations")
        return SyncResult(success=True, embedded_count=embedded_count)
