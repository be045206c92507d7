"""
Chroma indexing for stored observations.

Each observation is split into several small documents (narrative, raw text,
one per fact) so a search hit points at the specific piece that matched.
Document ids are derived from the observation id, which makes ``upsert``
idempotent: syncing the same observation twice rewrites its documents.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence
import chromadb
from memsync.config import settings
from memsync.embeddings import embed
from memsync.models import StoredObservation
from memsync.normalize import parse_json_list
from memsync.logging import get_logger

logger = get_logger(__name__)

Embedder = Callable[[List[str]], List[List[float]]]

def get_chromadb_client():
    """Get ChromaDB client configured for the current environment."""
    if settings.IS_EPHEMERAL_CHROMA:
        return chromadb.EphemeralClient()
    return chromadb.PersistentClient(path=settings.CHROMADB_PATH)

def _join(values: List[Any]) -> str:
    return ",".join(str(v) for v in values)

class ChromaSync:
    """Writes stored observations into a Chroma collection."""

    def __init__(
        self,
        client=None,
        collection_name: Optional[str] = None,
        embedder: Optional[Embedder] = None,
        batch_size: Optional[int] = None,
    ):
        self.client = client if client is not None else get_chromadb_client()
        self.collection_name = collection_name or settings.CHROMADB_COLLECTION
        self.embedder = embedder or embed
        self.batch_size = batch_size or settings.CHROMA_BATCH_SIZE
        self._collection = None

    def get_collection(self):
        if self._collection is None:
            # Vectors are always supplied explicitly, so no embedding function
            self._collection = self.client.get_or_create_collection(
                name=self.collection_name,
                metadata={"hnsw:space": "l2"},
                embedding_function=None,
            )
        return self._collection

    def format_observation_docs(self, observation: StoredObservation) -> List[Dict[str, Any]]:
        """Build the Chroma documents for one observation."""
        base_metadata = {
            "sqlite_id": observation.id,
            "doc_type": "observation",
            "memory_session_id": observation.memory_session_id,
            "project": observation.project,
            "created_at_epoch": observation.created_at_epoch,
            "type": observation.type or "discovery",
            "title": observation.title or "Untitled",
            "subtitle": observation.subtitle,
            "prompt_number": observation.prompt_number,
            "discovery_tokens": observation.discovery_tokens,
        }

        concepts = parse_json_list(observation.concepts)
        files_read = parse_json_list(observation.files_read)
        files_modified = parse_json_list(observation.files_modified)
        if concepts:
            base_metadata["concepts"] = _join(concepts)
        if files_read:
            base_metadata["files_read"] = _join(files_read)
        if files_modified:
            base_metadata["files_modified"] = _join(files_modified)

        docs = []

        if observation.narrative:
            docs.append({
                "id": f"obs_{observation.id}_narrative",
                "document": observation.narrative,
                "metadata": {**base_metadata, "field_type": "narrative"},
            })

        if observation.text:
            docs.append({
                "id": f"obs_{observation.id}_text",
                "document": observation.text,
                "metadata": {**base_metadata, "field_type": "text"},
            })

        for index, fact in enumerate(parse_json_list(observation.facts)):
            fact_text = fact if isinstance(fact, str) else str(fact)
            if not fact_text.strip():
                continue
            docs.append({
                "id": f"obs_{observation.id}_fact_{index}",
                "document": fact_text,
                "metadata": {**base_metadata, "field_type": "fact", "fact_index": index},
            })

        # Chroma metadata values must be scalars
        for doc in docs:
            doc["metadata"] = {k: v for k, v in doc["metadata"].items() if v is not None}

        return docs

    def _upsert(self, collection, docs: List[Dict[str, Any]]):
        for start in range(0, len(docs), self.batch_size):
            batch = docs[start:start + self.batch_size]
            texts = [doc["document"] for doc in batch]
            collection.upsert(
                ids=[doc["id"] for doc in batch],
                documents=texts,
                metadatas=[doc["metadata"] for doc in batch],
                embeddings=self.embedder(texts),
            )

    def sync_stored_observations(self, observations: Sequence[StoredObservation]) -> int:
        """Embed and upsert observations, returning how many were fully written.

        Each observation is written on its own, so one bad observation cannot
        sink the rest of the batch; ``batch_size`` only caps how many of a
        single observation's documents go into one embed and upsert call.
        Only an unreachable collection fails the whole call. An observation
        with nothing to index, or whose embedding or upsert raises, is logged
        and left out of the count.
        """
        collection = self.get_collection()
        embedded = 0

        for observation in observations:
            docs = self.format_observation_docs(observation)
            if not docs:
                logger.warning(f"Observation {observation.id} has no indexable content, skipping")
                continue
            try:
                self._upsert(collection, docs)
            except Exception as e:
                logger.warning(f"Failed to embed observation {observation.id}: {e}")
                continue
            embedded += 1

        logger.info(f"Upserted {embedded}/{len(observations)} observations into '{self.collection_name}'")
        return embedded

    def count(self) -> int:
        return self.get_collection().count()
