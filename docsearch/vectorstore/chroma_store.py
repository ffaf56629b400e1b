"""ChromaDB vector store holding one collection per document set.

Each stored item is a vector plus an opaque payload string (the chunk
record as JSON). Ids are the integer global ids assigned at load time,
stored as strings because ChromaDB requires string ids.
"""

import logging

import chromadb
from chromadb.config import Settings as ChromaSettings

from docsearch.models.enums import Metric

logger = logging.getLogger(__name__)


class ChromaStore:
    """ChromaDB-backed storage for embedded chunk payloads.

    Not safe for concurrent use; callers serialize access per instance.
    """

    def __init__(self, path: str = "./data/chroma"):
        if path == ":memory:":
            self._client = chromadb.EphemeralClient(
                settings=ChromaSettings(anonymized_telemetry=False),
            )
        else:
            self._client = chromadb.PersistentClient(
                path=path,
                settings=ChromaSettings(anonymized_telemetry=False),
            )
        self._collections = {}

    def create_collection(self, name: str, dimension: int, metric: Metric = Metric.COSINE) -> None:
        """Create ``name`` if absent. Safe to call repeatedly.

        Raises ValueError if the collection exists with a different dimension.
        """
        if dimension <= 0:
            raise ValueError(f"dimension must be > 0, got {dimension}")

        if self.has_collection(name):
            existing = self._client.get_collection(name=name)
            stored = (existing.metadata or {}).get("dimension")
            if stored is not None and stored != dimension:
                raise ValueError(
                    f"collection {name!r} has dimension {stored}, requested {dimension}"
                )

        self._collections[name] = self._client.get_or_create_collection(
            name=name,
            metadata={"hnsw:space": metric.chroma_space, "dimension": dimension},
        )
        logger.debug("Collection ready: %s (dim=%d, metric=%s)", name, dimension, metric.value)

    def commit_batch(
        self,
        name: str,
        embeddings: list[list[float]],
        metadata_pairs: list[tuple[int, str]],
    ) -> int:
        """Write vectors and their (id, payload) pairs in a single upsert.

        ChromaDB applies one upsert call as one write, so a batch is either
        stored completely or not at all. Returns the number of items written.
        """
        if len(embeddings) != len(metadata_pairs):
            raise ValueError(
                f"got {len(embeddings)} embeddings for {len(metadata_pairs)} metadata records"
            )
        if not embeddings:
            return 0

        collection = self._collection(name)
        dimension = (collection.metadata or {}).get("dimension")
        if dimension is not None:
            for vector in embeddings:
                if len(vector) != dimension:
                    raise ValueError(
                        f"embedding dimension must be {dimension}, got {len(vector)}"
                    )

        collection.upsert(
            ids=[str(global_id) for global_id, _ in metadata_pairs],
            embeddings=embeddings,
            documents=[payload for _, payload in metadata_pairs],
            metadatas=[{"global_id": global_id} for global_id, _ in metadata_pairs],
        )
        return len(metadata_pairs)

    def similarity_search(
        self,
        name: str,
        embedding: list[float],
        k: int,
    ) -> list[tuple[int, str | None]]:
        """Return up to ``k`` (id, payload) pairs, nearest first."""
        collection = self._collection(name)
        available = collection.count()
        if available == 0 or k <= 0:
            return []

        results = collection.query(
            query_embeddings=[embedding],
            n_results=min(k, available),
            include=["documents", "distances"],
        )

        output = []
        if results["ids"] and results["ids"][0]:
            documents = results["documents"][0] if results["documents"] else []
            for i, raw_id in enumerate(results["ids"][0]):
                payload = documents[i] if i < len(documents) else None
                output.append((int(raw_id), payload))
        return output

    def drop_collection(self, name: str) -> None:
        """Delete ``name`` and everything in it. No-op when it does not exist."""
        self._collections.pop(name, None)
        if self.has_collection(name):
            self._client.delete_collection(name=name)
            logger.info("Dropped collection: %s", name)

    def has_collection(self, name: str) -> bool:
        return name in self.collection_names()

    def collection_names(self) -> list[str]:
        # Depending on the chromadb release this yields names or Collection objects.
        return [
            c if isinstance(c, str) else c.name
            for c in self._client.list_collections()
        ]

    def count(self, name: str) -> int:
        """Return the number of items stored in ``name``."""
        return self._collection(name).count()

    def _collection(self, name: str):
        collection = self._collections.get(name)
        if collection is None:
            collection = self._client.get_collection(name=name)
            self._collections[name] = collection
        return collection
