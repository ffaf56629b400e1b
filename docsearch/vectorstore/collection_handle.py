"""Per-collection handle binding a storage connection to the embedding provider."""

import logging
import threading

from docsearch.embedding.provider import EmbeddingProvider
from docsearch.models.enums import Metric
from docsearch.vectorstore.chroma_store import ChromaStore

logger = logging.getLogger(__name__)


class CollectionHandle:
    """Everything needed to write to and search one named collection.

    The collection name is fixed at construction and passed on every
    storage call. The store is not safe for concurrent calls, so each call
    takes the connection lock. ``commit_lock`` serializes whole persist
    runs so batch offsets land in order.
    """

    def __init__(
        self,
        collection_name: str,
        store: ChromaStore,
        embedding_provider: EmbeddingProvider,
        metric: Metric = Metric.COSINE,
    ):
        if not collection_name:
            raise ValueError("collection_name must not be empty")
        self._collection_name = collection_name
        self._store = store
        self._embedding_provider = embedding_provider
        self._metric = metric
        self._dimension = embedding_provider.dimension
        self._connection_lock = threading.Lock()
        self.commit_lock = threading.Lock()

    @classmethod
    def open(
        cls,
        collection_name: str,
        db_path: str,
        embedding_provider: EmbeddingProvider,
        metric: Metric = Metric.COSINE,
    ) -> "CollectionHandle":
        """Open a store on ``db_path`` and make sure the collection exists."""
        store = ChromaStore(path=db_path)
        store.create_collection(collection_name, embedding_provider.dimension, metric)
        logger.info("Opened collection %s at %s", collection_name, db_path)
        return cls(collection_name, store, embedding_provider, metric)

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def metric(self) -> Metric:
        return self._metric

    def embed(self, texts: list[str]) -> list[list[float]]:
        return self._embedding_provider.embed(texts)

    def embed_query(self, text: str) -> list[float] | None:
        """Embed a single query string; None if the provider returned nothing."""
        vectors = self._embedding_provider.embed_query([text])
        if not vectors or not len(vectors[0]):
            return None
        return list(vectors[0])

    def commit_batch(self, embeddings: list[list[float]], metadata_pairs: list[tuple[int, str]]) -> int:
        with self._connection_lock:
            return self._store.commit_batch(self._collection_name, embeddings, metadata_pairs)

    def similarity_search(self, embedding: list[float], k: int) -> list[tuple[int, str | None]]:
        with self._connection_lock:
            return self._store.similarity_search(self._collection_name, embedding, k)

    def count(self) -> int:
        with self._connection_lock:
            return self._store.count(self._collection_name)

    def reset(self) -> None:
        """Drop every stored item by recreating the collection."""
        with self._connection_lock:
            self._store.drop_collection(self._collection_name)
            self._store.create_collection(self._collection_name, self._dimension, self._metric)
        logger.info("Reset collection %s", self._collection_name)
