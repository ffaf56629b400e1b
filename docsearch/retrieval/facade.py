"""Query a named collection and return the stored chunk text, nearest first."""

import json
import logging

from docsearch.embedding.provider import validate_embeddings
from docsearch.errors import RetrievalError
from docsearch.vectorstore.collection_cache import CollectionCache

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 20


def extract_text(payload: str | None) -> str | None:
    """Pull the ``text`` field out of a stored JSON payload.

    Returns None when the payload is missing, not JSON, not an object, or
    has no string ``text`` field. Other fields are ignored.
    """
    if payload is None:
        return None
    try:
        data = json.loads(payload)
    except (TypeError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    text = data.get("text")
    return text if isinstance(text, str) else None


def parse_documents(results: list[tuple[int, str | None]]) -> list[str]:
    """Turn (id, payload) search rows into plain text, skipping unusable rows."""
    documents = []
    for row_id, payload in results:
        text = extract_text(payload)
        if text is None:
            logger.debug("Skipping row %s: no usable text in payload", row_id)
            continue
        documents.append(text)
    return documents


class RetrievalFacade:
    """Single request/response semantic search over cached collections."""

    def __init__(self, cache: CollectionCache, default_top_k: int = DEFAULT_TOP_K):
        if default_top_k <= 0:
            raise ValueError(f"default_top_k must be > 0, got {default_top_k}")
        self._cache = cache
        self._default_top_k = default_top_k

    @property
    def default_top_k(self) -> int:
        return self._default_top_k

    def query(self, collection: str, text: str, top_k: int | None = None) -> list[str]:
        """Return up to ``top_k`` stored texts most similar to ``text``.

        An empty list means nothing relevant was found and is not an error.

        Raises:
            CacheConstructionError: The collection could not be opened.
            RetrievalError: The embedding model failed on the query or
                produced no vector.
            EmbeddingFailure: The query vector does not match the
                collection's dimension.
        """
        k = self._default_top_k if top_k is None else top_k
        if k <= 0:
            raise ValueError(f"top_k must be > 0, got {k}")

        handle = self._cache.get_or_create(collection)
        try:
            embedding = handle.embed_query(text)
        except Exception as e:
            logger.error("Embedding the query for %s failed: %s", collection, e)
            raise RetrievalError(
                f"failed to generate embedding for query in {collection!r}: {e}", e
            ) from e
        if embedding is None:
            raise RetrievalError(f"failed to generate embedding for query in {collection!r}")
        validate_embeddings([embedding], 1, handle.dimension)

        rows = handle.similarity_search(embedding, k)
        documents = parse_documents(rows)
        logger.info(
            "Query on %s returned %d of %d rows", collection, len(documents), len(rows)
        )
        return documents
