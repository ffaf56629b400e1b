"""Batched embedding and commit of chunk text into a collection.

Texts are cut into fixed-size batches in their original order. Batch
``b`` item ``i`` gets global id ``i + b * batch_size + 1``, so ids are
``1..M`` for M texts and any batch can be re-committed on its own when a
load resumes. Each batch's vectors and payloads go to storage in one call.
"""

import json
import logging
from dataclasses import dataclass

from docsearch.embedding.provider import validate_embeddings
from docsearch.errors import BatchCommitError
from docsearch.models.chunk import TextChunk
from docsearch.models.enums import CommitStage
from docsearch.vectorstore.collection_cache import CollectionCache

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500


def global_id(local_index: int, batch_index: int, batch_size: int) -> int:
    """Collection-wide id of item ``local_index`` in batch ``batch_index``."""
    return local_index + batch_index * batch_size + 1


@dataclass
class PersistReport:
    """Summary of a successful persist run."""

    collection: str
    items: int
    batches: int
    first_id: int | None = None
    last_id: int | None = None


class BatchPersistenceCoordinator:
    """Embeds texts batch by batch and commits them to a cached collection handle."""

    def __init__(self, cache: CollectionCache, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size <= 0:
            raise ValueError(f"batch_size must be > 0, got {batch_size}")
        self._cache = cache
        self._batch_size = batch_size

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def reset(self, collection: str) -> None:
        """Empty ``collection``, waiting for any persist run in progress."""
        handle = self._cache.get_or_create(collection)
        with handle.commit_lock:
            handle.reset()

    def persist(self, collection: str, texts: list[str], start_batch: int = 0) -> PersistReport:
        """Store ``texts`` with payload ``{"text": ...}``.

        Raises:
            BatchCommitError: A batch failed; earlier batches stay committed.
        """
        payloads = [json.dumps({"text": text}, ensure_ascii=False) for text in texts]
        return self._persist(collection, texts, payloads, start_batch)

    def persist_chunks(
        self,
        collection: str,
        chunks: list[TextChunk],
        start_batch: int = 0,
    ) -> PersistReport:
        """Store chunk records; the payload carries the chunk's id, text and source."""
        texts = [chunk.text for chunk in chunks]
        payloads = [json.dumps(chunk.to_dict(), ensure_ascii=False) for chunk in chunks]
        return self._persist(collection, texts, payloads, start_batch)

    def _persist(
        self,
        collection: str,
        texts: list[str],
        payloads: list[str],
        start_batch: int,
    ) -> PersistReport:
        if start_batch < 0:
            raise ValueError(f"start_batch must be >= 0, got {start_batch}")

        handle = self._cache.get_or_create(collection)
        size = self._batch_size
        report = PersistReport(collection=collection, items=0, batches=0)

        with handle.commit_lock:
            for batch_index, offset in enumerate(range(0, len(texts), size)):
                if batch_index < start_batch:
                    continue

                batch_texts = texts[offset:offset + size]
                try:
                    embeddings = handle.embed(batch_texts)
                    validate_embeddings(embeddings, len(batch_texts), handle.dimension)
                except Exception as e:
                    logger.error("Embedding failed for %s batch %d: %s", collection, batch_index, e)
                    raise BatchCommitError(batch_index, CommitStage.EMBEDDING.value, e) from e

                ids = [global_id(i, batch_index, size) for i in range(len(batch_texts))]
                metadata_pairs = list(zip(ids, payloads[offset:offset + size]))
                try:
                    handle.commit_batch(embeddings, metadata_pairs)
                except Exception as e:
                    logger.error("Commit failed for %s batch %d: %s", collection, batch_index, e)
                    raise BatchCommitError(batch_index, CommitStage.STORAGE.value, e) from e

                if report.first_id is None:
                    report.first_id = ids[0]
                report.last_id = ids[-1]
                report.items += len(ids)
                report.batches += 1
                logger.info(
                    "Committed %s batch %d: ids %d-%d", collection, batch_index, ids[0], ids[-1]
                )

        return report
