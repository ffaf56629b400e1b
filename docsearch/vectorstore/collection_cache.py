"""Process-wide cache of collection handles.

Lookups share a read lock. A miss builds the handle with no lock held,
then publishes it with an insert-if-absent under the write lock, so
concurrent first lookups of one name all end up with the same handle
even if more than one was built.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator

from docsearch.embedding.provider import EmbeddingProvider
from docsearch.errors import CacheConstructionError
from docsearch.models.enums import Metric
from docsearch.vectorstore.collection_handle import CollectionHandle

logger = logging.getLogger(__name__)

HandleFactory = Callable[[str], CollectionHandle]


class ReadWriteLock:
    """Many concurrent readers or one writer. Waiting writers block new readers."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


def handle_factory(
    db_path: str,
    embedding_provider: EmbeddingProvider,
    metric: Metric = Metric.COSINE,
) -> HandleFactory:
    """Build the default factory: ChromaDB at ``db_path`` plus the shared provider."""

    def factory(collection_name: str) -> CollectionHandle:
        return CollectionHandle.open(collection_name, db_path, embedding_provider, metric)

    return factory


class CollectionCache:
    """Maps collection names to shared :class:`CollectionHandle` instances."""

    def __init__(self, factory: HandleFactory):
        self._factory = factory
        self._handles: dict[str, CollectionHandle] = {}
        self._lock = ReadWriteLock()

    def get_or_create(self, name: str) -> CollectionHandle:
        """Return the handle for ``name``, building it on first use.

        Raises:
            CacheConstructionError: The factory failed. Nothing is cached,
                so the next call tries again.
        """
        with self._lock.read():
            handle = self._handles.get(name)
        if handle is not None:
            return handle

        try:
            candidate = self._factory(name)
        except Exception as e:
            logger.error("Failed to initialize collection %s: %s", name, e)
            raise CacheConstructionError(name, e) from e

        with self._lock.write():
            winner = self._handles.setdefault(name, candidate)

        if winner is not candidate:
            logger.debug("Discarding redundant handle for %s", name)
        else:
            logger.info("Cached handle for collection %s", name)
        return winner

    def evict(self, name: str) -> CollectionHandle | None:
        """Forget the handle for ``name`` (e.g. after the collection is dropped)."""
        with self._lock.write():
            return self._handles.pop(name, None)

    def names(self) -> list[str]:
        with self._lock.read():
            return sorted(self._handles)

    def __contains__(self, name: str) -> bool:
        with self._lock.read():
            return name in self._handles

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._handles)
