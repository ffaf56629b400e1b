"""Process-level wiring: one embedding provider, one collection cache."""

from config.settings import Settings
from docsearch.embedding.provider import EmbeddingProvider
from docsearch.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider
from docsearch.models.enums import Metric
from docsearch.retrieval.facade import RetrievalFacade
from docsearch.vectorstore.collection_cache import CollectionCache, handle_factory
from docsearch.vectorstore.persistence import BatchPersistenceCoordinator


def build_cache(settings: Settings, provider: EmbeddingProvider | None = None) -> CollectionCache:
    """Create the collection cache, loading the embedding model unless one is given."""
    if provider is None:
        provider = SentenceTransformerEmbeddingProvider(settings.docsearch_embedding_model)
    metric = Metric(settings.docsearch_metric)
    return CollectionCache(handle_factory(str(settings.db_path), provider, metric))


def build_facade(settings: Settings, cache: CollectionCache | None = None) -> RetrievalFacade:
    if cache is None:
        cache = build_cache(settings)
    return RetrievalFacade(cache, default_top_k=settings.docsearch_top_k)


def build_coordinator(
    settings: Settings,
    cache: CollectionCache | None = None,
    batch_size: int | None = None,
) -> BatchPersistenceCoordinator:
    if cache is None:
        cache = build_cache(settings)
    return BatchPersistenceCoordinator(cache, batch_size=batch_size or settings.docsearch_batch_size)
