"""Embedding capability shared by every collection handle."""

from abc import ABC, abstractmethod

from docsearch.errors import EmbeddingFailure


class EmbeddingProvider(ABC):
    """Maps text to vectors of one fixed :attr:`dimension`.

    A single provider is built per process and bound to every collection
    handle, so a collection's stored dimension is the provider's. Callers
    check results with :func:`validate_embeddings` before anything reaches
    storage.
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed chunk texts for storage, one vector per input in input order.

        Raises:
            ValueError: If texts is empty.
        """
        ...

    def embed_query(self, texts: list[str]) -> list[list[float]]:
        """Embed search queries. Same contract as :meth:`embed`."""
        return self.embed(texts)

    @property
    @abstractmethod
    def dimension(self) -> int:
        ...


def validate_embeddings(embeddings: list[list[float]] | None, expected: int, dimension: int) -> None:
    """Check a provider result: ``expected`` non-empty vectors of ``dimension`` floats.

    Raises:
        EmbeddingFailure: Wrong count, an empty vector, or a dimension mismatch.
    """
    if embeddings is None or len(embeddings) != expected:
        got = 0 if embeddings is None else len(embeddings)
        raise EmbeddingFailure(f"expected {expected} embeddings, got {got}")
    for i, vector in enumerate(embeddings):
        if vector is None or len(vector) == 0:
            raise EmbeddingFailure(f"empty embedding for input {i}")
        if len(vector) != dimension:
            raise EmbeddingFailure(
                f"embedding {i} has dimension {len(vector)}, expected {dimension}"
            )
