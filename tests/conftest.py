"""Shared fixtures: a deterministic embedding provider so tests never load a model."""

import hashlib
import math
import re

import pytest

from docsearch.embedding.provider import EmbeddingProvider

_WORD_RE = re.compile(r"\w+")


class FakeEmbeddingProvider(EmbeddingProvider):
    """Hashed bag-of-words vectors. Texts sharing words land close together."""

    def __init__(self, dimension: int = 32):
        self._dimension = dimension
        self.calls: list[list[str]] = []

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts must not be empty")
        self.calls.append(list(texts))
        return [self._vector(text) for text in texts]

    def _vector(self, text: str) -> list[float]:
        vector = [0.0] * self._dimension
        vector[0] = 0.01
        for word in _WORD_RE.findall(text.lower()):
            digest = hashlib.md5(word.encode("utf-8")).digest()
            vector[int.from_bytes(digest[:4], "big") % self._dimension] += 1.0
        norm = math.sqrt(sum(x * x for x in vector))
        return [x / norm for x in vector]

    @property
    def dimension(self) -> int:
        return self._dimension


@pytest.fixture
def embedding_provider():
    return FakeEmbeddingProvider(dimension=256)
