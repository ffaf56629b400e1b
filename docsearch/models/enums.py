"""Enumeration types for docsearch data models."""

from enum import Enum


class Metric(str, Enum):
    COSINE = "cosine"
    DOT = "dot"
    EUCLIDEAN = "euclidean"

    @property
    def chroma_space(self) -> str:
        """Name of the matching ChromaDB ``hnsw:space``."""
        return {"cosine": "cosine", "dot": "ip", "euclidean": "l2"}[self.value]


class CommitStage(str, Enum):
    EMBEDDING = "embedding"
    STORAGE = "storage"
