"""Typed failures raised by the segmentation, cache and persistence layers."""

from __future__ import annotations


class DocsearchError(Exception):
    """Base class for docsearch failures.

    Args:
        message: Human-readable description.
        original: The lower-level exception that caused this one, if any.
    """

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original = original

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "original": repr(self.original) if self.original else None,
        }


class SegmentationConfigError(DocsearchError, ValueError):
    """Invalid chunk size / overlap combination."""


class IdentityCollision(DocsearchError):
    """Two different source files produced the same identity prefix."""

    def __init__(self, prefix: str, first_source: str, second_source: str) -> None:
        super().__init__(
            f"identity prefix {prefix} shared by {first_source!r} and {second_source!r}"
        )
        self.prefix = prefix
        self.first_source = first_source
        self.second_source = second_source


class CacheConstructionError(DocsearchError):
    """Opening the storage or embedding side of a collection handle failed."""

    def __init__(self, collection_name: str, original: Exception) -> None:
        super().__init__(
            f"failed to initialize collection {collection_name!r}: {original}",
            original,
        )
        self.collection_name = collection_name


class EmbeddingFailure(DocsearchError):
    """The embedding capability returned an empty or malformed result."""


class BatchCommitError(DocsearchError):
    """A persistence batch failed during embedding or storage commit.

    Batches before ``batch_index`` are already committed; resume from
    ``batch_index``.
    """

    def __init__(self, batch_index: int, stage: str, original: Exception) -> None:
        super().__init__(
            f"batch {batch_index} failed during {stage}: {original}",
            original,
        )
        self.batch_index = batch_index
        self.stage = stage

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({"batch_index": self.batch_index, "stage": self.stage})
        return data


class RetrievalError(DocsearchError):
    """A query could not be answered (e.g. the query produced no embedding)."""
