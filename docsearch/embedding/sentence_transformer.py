"""Sentence Transformer embedding provider implementation."""

import logging
import os
from contextlib import contextmanager

from sentence_transformers import SentenceTransformer

from docsearch.embedding.provider import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "all-MiniLM-L6-v2"


@contextmanager
def _quiet_native_output():
    """Redirect fds 1 and 2 to /dev/null and silence transformers logging.

    Model loading prints reports and progress bars straight to the file
    descriptors; under the MCP stdio transport fd 1 is the protocol stream.
    """
    old_verbosity = os.environ.get("TRANSFORMERS_VERBOSITY")
    os.environ["TRANSFORMERS_VERBOSITY"] = "error"
    devnull = os.open(os.devnull, os.O_WRONLY)
    saved_stdout = os.dup(1)
    saved_stderr = os.dup(2)
    os.dup2(devnull, 1)
    os.dup2(devnull, 2)
    os.close(devnull)
    try:
        yield
    finally:
        os.dup2(saved_stdout, 1)
        os.dup2(saved_stderr, 2)
        os.close(saved_stdout)
        os.close(saved_stderr)
        if old_verbosity is None:
            os.environ.pop("TRANSFORMERS_VERBOSITY", None)
        else:
            os.environ["TRANSFORMERS_VERBOSITY"] = old_verbosity


class SentenceTransformerEmbeddingProvider(EmbeddingProvider):
    """Embedding provider wrapping sentence-transformers models.

    Default model: all-MiniLM-L6-v2 (384 dimensions). Prefers the local
    model cache and downloads only when the model is missing.
    """

    def __init__(self, model_name: str = DEFAULT_MODEL, normalize: bool = True):
        logger.info("Loading embedding model: %s", model_name)
        with _quiet_native_output():
            try:
                self._model = SentenceTransformer(model_name, local_files_only=True)
            except OSError:
                self._model = SentenceTransformer(model_name)
        self._model_name = model_name
        self._normalize = normalize
        self._dimension = self._model.get_sentence_embedding_dimension()

    @property
    def model_name(self) -> str:
        return self._model_name

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts must not be empty")
        embeddings = self._model.encode(
            texts,
            show_progress_bar=False,
            normalize_embeddings=self._normalize,
        )
        return embeddings.tolist()

    @property
    def dimension(self) -> int:
        return self._dimension
