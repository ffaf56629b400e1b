"""Application configuration management."""

from pathlib import Path

from pydantic_settings import BaseSettings

from docsearch.models.enums import Metric


class Settings(BaseSettings):
    """docsearch settings loaded from environment variables."""

    # Embedding
    docsearch_embedding_model: str = "all-MiniLM-L6-v2"

    # Storage
    docsearch_db_path: str = "./data/chroma"
    docsearch_chunks_path: str = "./artifacts/chunks"
    docsearch_metric: Metric = Metric.COSINE

    # Chunking
    docsearch_chunk_size: int = 400
    docsearch_chunk_overlap: int = 20

    # Loading
    docsearch_batch_size: int = 500

    # Retrieval
    docsearch_top_k: int = 20
    docsearch_collections: list[str] = ["docs"]

    # Logging
    docsearch_log_file: str | None = None

    @property
    def db_path(self) -> Path:
        return Path(self.docsearch_db_path)

    @property
    def chunks_path(self) -> Path:
        return Path(self.docsearch_chunks_path)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
