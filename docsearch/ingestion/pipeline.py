"""Ingestion pipeline orchestrators.

Chunking: document directory → chunker → JSONL chunk file.
Loading: JSONL chunk file → batch persistence → collection.
"""

import logging
from pathlib import Path

from docsearch.ingestion.chunk_writer import build_chunks_path, load_chunks, save_chunks
from docsearch.ingestion.chunker import DEFAULT_PATTERN, DocumentChunker
from docsearch.models.segmentation import SegmentationConfig
from docsearch.vectorstore.persistence import BatchPersistenceCoordinator

logger = logging.getLogger(__name__)


def run_chunking_pipeline(
    input_dir: Path,
    output_dir: Path,
    config: SegmentationConfig | None = None,
    pattern: str = DEFAULT_PATTERN,
) -> dict:
    """Chunk every matching file under ``input_dir`` and save one chunk file.

    Returns a summary dict with counts and the output path.
    """
    if not input_dir.is_dir():
        raise NotADirectoryError(f"not a directory: {input_dir}")

    chunker = DocumentChunker(config)
    report = chunker.chunk_directory(input_dir, pattern=pattern)

    target = build_chunks_path(input_dir, output_dir, chunker.config)
    save_chunks(report.chunks, target)

    return {
        "files_processed": report.files_processed,
        "files_failed": report.files_failed,
        "chunks": len(report.chunks),
        "output_file": target,
    }


def run_load_pipeline(
    chunks_file: Path,
    collection: str,
    coordinator: BatchPersistenceCoordinator,
    reset: bool = False,
    start_batch: int = 0,
) -> dict:
    """Load a chunk file into ``collection``.

    With ``reset`` the collection is emptied first; combine ``start_batch``
    with a previous run's failing batch index to resume instead.
    Returns a summary dict with counts.
    """
    if reset and start_batch:
        raise ValueError("reset and start_batch cannot be combined")

    chunks = load_chunks(chunks_file)
    logger.info("Loading %d chunks from %s into %s", len(chunks), chunks_file, collection)

    if reset:
        coordinator.reset(collection)

    report = coordinator.persist_chunks(collection, chunks, start_batch=start_batch)
    return {
        "collection": collection,
        "chunks_read": len(chunks),
        "chunks_stored": report.items,
        "batches": report.batches,
        "first_id": report.first_id,
        "last_id": report.last_id,
    }
