"""Turn source files into identified text chunks.

Chunk ids are ``<path-digest>-<index>``: the digest is the MD5 of the
normalized file path (stable across runs, independent of content) and the
index counts only the chunks that survive whitespace filtering.
"""

import hashlib
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from docsearch.errors import IdentityCollision
from docsearch.ingestion.text_splitter import TextSegmenter
from docsearch.models.chunk import TextChunk
from docsearch.models.segmentation import SegmentationConfig

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "*.md"


def normalize_source(path: str | Path) -> str:
    """Collapse ``.``/``..`` segments and use forward slashes."""
    return Path(os.path.normpath(str(path))).as_posix()


def source_digest(path: str | Path) -> str:
    """128-bit hex digest identifying a source file by its path."""
    return hashlib.md5(normalize_source(path).encode("utf-8")).hexdigest()


def assign_identities(source: str | Path, segments: list[str]) -> list[TextChunk]:
    """Attach ``<digest>-<index>`` identities to the non-blank segments of one file.

    Blank segments are dropped first, so indices stay contiguous over the
    chunks that are kept.
    """
    prefix = source_digest(source)
    source_str = str(source)
    kept = [segment for segment in segments if segment.strip()]
    return [
        TextChunk(id=f"{prefix}-{index}", text=segment, source=source_str)
        for index, segment in enumerate(kept)
    ]


@dataclass
class ChunkingReport:
    """Result of chunking a directory."""

    chunks: list[TextChunk] = field(default_factory=list)
    files_processed: int = 0
    files_failed: int = 0


class DocumentChunker:
    """Segments plain-text files and assigns chunk identities."""

    def __init__(self, config: SegmentationConfig | None = None):
        self._segmenter = TextSegmenter(config)
        self._prefixes: dict[str, str] = {}

    @property
    def config(self) -> SegmentationConfig:
        return self._segmenter.config

    def chunk_text(self, source: str | Path, text: str) -> list[TextChunk]:
        """Chunk already-loaded text attributed to ``source``."""
        self._register(source)
        return assign_identities(source, self._segmenter.split(text))

    def chunk_file(self, path: Path) -> list[TextChunk]:
        """Read a UTF-8 file and chunk its content."""
        content = path.read_text(encoding="utf-8")
        chunks = self.chunk_text(path, content)
        logger.info("Processed %s: %d chunks", path, len(chunks))
        return chunks

    def chunk_directory(self, input_dir: Path, pattern: str = DEFAULT_PATTERN) -> ChunkingReport:
        """Chunk every file under ``input_dir`` matching ``pattern``, in sorted order.

        Unreadable files are logged and counted, not fatal.
        """
        report = ChunkingReport()
        for path in sorted(input_dir.rglob(pattern)):
            if not path.is_file():
                continue
            try:
                chunks = self.chunk_file(path)
            except (OSError, UnicodeDecodeError) as e:
                logger.error("Error processing %s: %s", path, e)
                report.files_failed += 1
                continue
            report.chunks.extend(chunks)
            report.files_processed += 1

        logger.info(
            "Processed %d files with a total of %d chunks",
            report.files_processed,
            len(report.chunks),
        )
        return report

    def _register(self, source: str | Path) -> None:
        normalized = normalize_source(source)
        prefix = source_digest(source)
        existing = self._prefixes.setdefault(prefix, normalized)
        if existing != normalized:
            raise IdentityCollision(prefix, existing, normalized)
