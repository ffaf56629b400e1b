"""Save and load chunk files (one JSON object per line)."""

import json
import logging
from pathlib import Path

from docsearch.models.chunk import TextChunk
from docsearch.models.segmentation import SegmentationConfig

logger = logging.getLogger(__name__)


def build_chunks_path(input_dir: Path, base_dir: Path, config: SegmentationConfig) -> Path:
    """Compute the chunk file path for a document directory without writing.

    Returns a path like: base_dir/laravel-docs_chunks_SZ_400_O_20.jsonl
    """
    domain = input_dir.resolve().name.replace(".", "-")
    return base_dir / f"{domain}_chunks_SZ_{config.max_size}_O_{config.overlap}.jsonl"


def save_chunks(chunks: list[TextChunk], target: Path) -> Path:
    """Write chunks to ``target``, replacing any existing file.

    Returns the Path to the written file. Write failures propagate.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8", newline="\n") as f:
        for chunk in chunks:
            f.write(json.dumps(chunk.to_dict(), ensure_ascii=False))
            f.write("\n")
    logger.info("Saved %d chunks to %s", len(chunks), target)
    return target


def load_chunks(path: Path) -> list[TextChunk]:
    """Read a chunk file written by :func:`save_chunks`.

    Blank lines are ignored. A malformed line raises ``ValueError`` naming
    the line number.
    """
    chunks = []
    with path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                chunks.append(TextChunk.from_dict(json.loads(line)))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"{path}:{line_no}: invalid chunk record: {e}") from e
    logger.debug("Loaded %d chunks from %s", len(chunks), path)
    return chunks
