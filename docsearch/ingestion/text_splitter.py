"""Recursive character text splitter with separator-priority fallback.

Text is cut on the highest-priority separator that occurs in it (blank
lines first, then lines, sentences, clauses, words) and only falls back to
raw character windows when nothing coarser keeps every chunk within
``max_size``. Consecutive chunks share ``overlap`` trailing/leading
characters. All sizes are code-point counts, so a multi-byte character is
never cut in half.
"""

import logging

from docsearch.models.segmentation import SegmentationConfig

logger = logging.getLogger(__name__)


class TextSegmenter:
    """Splits text into ordered, overlapping chunks of at most ``max_size`` characters."""

    def __init__(self, config: SegmentationConfig | None = None):
        self._config = config or SegmentationConfig()

    @property
    def config(self) -> SegmentationConfig:
        return self._config

    def split(self, text: str) -> list[str]:
        """Split text into chunks.

        Returns an empty list for empty input and ``[text]`` when the text
        already fits. Whitespace-only chunks are left to the caller.
        """
        if not text:
            return []
        return self._split(text, self._config.separators)

    def _split(self, text: str, separators: tuple[str, ...]) -> list[str]:
        max_size = self._config.max_size
        if len(text) <= max_size:
            return [text]

        # A tier either succeeds or hands the whole text to the next tier;
        # oversized chunks only recurse into lower tiers. Depth is therefore
        # bounded by len(separators).
        for tier, separator in enumerate(separators):
            if separator == "":
                return self._split_characters(text)

            pieces = text.split(separator)
            if len(pieces) <= 1:
                continue

            chunks = self._pack(pieces, separator)
            if chunks and self._within_bound(chunks):
                return chunks

            lower = separators[tier + 1:]
            resplit: list[str] = []
            for chunk in chunks:
                if len(chunk) <= max_size:
                    resplit.append(chunk)
                else:
                    resplit.extend(self._split(chunk, lower))

            if resplit and self._within_bound(resplit):
                return resplit
            logger.debug("Separator %r left oversized chunks, retrying with next tier", separator)

        return [text]

    def _pack(self, pieces: list[str], separator: str) -> list[str]:
        """Greedily pack split pieces into chunks, seeding each new chunk with overlap.

        Pieces split on a paragraph separator each start a new chunk.
        """
        config = self._config
        paragraph = separator in config.paragraph_separators
        chunks: list[str] = []
        current = ""

        for i, piece in enumerate(pieces):
            if i > 0 and config.keep_separator:
                piece = separator + piece
            if not piece:
                continue

            if current and (paragraph or len(current) + len(piece) > config.max_size):
                chunks.append(current)
                current = self._overlap_tail(current)
            current += piece

        if current:
            chunks.append(current)
        return chunks

    def _split_characters(self, text: str) -> list[str]:
        """Cut text into fixed character windows as a last resort."""
        max_size = self._config.max_size
        overlap = self._config.overlap
        step = max_size - overlap
        # Window i starts with the last `overlap` characters of window i - 1.
        # A window is only emitted when it adds at least one new character.
        return [text[start:start + max_size] for start in range(0, len(text) - overlap, step)]

    def _overlap_tail(self, chunk: str) -> str:
        overlap = self._config.overlap
        if overlap <= 0:
            return ""
        return chunk[-overlap:]

    def _within_bound(self, chunks: list[str]) -> bool:
        return all(len(chunk) <= self._config.max_size for chunk in chunks)


def split_text(text: str, config: SegmentationConfig | None = None) -> list[str]:
    """Split text with a one-off segmenter."""
    return TextSegmenter(config).split(text)
