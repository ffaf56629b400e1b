"""Segmentation configuration model."""

from dataclasses import dataclass

from docsearch.errors import SegmentationConfigError

# Highest priority first; "" is the character-level fallback.
DEFAULT_SEPARATORS = ("\n\n\n", "\n\n", "\n", ". ", "! ", "? ", ", ", " ", "")

# Tiers whose pieces are kept apart rather than packed together.
DEFAULT_PARAGRAPH_SEPARATORS = ("\n\n\n", "\n\n")

DEFAULT_MAX_SIZE = 400
DEFAULT_OVERLAP = 20


@dataclass(frozen=True)
class SegmentationConfig:
    """Immutable splitter settings. Sizes are measured in characters.

    Pieces cut on a ``paragraph_separators`` tier always start a new chunk,
    so a short paragraph such as a lone ``"# Routing"`` heading becomes its
    own chunk instead of being packed with the text after it. Pass
    ``paragraph_separators=()`` to pack every tier greedily up to
    ``max_size``.
    """

    max_size: int = DEFAULT_MAX_SIZE
    overlap: int = DEFAULT_OVERLAP
    separators: tuple[str, ...] = DEFAULT_SEPARATORS
    keep_separator: bool = True
    paragraph_separators: tuple[str, ...] = DEFAULT_PARAGRAPH_SEPARATORS

    def __post_init__(self):
        if self.max_size <= 0:
            raise SegmentationConfigError(f"max_size must be > 0, got {self.max_size}")
        if self.overlap < 0:
            raise SegmentationConfigError(f"overlap must be >= 0, got {self.overlap}")
        if self.overlap >= self.max_size:
            raise SegmentationConfigError(
                f"overlap ({self.overlap}) must be smaller than max_size ({self.max_size})"
            )
        # Lists are accepted for convenience but stored as tuples.
        object.__setattr__(self, "separators", tuple(self.separators))
        object.__setattr__(self, "paragraph_separators", tuple(self.paragraph_separators))
