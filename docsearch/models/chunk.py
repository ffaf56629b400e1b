"""Text Chunk data model."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class TextChunk:
    """A bounded segment of a source document, the unit of embedding and retrieval."""

    id: str
    text: str
    source: str

    def __post_init__(self):
        if not self.id:
            raise ValueError("id must not be empty")
        if not self.text.strip():
            raise ValueError("text must not be empty")

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "TextChunk":
        return cls(id=data["id"], text=data["text"], source=data.get("source", ""))
