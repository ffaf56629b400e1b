"""Unit tests for chunk identity assignment and directory chunking."""

import hashlib
from pathlib import Path
from unittest.mock import patch

import pytest

from docsearch.errors import IdentityCollision
from docsearch.ingestion.chunker import (
    DocumentChunker,
    assign_identities,
    normalize_source,
    source_digest,
)
from docsearch.models.chunk import TextChunk
from docsearch.models.segmentation import SegmentationConfig


@pytest.fixture
def docs_dir(tmp_path):
    """A small documentation tree with nested files and a non-markdown file."""
    root = tmp_path / "laravel.docs"
    (root / "guide").mkdir(parents=True)
    (root / "routing.md").write_text(
        "# Routing\n\nRoutes are defined in routes/web.php.\n\n"
        "Route parameters are always encased within {} braces.",
        encoding="utf-8",
    )
    (root / "guide" / "eloquent.md").write_text(
        "# Eloquent\n\nEach database table has a corresponding Model.",
        encoding="utf-8",
    )
    (root / "notes.txt").write_text("not documentation", encoding="utf-8")
    return root


class TestSourceDigest:
    def test_digest_is_md5_of_normalized_path(self):
        expected = hashlib.md5(b"docs/routing.md").hexdigest()
        assert source_digest("docs/routing.md") == expected

    def test_digest_is_stable_across_equivalent_spellings(self):
        assert source_digest("docs/./guide/../routing.md") == source_digest("docs/routing.md")

    def test_different_paths_have_different_digests(self):
        assert source_digest("docs/a.md") != source_digest("docs/b.md")

    def test_digest_is_128_bit_hex(self):
        assert len(source_digest(Path("docs/a.md"))) == 32

    def test_normalize_uses_forward_slashes(self):
        assert normalize_source(Path("docs") / "guide" / "a.md") == "docs/guide/a.md"


class TestAssignIdentities:
    def test_ids_are_digest_and_index(self):
        chunks = assign_identities("docs/a.md", ["one", "two"])
        prefix = source_digest("docs/a.md")
        assert [c.id for c in chunks] == [f"{prefix}-0", f"{prefix}-1"]
        assert all(c.source == "docs/a.md" for c in chunks)

    def test_blank_segments_do_not_consume_an_index(self):
        chunks = assign_identities("docs/a.md", ["one", "  \n", "two", "", "three"])
        assert [c.text for c in chunks] == ["one", "two", "three"]
        assert [c.id.rsplit("-", 1)[1] for c in chunks] == ["0", "1", "2"]

    def test_same_path_same_ids_regardless_of_content(self):
        first = assign_identities("docs/a.md", ["alpha"])
        second = assign_identities("docs/a.md", ["beta"])
        assert first[0].id == second[0].id

    def test_returns_text_chunks(self):
        chunks = assign_identities("docs/a.md", ["one"])
        assert isinstance(chunks[0], TextChunk)

    def test_no_segments(self):
        assert assign_identities("docs/a.md", []) == []


class TestDocumentChunker:
    def test_chunk_text_splits_and_identifies(self):
        chunker = DocumentChunker(SegmentationConfig(max_size=50, overlap=0))
        text = "First paragraph.\n\nSecond paragraph.\n\nThird paragraph that is longer than the others."
        chunks = chunker.chunk_text("docs/a.md", text)
        assert [c.text for c in chunks] == [
            "First paragraph.",
            "\n\nSecond paragraph.",
            "\n\nThird paragraph that is longer than the others.",
        ]
        assert chunks[2].id.endswith("-2")

    def test_chunk_file_reads_utf8(self, tmp_path):
        path = tmp_path / "unicode.md"
        path.write_text("Café, naïve résumé", encoding="utf-8")
        chunks = DocumentChunker().chunk_file(path)
        assert len(chunks) == 1
        assert chunks[0].text == "Café, naïve résumé"
        assert chunks[0].source == str(path)

    def test_chunk_directory_only_matches_pattern(self, docs_dir):
        report = DocumentChunker().chunk_directory(docs_dir)
        sources = {Path(c.source).name for c in report.chunks}
        assert sources == {"routing.md", "eloquent.md"}
        assert report.files_processed == 2
        assert report.files_failed == 0

    def test_chunk_directory_is_sorted(self, docs_dir):
        report = DocumentChunker().chunk_directory(docs_dir)
        sources = [c.source for c in report.chunks]
        assert sources == sorted(sources)

    def test_chunk_directory_custom_pattern(self, docs_dir):
        report = DocumentChunker().chunk_directory(docs_dir, pattern="*.txt")
        assert [c.text for c in report.chunks] == ["not documentation"]

    def test_unreadable_file_is_counted_and_skipped(self, docs_dir):
        (docs_dir / "broken.md").write_bytes(b"\xff\xfe\xfa invalid utf-8")
        report = DocumentChunker().chunk_directory(docs_dir)
        assert report.files_failed == 1
        assert report.files_processed == 2

    def test_empty_file_yields_no_chunks(self, tmp_path):
        path = tmp_path / "empty.md"
        path.write_text("", encoding="utf-8")
        assert DocumentChunker().chunk_file(path) == []

    def test_identity_collision_is_fatal(self):
        chunker = DocumentChunker()
        with patch("docsearch.ingestion.chunker.source_digest", return_value="0" * 32):
            chunker.chunk_text("docs/a.md", "alpha")
            with pytest.raises(IdentityCollision):
                chunker.chunk_text("docs/b.md", "beta")

    def test_rechunking_same_file_is_not_a_collision(self):
        chunker = DocumentChunker()
        chunker.chunk_text("docs/a.md", "alpha")
        assert len(chunker.chunk_text("docs/a.md", "alpha")) == 1


class TestTextChunk:
    def test_rejects_blank_text(self):
        with pytest.raises(ValueError):
            TextChunk(id="x-0", text="   ", source="a.md")

    def test_dict_round_trip(self):
        chunk = TextChunk(id="x-0", text="hello", source="a.md")
        assert TextChunk.from_dict(chunk.to_dict()) == chunk
