"""
Test suite for the paragraph-aware word chunker.

Tests chunk boundaries, overlap between consecutive chunks, verbatim slicing,
page tagging and parameter validation.

System role: Verification of the chunking stage
"""

import pytest

from course_rag.core.document_processing.chunker import Chunker, page_for_offset
from course_rag.core.document_processing.extraction.base import document_from_pages
from course_rag.core.document_processing.models import ExtractionMethod, PageSpan
from course_rag.core.exceptions import ValidationError


def numbered_words(start: int, count: int) -> str:
    return " ".join(f"w{i}" for i in range(start, start + count))


@pytest.fixture
def chunker() -> Chunker:
    """Provide chunker with default parameters."""
    return Chunker()


@pytest.fixture(params=["\n\n", "\n"], ids=["paragraphs", "lines"])
def three_paragraphs(request) -> str:
    """Provide 900 words laid out as three 300-word paragraphs or lines."""
    return request.param.join(numbered_words(i * 300, 300) for i in range(3))


class TestChunkerValidation:
    """Test suite for Chunker parameter validation."""

    def test_overlap_not_below_target_should_raise(self):
        # Act / Assert
        with pytest.raises(ValidationError):
            Chunker(target_words=100, overlap_words=100)

    def test_max_below_target_should_raise(self):
        # Act / Assert
        with pytest.raises(ValidationError):
            Chunker(target_words=300, overlap_words=50, max_chunk_words=200)

    def test_zero_overlap_should_be_accepted(self):
        # Act
        chunker = Chunker(target_words=10, overlap_words=0, max_chunk_words=10)

        # Assert
        assert chunker.unit_limit == 10


class TestChunkerBoundaries:
    """Test suite for Chunker.chunk boundaries and overlap."""

    def test_blank_text_should_return_no_chunks(self, chunker: Chunker):
        # Act / Assert
        assert chunker.chunk("   \n\n\t ") == []

    def test_short_text_should_return_single_chunk(self, chunker: Chunker):
        # Arrange
        text = "  Binary search halves the interval.  "

        # Act
        chunks = chunker.chunk(text)

        # Assert
        assert len(chunks) == 1
        assert chunks[0].chunk_id == "chunk_0"
        assert chunks[0].text == "Binary search halves the interval."
        assert chunks[0].word_count == 5
        assert chunks[0].page_number is None

    def test_three_paragraphs_should_give_three_overlapping_chunks(
        self, chunker: Chunker, three_paragraphs: str
    ):
        # Act
        chunks = chunker.chunk(three_paragraphs)

        # Assert
        assert [c.chunk_id for c in chunks] == ["chunk_0", "chunk_1", "chunk_2"]
        assert [c.word_count for c in chunks] == [300, 450, 450]
        for previous, current in zip(chunks, chunks[1:]):
            assert previous.text.split()[-150:] == current.text.split()[:150]

    def test_chunks_should_be_verbatim_slices(self, chunker: Chunker, three_paragraphs: str):
        # Act
        chunks = chunker.chunk(three_paragraphs)

        # Assert
        for chunk in chunks:
            assert three_paragraphs[chunk.start_char:chunk.end_char] == chunk.text

    def test_chunk_indexes_should_be_consecutive(self, chunker: Chunker, three_paragraphs: str):
        # Act
        chunks = chunker.chunk(three_paragraphs)

        # Assert
        assert [c.chunk_index for c in chunks] == list(range(len(chunks)))

    def test_unbroken_text_should_stay_within_max_chunk_words(self, chunker: Chunker):
        # Arrange
        text = numbered_words(0, 1000)

        # Act
        chunks = chunker.chunk(text)

        # Assert
        assert len(chunks) > 1
        assert all(c.word_count <= chunker.max_chunk_words for c in chunks)
        assert chunks[-1].text.endswith("w999")

    def test_short_lines_should_be_packed_up_to_target(self, chunker: Chunker):
        # Arrange
        text = "\n".join(numbered_words(i * 10, 10) for i in range(90))

        # Act
        chunks = chunker.chunk(text)

        # Assert
        assert [c.word_count for c in chunks] == [300, 450, 450]
        for previous, current in zip(chunks, chunks[1:]):
            assert previous.text.split()[-150:] == current.text.split()[:150]

    def test_oversized_paragraph_should_split_at_sentence_ends(self):
        # Arrange
        chunker = Chunker(target_words=20, overlap_words=0, max_chunk_words=25, min_chunk_words=3)
        sentences = [f"{numbered_words(i * 10, 9)} end{i}." for i in range(6)]
        text = " ".join(sentences)

        # Act
        chunks = chunker.chunk(text)

        # Assert
        assert len(chunks) == 3
        assert all(c.word_count == 20 for c in chunks)
        assert all(c.text.endswith(".") for c in chunks)

    def test_zero_overlap_should_not_repeat_words(self):
        # Arrange
        chunker = Chunker(target_words=10, overlap_words=0, max_chunk_words=10, min_chunk_words=1)
        text = "\n\n".join(numbered_words(i * 10, 10) for i in range(3))

        # Act
        chunks = chunker.chunk(text)

        # Assert
        words = [w for c in chunks for w in c.text.split()]
        assert words == text.split()


class TestChunkerPages:
    """Test suite for page tagging of chunks."""

    def test_chunks_should_carry_page_they_start_on(self):
        # Arrange
        chunker = Chunker(target_words=20, overlap_words=0, max_chunk_words=40, min_chunk_words=3)
        document = document_from_pages(
            [(1, numbered_words(0, 30)), (2, numbered_words(30, 30))],
            ExtractionMethod.PDF,
        )

        # Act
        chunks = chunker.chunk_document(document)

        # Assert
        assert [c.page_number for c in chunks] == [1, 2]

    def test_page_for_offset_should_fall_back_to_previous_page(self):
        # Arrange
        spans = [
            PageSpan(page_number=1, start_char=0, end_char=10),
            PageSpan(page_number=3, start_char=12, end_char=20),
        ]

        # Act / Assert
        assert page_for_offset(spans, 5) == 1
        assert page_for_offset(spans, 11) == 1
        assert page_for_offset(spans, 15) == 3
        assert page_for_offset(None, 3) is None
