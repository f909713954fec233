"""
Paragraph-aware word chunker.

Splits extracted text into overlapping chunks measured in words. Chunks are
built from whole paragraphs where possible; oversized paragraphs are cut at
line breaks, then sentence ends, and only as a last resort between words.
Every chunk is a verbatim slice of the source text.

Dependencies: course_rag.configs.chunking
System role: Second stage of material ingestion
"""

import logging
import re
from collections.abc import Sequence

from course_rag.configs.chunking import ChunkingSettings
from course_rag.core.document_processing.models import Chunk, ExtractedDocument, PageSpan
from course_rag.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

WORD_RE = re.compile(r"\S+")
PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")
LINE_BREAK_RE = re.compile(r"\n")
SENTENCE_END_RE = re.compile(r"[.!?]\s+")

Span = tuple[int, int]


class Chunker:
    """Word-based chunker with configurable target, overlap and bounds."""

    def __init__(
        self,
        target_words: int = 300,
        overlap_words: int = 150,
        max_chunk_words: int = 500,
        min_chunk_words: int = 50,
    ) -> None:
        """
        Initialize chunker.

        Args:
            target_words: Words at which a chunk is closed
            overlap_words: Words of the previous chunk repeated at the start of the next
            max_chunk_words: Bound on a chunk before overlap is added
            min_chunk_words: Smallest trailing piece kept apart when splitting a paragraph

        Raises:
            ValidationError: Parameters are inconsistent
        """
        if target_words < 1:
            raise ValidationError("target_words must be positive", field="target_words")
        if not 0 <= overlap_words < target_words:
            raise ValidationError(
                "overlap_words must be >= 0 and less than target_words",
                field="overlap_words",
            )
        if max_chunk_words < target_words:
            raise ValidationError(
                "max_chunk_words must be at least target_words",
                field="max_chunk_words",
            )
        if min_chunk_words < 1:
            raise ValidationError("min_chunk_words must be >= 1", field="min_chunk_words")

        self.target_words = target_words
        self.overlap_words = overlap_words
        self.max_chunk_words = max_chunk_words
        self.min_chunk_words = min_chunk_words
        # A unit plus a full overlap seed must still fit under max_chunk_words
        self.unit_limit = max(1, max_chunk_words - overlap_words)
        # Small units are packed back together only up to the target size
        self.pack_limit = min(target_words, self.unit_limit)

    @classmethod
    def from_settings(cls, settings: ChunkingSettings) -> "Chunker":
        return cls(
            target_words=settings.target_words,
            overlap_words=settings.overlap_words,
            max_chunk_words=settings.max_chunk_words,
            min_chunk_words=settings.min_chunk_words,
        )

    def chunk_document(self, document: ExtractedDocument) -> list[Chunk]:
        return self.chunk(document.text, document.page_spans)

    def chunk(self, text: str, page_spans: Sequence[PageSpan] | None = None) -> list[Chunk]:
        """
        Split text into chunks.

        Args:
            text: Extracted text
            page_spans: Page boundaries used to tag each chunk with a page

        Returns:
            list[Chunk]: Ordered chunks; empty for blank text
        """
        words = [m.span() for m in WORD_RE.finditer(text)]
        if not words:
            return []

        if len(words) <= self.target_words:
            groups = [words]
        else:
            groups = self._accumulate(self._units(text))

        chunks = [
            self._make_chunk(text, index, group, page_spans)
            for index, group in enumerate(groups)
        ]
        logger.debug(
            f"{__name__}:chunk - Produced {len(chunks)} chunks",
            extra={"word_count": len(words), "chunk_count": len(chunks)},
        )
        return chunks

    def _units(self, text: str) -> list[list[Span]]:
        units: list[list[Span]] = []
        start = 0
        boundaries = [m.span() for m in PARAGRAPH_BREAK_RE.finditer(text)]
        boundaries.append((len(text), len(text)))
        for sep_start, sep_end in boundaries:
            paragraph = [m.span() for m in WORD_RE.finditer(text, start, sep_start)]
            if paragraph:
                units.extend(self._split_paragraph(text, paragraph))
            start = sep_end
        return units

    def _split_paragraph(self, text: str, words: list[Span]) -> list[list[Span]]:
        limit = self.unit_limit
        if len(words) <= limit:
            return [words]

        pieces = [words]
        for pattern in (LINE_BREAK_RE, SENTENCE_END_RE):
            pieces = [
                group
                for piece in pieces
                for group in (_group_by_separator(text, piece, pattern) if len(piece) > limit else [piece])
            ]
        pieces = [
            piece[i:i + limit]
            for piece in pieces
            for i in range(0, len(piece), limit)
        ]
        return self._pack(pieces)

    def _pack(self, pieces: list[list[Span]]) -> list[list[Span]]:
        packed: list[list[Span]] = []
        for piece in pieces:
            if packed and len(packed[-1]) + len(piece) <= self.pack_limit:
                packed[-1] = packed[-1] + piece
            else:
                packed.append(list(piece))

        if (
            len(packed) > 1
            and len(packed[-1]) < self.min_chunk_words
            and len(packed[-2]) + len(packed[-1]) <= self.unit_limit
        ):
            tail = packed.pop()
            packed[-1] = packed[-1] + tail
        return packed

    def _accumulate(self, units: list[list[Span]]) -> list[list[Span]]:
        groups: list[list[Span]] = []
        buffer: list[Span] = []
        for unit in units:
            if buffer and len(buffer) + len(unit) > self.target_words:
                groups.append(buffer)
                seed = buffer[-self.overlap_words:] if self.overlap_words else []
                buffer = seed + unit
            else:
                buffer = buffer + unit
        if buffer:
            groups.append(buffer)
        return groups

    @staticmethod
    def _make_chunk(
        text: str,
        index: int,
        words: list[Span],
        page_spans: Sequence[PageSpan] | None,
    ) -> Chunk:
        start, end = words[0][0], words[-1][1]
        return Chunk(
            chunk_id=f"chunk_{index}",
            chunk_index=index,
            text=text[start:end],
            start_char=start,
            end_char=end,
            page_number=page_for_offset(page_spans, start),
            word_count=len(words),
        )


def _group_by_separator(text: str, words: list[Span], pattern: re.Pattern) -> list[list[Span]]:
    """Group consecutive words, starting a new group after each separator match."""
    cuts = [m.end() for m in pattern.finditer(text, words[0][0], words[-1][1])]
    groups: list[list[Span]] = []
    current: list[Span] = []
    cut_index = 0
    for word in words:
        while cut_index < len(cuts) and cuts[cut_index] <= word[0]:
            if current:
                groups.append(current)
                current = []
            cut_index += 1
        current.append(word)
    if current:
        groups.append(current)
    return groups


def page_for_offset(page_spans: Sequence[PageSpan] | None, offset: int) -> int | None:
    """Page whose span contains ``offset``; falls back to the last page starting before it."""
    if not page_spans:
        return None
    candidate = None
    for span in page_spans:
        if span.start_char <= offset < span.end_char:
            return span.page_number
        if span.start_char <= offset:
            candidate = span.page_number
    return candidate
