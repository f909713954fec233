"""
Citation extraction and context formatting.

Turns search results into citations and into the numbered source blocks the
answer generator is prompted with.

Dependencies: course_rag.models, course_rag.boundary.vdb
System role: Citation formatting business logic
"""

from collections.abc import Sequence

from course_rag.boundary.vdb.vector_schemas import SearchResult
from course_rag.models.citation import Citation

CITATION_INSTRUCTION = (
    "Cite these sources in your response using the format "
    "[Source: {file_name}, Page {page_number}]."
)


class CitationBuilder:
    """Builds citations and prompt context from ranked search results."""

    def build_citations(self, results: Sequence[SearchResult]) -> list[Citation]:
        """
        One citation per result, in result order.

        Args:
            results: Ranked search results

        Returns:
            list[Citation]: Citations carrying file name, page and chunk id
        """
        return [self.format_citation(result) for result in results]

    def format_citation(self, result: SearchResult) -> Citation:
        return Citation(
            material_id=result.material_id,
            file_name=result.file_name,
            page=result.page_number,
            chunk_id=result.chunk_id,
            similarity=result.similarity,
            source_uri=result.file_path,
        )

    @staticmethod
    def source_header(index: int, result: SearchResult) -> str:
        header = f"[Source {index}: {result.file_name}"
        if result.page_number is not None:
            header += f", page {result.page_number}"
        return header + f"] (relevance {result.similarity * 100:.1f}%)"

    def build_context(
        self,
        results: Sequence[SearchResult],
        max_chars: int | None = None,
        include_instruction: bool = True,
    ) -> str:
        """
        Render numbered source blocks for the answer generator.

        Blocks are added in ranking order until ``max_chars`` would be
        exceeded. The first block is truncated rather than dropped so some
        context always survives.

        Args:
            results: Ranked search results
            max_chars: Budget for the source blocks (no limit if None)
            include_instruction: Append the citation format instruction

        Returns:
            str: Context text, empty when there are no results
        """
        blocks: list[str] = []
        used = 0
        for index, result in enumerate(results, start=1):
            block = f"{self.source_header(index, result)}\n{result.chunk_text}"
            separator = 2 if blocks else 0
            if max_chars is not None and used + separator + len(block) > max_chars:
                if not blocks:
                    blocks.append(block[:max_chars])
                break
            blocks.append(block)
            used += separator + len(block)

        if not blocks:
            return ""
        context = "\n\n".join(blocks)
        if include_instruction:
            context += "\n\n" + CITATION_INSTRUCTION
        return context
