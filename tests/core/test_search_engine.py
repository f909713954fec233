"""
Test suite for SearchEngine over the in-memory index store.

Materials are ingested through the real pipeline with the keyword-based fake
provider, so similarity follows the topic words each text contains.

System role: Verification of semantic retrieval
"""

import uuid

import pytest
import pytest_asyncio

from course_rag.core.exceptions import ChunkNotFoundError, EmptyQueryError, ValidationError
from course_rag.core.retrieval.search_engine import SearchEngine

ALGORITHMS_TEXT = (
    "Binary search finds an item in a sorted array. "
    "Binary search halves the interval on each step."
)
BIOLOGY_TEXT = "Cells fold each protein. A protein shapes the cell membrane."


@pytest_asyncio.fixture
async def course_materials(pipeline, make_upload):
    """Ingest an algorithms and a biology material; return their results by name."""
    results = await pipeline.ingest_many(
        [
            make_upload("algorithms.txt", ALGORITHMS_TEXT),
            make_upload("biology.txt", BIOLOGY_TEXT),
        ]
    )
    assert all(r.success for r in results)
    return {r.file_name: r for r in results}


class TestSearchValidation:
    """Test suite for search parameter validation."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("top_k", [0, 101, -3])
    async def test_out_of_range_top_k_should_raise(self, search_engine, course_id, top_k):
        # Act / Assert
        with pytest.raises(ValidationError):
            await search_engine.search(course_id, "binary search", top_k=top_k)

    @pytest.mark.asyncio
    async def test_max_top_k_should_be_accepted(self, search_engine, course_id, course_materials):
        # Act
        results = await search_engine.search(course_id, "binary search", top_k=100)

        # Assert
        assert len(results) == 1

    @pytest.mark.asyncio
    async def test_out_of_range_similarity_should_raise(self, search_engine, course_id):
        # Act / Assert
        with pytest.raises(ValidationError):
            await search_engine.search(course_id, "binary search", min_similarity=1.5)

    @pytest.mark.asyncio
    async def test_blank_query_should_raise_without_embedding(
        self, search_engine, course_id, fake_provider
    ):
        # Act / Assert
        with pytest.raises(EmptyQueryError):
            await search_engine.search(course_id, "   ")
        assert fake_provider.calls == []


class TestCourseSearch:
    """Test suite for SearchEngine.search."""

    @pytest.mark.asyncio
    async def test_relevant_chunk_should_pass_floor_and_unrelated_should_not(
        self, search_engine: SearchEngine, course_id, course_materials
    ):
        # Act
        results = await search_engine.search(course_id, "binary search")

        # Assert
        assert [r.file_name for r in results] == ["algorithms.txt"]
        assert results[0].similarity > 0.9
        assert results[0].chunk_id == "chunk_0"
        assert results[0].chunk_text == ALGORITHMS_TEXT

    @pytest.mark.asyncio
    async def test_zero_floor_should_rank_by_similarity(
        self, search_engine: SearchEngine, course_id, course_materials
    ):
        # Act
        results = await search_engine.search(course_id, "binary search", min_similarity=0.0)

        # Assert
        assert [r.file_name for r in results] == ["algorithms.txt", "biology.txt"]
        assert results[0].similarity >= results[1].similarity

    @pytest.mark.asyncio
    async def test_equal_scores_should_keep_insertion_order(
        self, search_engine: SearchEngine, pipeline, make_upload, course_id
    ):
        # Arrange
        await pipeline.ingest_many(
            [
                make_upload("first.txt", "graph search"),
                make_upload("second.txt", "graph search"),
                make_upload("third.txt", "graph search"),
            ]
        )

        # Act
        results = await search_engine.search(course_id, "graph search")

        # Assert
        assert [r.file_name for r in results] == ["first.txt", "second.txt", "third.txt"]

    @pytest.mark.asyncio
    async def test_other_courses_should_not_be_searched(
        self, search_engine: SearchEngine, pipeline, make_upload, course_materials
    ):
        # Arrange
        other_course = uuid.uuid4()
        await pipeline.ingest(make_upload("other.txt", ALGORITHMS_TEXT, course_id=other_course))

        # Act
        results = await search_engine.search(other_course, "binary search")

        # Assert
        assert [r.file_name for r in results] == ["other.txt"]

    @pytest.mark.asyncio
    async def test_top_k_should_limit_results(
        self, search_engine: SearchEngine, course_id, course_materials
    ):
        # Act
        results = await search_engine.search(course_id, "binary search", top_k=1, min_similarity=0.0)

        # Assert
        assert len(results) == 1

    @pytest.mark.asyncio
    async def test_metadata_should_be_dropped_when_not_requested(
        self, search_engine: SearchEngine, course_id, course_materials
    ):
        # Act
        with_metadata = await search_engine.search(course_id, "binary search")
        without_metadata = await search_engine.search(
            course_id, "binary search", include_metadata=False
        )

        # Assert
        assert with_metadata[0].metadata["word_count"] == 17
        assert without_metadata[0].metadata is None

    @pytest.mark.asyncio
    async def test_high_precision_should_apply_stricter_floor(
        self, search_engine: SearchEngine, pipeline, make_upload, course_id
    ):
        # Arrange
        await pipeline.ingest_many(
            [
                make_upload("exact.txt", "binary search"),
                make_upload("partial.txt", "binary tree sort"),
            ]
        )

        # Act
        relaxed = await search_engine.search(course_id, "binary search", min_similarity=0.3)
        strict = await search_engine.high_precision_search(course_id, "binary search")

        # Assert
        assert [r.file_name for r in relaxed] == ["exact.txt", "partial.txt"]
        assert [r.file_name for r in strict] == ["exact.txt"]


class TestMaterialSearch:
    """Test suite for SearchEngine.search_materials."""

    @pytest.mark.asyncio
    async def test_empty_material_list_should_not_embed(self, search_engine, fake_provider):
        # Act
        results = await search_engine.search_materials([], "binary search")

        # Assert
        assert results == []
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_empty_material_list_should_still_validate_top_k(self, search_engine):
        # Act / Assert
        with pytest.raises(ValidationError):
            await search_engine.search_materials([], "binary search", top_k=0)

    @pytest.mark.asyncio
    async def test_only_listed_materials_should_be_searched(
        self, search_engine: SearchEngine, course_materials
    ):
        # Arrange
        biology_id = course_materials["biology.txt"].material_id

        # Act
        results = await search_engine.search_materials(
            [biology_id], "binary search", min_similarity=0.0
        )

        # Assert
        assert [r.material_id for r in results] == [biology_id]


class TestFindSimilarChunks:
    """Test suite for SearchEngine.find_similar_chunks."""

    @pytest.mark.asyncio
    async def test_source_chunk_should_be_excluded(
        self, search_engine: SearchEngine, pipeline, make_upload, course_id, course_materials
    ):
        # Arrange
        await pipeline.ingest(make_upload("review.txt", "Binary search review"))
        source = course_materials["algorithms.txt"].material_id

        # Act
        results = await search_engine.find_similar_chunks(course_id, source, "chunk_0")

        # Assert
        names = [r.file_name for r in results]
        assert names[0] == "review.txt"
        assert "algorithms.txt" not in names
        assert all(r.chunk_id == "chunk_0" for r in results)

    @pytest.mark.asyncio
    async def test_missing_chunk_should_raise(
        self, search_engine: SearchEngine, course_id, course_materials
    ):
        # Arrange
        source = course_materials["algorithms.txt"].material_id

        # Act / Assert
        with pytest.raises(ChunkNotFoundError):
            await search_engine.find_similar_chunks(course_id, source, "chunk_99")

    @pytest.mark.asyncio
    async def test_find_similar_should_not_embed(
        self, search_engine: SearchEngine, fake_provider, course_id, course_materials
    ):
        # Arrange
        source = course_materials["biology.txt"].material_id
        calls_before = len(fake_provider.calls)

        # Act
        await search_engine.find_similar_chunks(course_id, source, "chunk_0", limit=5)

        # Assert
        assert len(fake_provider.calls) == calls_before
