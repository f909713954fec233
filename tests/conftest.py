"""
Shared test fixtures and configuration for entire test suite.

Provides: Deterministic embedding provider, settings, in-memory index store,
embedding client, search engine and ingestion pipeline fixtures
Dependencies: pytest, pytest-asyncio
System role: Test infrastructure and fixture management
"""

import re
import uuid

import pytest

from course_rag.boundary.vdb.memory_store import InMemoryIndexStore
from course_rag.configs.chunking import ChunkingSettings
from course_rag.configs.embedding import EmbeddingSettings
from course_rag.configs.search import SearchSettings
from course_rag.core.document_processing.chunker import Chunker
from course_rag.core.document_processing.entrypoint import IngestionPipeline
from course_rag.core.document_processing.extraction import Extractor
from course_rag.core.document_processing.extraction.text import TextHandler
from course_rag.core.document_processing.models import MaterialUpload
from course_rag.core.embeddings.client import EmbeddingClient
from course_rag.core.resilience import RetryPolicy
from course_rag.core.retrieval.search_engine import SearchEngine

TEST_DIMENSION = 8

# One axis per topic word; every vector also carries a small shared baseline
# so texts without topic words never have a zero norm.
TOPIC_WORDS = ("binary", "search", "tree", "sort", "graph", "cell", "protein", "history")
BASELINE = 0.01

TOKEN_RE = re.compile(r"[a-z]+")


def keyword_vector(text: str) -> list[float]:
    """Bag-of-topic-words vector used by the fake provider."""
    tokens = TOKEN_RE.findall(text.lower())
    return [float(tokens.count(word)) + BASELINE for word in TOPIC_WORDS]


class FakeEmbeddingProvider:
    """Deterministic provider recording every text it was asked to embed."""

    def __init__(self, dimension: int = TEST_DIMENSION) -> None:
        self.dimension = dimension
        self.calls: list[str] = []
        self.failures: list[BaseException] = []

    def fail_next(self, *errors: BaseException) -> None:
        """Queue errors raised by the next calls, one per call."""
        self.failures.extend(errors)

    async def embed_content(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.failures:
            raise self.failures.pop(0)
        vector = keyword_vector(text)
        if self.dimension > len(vector):
            vector += [0.0] * (self.dimension - len(vector))
        return vector[: self.dimension]


class RecordingSleep:
    """Awaitable sleep replacement remembering requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def course_id() -> uuid.UUID:
    """Provide sample course UUID for testing."""
    return uuid.uuid4()


@pytest.fixture
def embedding_settings() -> EmbeddingSettings:
    """Provide small-dimension embedding settings without batch pacing."""
    return EmbeddingSettings(
        google_api_key="test-key",
        dimension=TEST_DIMENSION,
        batch_size=5,
        batch_delay_ms=0,
        cache_max_size=100,
    )


@pytest.fixture
def search_settings() -> SearchSettings:
    """Provide default search settings."""
    return SearchSettings()


@pytest.fixture
def fake_provider() -> FakeEmbeddingProvider:
    """Provide deterministic embedding provider."""
    return FakeEmbeddingProvider()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Provide sleep replacement that returns immediately."""
    return RecordingSleep()


@pytest.fixture
def retry_policy() -> RetryPolicy:
    """Provide retry policy with short delays."""
    return RetryPolicy(max_retries=3, initial_delay=0.01, max_delay=0.05)


@pytest.fixture
def embedding_client(
    fake_provider: FakeEmbeddingProvider,
    embedding_settings: EmbeddingSettings,
    retry_policy: RetryPolicy,
    recording_sleep: RecordingSleep,
) -> EmbeddingClient:
    """Provide EmbeddingClient over the fake provider."""
    return EmbeddingClient(
        provider=fake_provider,
        settings=embedding_settings,
        retry_policy=retry_policy,
        sleep=recording_sleep,
    )


@pytest.fixture
def memory_store() -> InMemoryIndexStore:
    """Provide empty in-memory index store."""
    return InMemoryIndexStore()


@pytest.fixture
def small_chunker() -> Chunker:
    """Provide chunker with small windows for short test documents."""
    return Chunker.from_settings(
        ChunkingSettings(target_words=20, overlap_words=5, max_chunk_words=40, min_chunk_words=3)
    )


@pytest.fixture
def text_extractor() -> Extractor:
    """Provide extractor limited to the text handler."""
    return Extractor(handlers=[TextHandler()])


@pytest.fixture
def pipeline(
    memory_store: InMemoryIndexStore,
    embedding_client: EmbeddingClient,
    text_extractor: Extractor,
    small_chunker: Chunker,
) -> IngestionPipeline:
    """Provide ingestion pipeline over the in-memory store."""
    return IngestionPipeline(
        store=memory_store,
        embedding_client=embedding_client,
        extractor=text_extractor,
        chunker=small_chunker,
    )


@pytest.fixture
def search_engine(
    memory_store: InMemoryIndexStore,
    embedding_client: EmbeddingClient,
    search_settings: SearchSettings,
) -> SearchEngine:
    """Provide search engine over the in-memory store."""
    return SearchEngine(memory_store, embedding_client, search_settings)


@pytest.fixture
def make_upload(course_id: uuid.UUID):
    """Provide factory building text/plain uploads for the sample course."""

    def _make(file_name: str, text: str, **kwargs) -> MaterialUpload:
        kwargs.setdefault("course_id", course_id)
        kwargs.setdefault("mime_type", "text/plain")
        return MaterialUpload(file_name=file_name, data=text.encode("utf-8"), **kwargs)

    return _make
