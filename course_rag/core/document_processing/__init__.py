"""
Material ingestion pipeline.

Extraction, chunking, indexing and the IngestionPipeline orchestrator.

Dependencies: pypdf, python-docx, python-pptx, openpyxl, xlrd, olefile,
langchain_google_genai, pydantic
System role: Ingestion entrypoint
"""

from .chunker import Chunker
from .entrypoint import IngestionPipeline
from .extraction import Extractor
from .index_writer import IndexWriter
from .models import (
    Chunk,
    ExtractedDocument,
    ExtractionMethod,
    IngestionResult,
    IngestionStage,
    MaterialUpload,
    PageSpan,
)

__all__ = [
    "Chunk",
    "Chunker",
    "ExtractedDocument",
    "ExtractionMethod",
    "Extractor",
    "IndexWriter",
    "IngestionPipeline",
    "IngestionResult",
    "IngestionStage",
    "MaterialUpload",
    "PageSpan",
]
