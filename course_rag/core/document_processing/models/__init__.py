"""
Models for the ingestion pipeline.

Exports: Chunk, ExtractedDocument, ExtractionMethod, PageSpan, MaterialUpload,
IngestionResult, IngestionStage
"""

from .chunk import Chunk
from .extracted_document import ExtractedDocument, ExtractionMethod, PageSpan
from .ingestion_result import IngestionResult, IngestionStage
from .material_upload import MaterialUpload

__all__ = [
    "Chunk",
    "ExtractedDocument",
    "ExtractionMethod",
    "PageSpan",
    "IngestionResult",
    "IngestionStage",
    "MaterialUpload",
]
