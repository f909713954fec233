"""
In-process index store.

Keeps everything in dictionaries and ranks with numpy cosine similarity.
Same filtering and ordering rules as the pgvector store; used for local
development and tests.

Dependencies: numpy
System role: Development index store
"""

import asyncio
import itertools
import logging
import uuid
from dataclasses import dataclass

import numpy as np

from course_rag.boundary.db.models.material_model import MaterialStatus
from course_rag.boundary.vdb.base_store import MaterialIndexStore
from course_rag.boundary.vdb.vector_schemas import (
    ChunkRow,
    MaterialContent,
    MaterialRecord,
    MaterialStats,
    SearchResult,
    VectorQuery,
)
from course_rag.core.exceptions import EmbeddingDimensionError, MaterialNotFoundError
from course_rag.core.retrieval.similarity import clamp_similarity, cosine_similarity

logger = logging.getLogger(__name__)


@dataclass
class _StoredChunk:
    seq: int
    row: ChunkRow


class InMemoryIndexStore(MaterialIndexStore):
    """Dictionary-backed MaterialIndexStore."""

    def __init__(self) -> None:
        self._materials: dict[uuid.UUID, MaterialRecord] = {}
        self._contents: dict[uuid.UUID, MaterialContent] = {}
        self._chunks: dict[uuid.UUID, list[_StoredChunk]] = {}
        self._seq = itertools.count(1)
        self._lock = asyncio.Lock()

    def _require(self, material_id: uuid.UUID) -> MaterialRecord:
        record = self._materials.get(material_id)
        if record is None:
            raise MaterialNotFoundError(str(material_id))
        return record

    async def upsert_material(self, record: MaterialRecord) -> MaterialRecord:
        async with self._lock:
            existing = self._materials.get(record.material_id)
            if existing is not None:
                record = existing.model_copy(
                    update={"status": record.status, "error_message": record.error_message}
                )
            self._materials[record.material_id] = record
            return record

    async def get_material(self, material_id: uuid.UUID) -> MaterialRecord | None:
        return self._materials.get(material_id)

    async def list_materials(self, course_id: uuid.UUID) -> list[MaterialRecord]:
        return sorted(
            (m for m in self._materials.values() if m.course_id == course_id),
            key=lambda m: m.uploaded_at,
        )

    async def update_material_status(
        self,
        material_id: uuid.UUID,
        status: MaterialStatus,
        error_message: str | None = None,
    ) -> None:
        async with self._lock:
            record = self._require(material_id)
            error = error_message if status is MaterialStatus.FAILED else None
            self._materials[material_id] = record.model_copy(
                update={"status": status, "error_message": error}
            )

    async def save_content(self, content: MaterialContent) -> None:
        async with self._lock:
            self._require(content.material_id)
            self._contents[content.material_id] = content.model_copy(deep=True)

    async def get_content(self, material_id: uuid.UUID) -> MaterialContent | None:
        content = self._contents.get(material_id)
        return content.model_copy(deep=True) if content is not None else None

    async def replace_material_chunks(self, material_id: uuid.UUID, rows: list[ChunkRow]) -> int:
        async with self._lock:
            self._require(material_id)
            self._chunks[material_id] = [
                _StoredChunk(seq=next(self._seq), row=row.model_copy(deep=True)) for row in rows
            ]
            return len(rows)

    async def get_chunk_vector(self, material_id: uuid.UUID, chunk_id: str) -> list[float] | None:
        for stored in self._chunks.get(material_id, []):
            if stored.row.chunk_id == chunk_id:
                return list(stored.row.embedding)
        return None

    async def count_chunks(self, material_id: uuid.UUID) -> int:
        return len(self._chunks.get(material_id, []))

    def _candidates(self, query: VectorQuery) -> list[tuple[MaterialRecord, _StoredChunk]]:
        allowed = set(query.material_ids) if query.material_ids is not None else None
        candidates = []
        for material_id, stored_chunks in self._chunks.items():
            material = self._materials.get(material_id)
            if material is None:
                continue
            if query.course_id is not None and material.course_id != query.course_id:
                continue
            if allowed is not None and material_id not in allowed:
                continue
            for stored in stored_chunks:
                if query.exclude is not None and query.exclude == (material_id, stored.row.chunk_id):
                    continue
                candidates.append((material, stored))
        return candidates

    async def search(self, query: VectorQuery) -> list[SearchResult]:
        candidates = self._candidates(query)
        if not candidates:
            return []

        dimension = len(query.embedding)
        for _, stored in candidates:
            if len(stored.row.embedding) != dimension:
                raise EmbeddingDimensionError(dimension, len(stored.row.embedding))

        matrix = np.array([stored.row.embedding for _, stored in candidates], dtype=np.float64)
        scores = cosine_similarity(query.embedding, matrix)

        ranked = sorted(
            (
                (float(score), stored.seq, material, stored)
                for score, (material, stored) in zip(scores, candidates)
                if score >= query.min_similarity
            ),
            key=lambda item: (-item[0], item[1]),
        )
        return [
            SearchResult(
                material_id=material.material_id,
                course_id=material.course_id,
                file_name=material.file_name,
                file_path=material.file_path,
                file_type=material.file_type,
                uploaded_at=material.uploaded_at,
                chunk_id=stored.row.chunk_id,
                chunk_index=stored.row.chunk_index,
                chunk_text=stored.row.chunk_text,
                page_number=stored.row.page_number,
                similarity=clamp_similarity(score),
                metadata=dict(stored.row.metadata),
            )
            for score, _, material, stored in ranked[: query.top_k]
        ]

    async def delete_material(self, material_id: uuid.UUID) -> bool:
        async with self._lock:
            if self._materials.pop(material_id, None) is None:
                return False
            self._contents.pop(material_id, None)
            self._chunks.pop(material_id, None)
            return True

    async def course_stats(self, course_id: uuid.UUID) -> MaterialStats:
        materials = [m for m in self._materials.values() if m.course_id == course_id]
        with_content = sum(
            1
            for m in materials
            if m.material_id in self._contents and self._contents[m.material_id].content_text
        )
        return MaterialStats(
            course_id=course_id,
            total_materials=len(materials),
            materials_with_content=with_content,
            materials_without_content=len(materials) - with_content,
            failed_materials=sum(1 for m in materials if m.status is MaterialStatus.FAILED),
            total_chunks=sum(len(self._chunks.get(m.material_id, [])) for m in materials),
        )
