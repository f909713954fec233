"""
Presentation extraction.

.pptx goes through python-pptx, one page span per slide. Legacy .ppt is an
OLE2 compound file; its ``PowerPoint Document`` stream is read with olefile
and decoded record by record.

Dependencies: python-pptx, olefile
System role: Presentation handlers of the Extractor
"""

import io

import olefile
from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE_TYPE

from course_rag.core.document_processing.extraction.base import (
    PAGE_SEPARATOR,
    FormatHandler,
    document_from_pages,
    document_from_text,
)
from course_rag.core.document_processing.extraction.ppt_records import extract_text_runs
from course_rag.core.document_processing.models import ExtractedDocument, ExtractionMethod
from course_rag.core.exceptions import ExtractionError

PPTX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
PPT_MIME_TYPE = "application/vnd.ms-powerpoint"
PPT_STREAM_NAME = "PowerPoint Document"


def _shape_texts(shapes) -> list[str]:
    texts = []
    for shape in shapes:
        if shape.shape_type == MSO_SHAPE_TYPE.GROUP:
            texts.extend(_shape_texts(shape.shapes))
            continue
        if shape.has_text_frame:
            text = shape.text_frame.text.strip()
            if text:
                texts.append(text)
        if getattr(shape, "has_table", False) and shape.has_table:
            for row in shape.table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    texts.append(" | ".join(cells))
    return texts


class PptxHandler(FormatHandler):
    method = ExtractionMethod.PPTX

    def matches(self, mime_type: str, file_name: str) -> bool:
        return mime_type == PPTX_MIME_TYPE

    def extract_sync(self, data: bytes, file_name: str, mime_type: str) -> ExtractedDocument:
        presentation = Presentation(io.BytesIO(data))
        pages = [
            (number, "\n".join(_shape_texts(slide.shapes)))
            for number, slide in enumerate(presentation.slides, start=1)
        ]
        return document_from_pages(pages, self.method)


class PptHandler(FormatHandler):
    method = ExtractionMethod.PPT_RECORDS

    def matches(self, mime_type: str, file_name: str) -> bool:
        return mime_type == PPT_MIME_TYPE

    def extract_sync(self, data: bytes, file_name: str, mime_type: str) -> ExtractedDocument:
        if not olefile.isOleFile(data):
            raise ExtractionError("File is not a legacy PowerPoint document", file_type=mime_type)

        with olefile.OleFileIO(data) as ole:
            if not ole.exists(PPT_STREAM_NAME):
                raise ExtractionError(
                    f"Could not find {PPT_STREAM_NAME} stream in .ppt file",
                    file_type=mime_type,
                )
            stream = ole.openstream(PPT_STREAM_NAME).read()

        runs = extract_text_runs(stream)
        if not runs:
            raise ExtractionError(
                "PowerPoint file contained no extractable text",
                file_type=mime_type,
            )
        return document_from_text(PAGE_SEPARATOR.join(runs), self.method)
