"""
PDF text extraction using LangChain's PyPDFParser.

Dependencies: langchain_community (pypdf)
System role: PDF handler of the Extractor
"""

from langchain_community.document_loaders.parsers.pdf import PyPDFParser
from langchain_core.documents.base import Blob

from course_rag.core.document_processing.extraction.base import (
    FormatHandler,
    document_from_pages,
)
from course_rag.core.document_processing.models import ExtractedDocument, ExtractionMethod

PDF_MIME_TYPE = "application/pdf"


class PdfHandler(FormatHandler):
    """Extract text page by page from PDF documents."""

    method = ExtractionMethod.PDF

    def matches(self, mime_type: str, file_name: str) -> bool:
        return mime_type == PDF_MIME_TYPE

    def extract_sync(self, data: bytes, file_name: str, mime_type: str) -> ExtractedDocument:
        parser = PyPDFParser()
        documents = list(parser.lazy_parse(Blob.from_data(data, mime_type=PDF_MIME_TYPE, path=file_name)))
        pages = [
            (number, document.page_content or "")
            for number, document in enumerate(documents, start=1)
        ]
        return document_from_pages(pages, self.method)
