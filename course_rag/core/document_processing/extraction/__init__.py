"""
Format-specific text extraction.

Exports: Extractor and the individual format handlers.
"""

from course_rag.core.document_processing.extraction.extractor import Extractor
from course_rag.core.document_processing.extraction.image_ocr import ImageOcrHandler
from course_rag.core.document_processing.extraction.pdf import PdfHandler
from course_rag.core.document_processing.extraction.presentation import PptHandler, PptxHandler
from course_rag.core.document_processing.extraction.spreadsheet import XlsHandler, XlsxHandler
from course_rag.core.document_processing.extraction.text import TextHandler
from course_rag.core.document_processing.extraction.word import WordHandler

__all__ = [
    "Extractor",
    "ImageOcrHandler",
    "PdfHandler",
    "PptHandler",
    "PptxHandler",
    "TextHandler",
    "WordHandler",
    "XlsHandler",
    "XlsxHandler",
]
