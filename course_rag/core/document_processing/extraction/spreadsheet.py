"""
Spreadsheet extraction (.xlsx via openpyxl, .xls via xlrd).

Each non-empty sheet becomes a block:

    --- Sheet: Grades ---
    Headers: Name | Score
    Row 1: Ada | 91

Dependencies: openpyxl, xlrd
System role: Spreadsheet handler of the Extractor
"""

import io
from collections.abc import Iterable
from datetime import date, datetime, time

import openpyxl
import xlrd

from course_rag.core.document_processing.extraction.base import (
    FormatHandler,
    document_from_pages,
)
from course_rag.core.document_processing.models import ExtractedDocument, ExtractionMethod
from course_rag.core.exceptions import ExtractionError

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS_MIME_TYPE = "application/vnd.ms-excel"


def cell_text(value) -> str:
    """Render a cell value; integral floats lose their trailing .0."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value).strip()


def format_sheet(name: str, rows: Iterable[Iterable]) -> str:
    """
    Format one sheet, or return "" when it holds no text.

    Fully blank rows are dropped before numbering. The first remaining row is
    the header row; data rows keep only their non-blank cells.
    """
    table = [[cell_text(v) for v in row] for row in rows]
    table = [row for row in table if any(row)]
    if not table:
        return ""

    lines = [f"--- Sheet: {name} ---", f"Headers: {' | '.join(table[0])}"]
    for number, row in enumerate(table[1:], start=1):
        values = [v for v in row if v]
        lines.append(f"Row {number}: {' | '.join(values)}")
    return "\n".join(lines)


def _sheets_to_document(
    sheets: list[tuple[str, Iterable[Iterable]]],
    method: ExtractionMethod,
) -> ExtractedDocument:
    if not sheets:
        raise ExtractionError("Workbook contains no sheets", file_type=method.value)

    pages = [(number, format_sheet(name, rows)) for number, (name, rows) in enumerate(sheets, start=1)]
    document = document_from_pages(pages, method, page_count=len(sheets))
    if not document.has_text:
        raise ExtractionError("Workbook contained no extractable text", file_type=method.value)
    return document


class XlsxHandler(FormatHandler):
    method = ExtractionMethod.XLSX

    def matches(self, mime_type: str, file_name: str) -> bool:
        return mime_type == XLSX_MIME_TYPE

    def extract_sync(self, data: bytes, file_name: str, mime_type: str) -> ExtractedDocument:
        workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        try:
            sheets = [
                (sheet.title, list(sheet.iter_rows(values_only=True)))
                for sheet in workbook.worksheets
            ]
        finally:
            workbook.close()
        return _sheets_to_document(sheets, self.method)


class XlsHandler(FormatHandler):
    method = ExtractionMethod.XLS

    def matches(self, mime_type: str, file_name: str) -> bool:
        return mime_type == XLS_MIME_TYPE

    def extract_sync(self, data: bytes, file_name: str, mime_type: str) -> ExtractedDocument:
        workbook = xlrd.open_workbook(file_contents=data)
        sheets = [
            (sheet.name, [sheet.row_values(i) for i in range(sheet.nrows)])
            for sheet in workbook.sheets()
        ]
        return _sheets_to_document(sheets, self.method)
