"""
Image text extraction with a multimodal Gemini model.

Dependencies: langchain_google_genai, langchain_core
System role: Image handler of the Extractor
"""

import base64
import logging

from langchain_core.messages import HumanMessage

from course_rag.core.document_processing.extraction.base import (
    FormatHandler,
    document_from_text,
)
from course_rag.core.document_processing.models import ExtractedDocument, ExtractionMethod

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})

NO_TEXT_SENTINEL = "NO_TEXT_FOUND"

OCR_PROMPT = f"""Extract ALL text visible in this image. Include:
- All printed or typed text
- All handwritten text (if any)
- Text in tables, charts, or diagrams
- Labels, captions, headers, and footers

Return ONLY the extracted text, preserving the original structure and formatting as much as possible.
If the image contains a table, format it with pipe (|) delimiters.
If there is no readable text in the image, respond with exactly: {NO_TEXT_SENTINEL}"""


def _response_text(content) -> str:
    """Chat model content is either a string or a list of typed parts."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class ImageOcrHandler(FormatHandler):
    """OCR through ChatGoogleGenerativeAI. The model is created on first use."""

    method = ExtractionMethod.GEMINI_OCR

    def __init__(self, model=None, model_name: str = "gemini-2.5-flash", google_api_key: str | None = None) -> None:
        """
        Initialize OCR handler.

        Args:
            model: Chat model with ``ainvoke`` (tests pass a mock)
            model_name: Gemini model used when ``model`` is not given
            google_api_key: API key; falls back to GOOGLE_API_KEY when empty
        """
        self._model = model
        self._model_name = model_name
        self._google_api_key = google_api_key

    @property
    def model(self):
        if self._model is None:
            from langchain_google_genai import ChatGoogleGenerativeAI

            kwargs = {"google_api_key": self._google_api_key} if self._google_api_key else {}
            self._model = ChatGoogleGenerativeAI(model=self._model_name, temperature=0, **kwargs)
            logger.info(f"{__name__}:model - Initialized OCR model {self._model_name}")
        return self._model

    def matches(self, mime_type: str, file_name: str) -> bool:
        return mime_type in IMAGE_MIME_TYPES

    async def extract(self, data: bytes, file_name: str, mime_type: str) -> ExtractedDocument:
        encoded = base64.b64encode(data).decode("ascii")
        message = HumanMessage(
            content=[
                {"type": "image_url", "image_url": f"data:{mime_type};base64,{encoded}"},
                {"type": "text", "text": OCR_PROMPT},
            ]
        )
        response = await self.model.ainvoke([message])
        text = _response_text(response.content).strip()

        if text == NO_TEXT_SENTINEL or not text:
            return document_from_text("", self.method)
        return document_from_text(text, self.method)
