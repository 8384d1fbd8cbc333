"""Text extraction for uploaded requirement documents."""
from __future__ import annotations

import json
import logging
from io import BytesIO
from typing import Callable, List, Optional

from docx import Document
from openpyxl import load_workbook
from PyPDF2 import PdfReader

from .errors import InvalidArgumentError
from .models import SourceType

logger = logging.getLogger(__name__)

JSON_TEXT_FIELDS = ("title", "description", "requirements", "content", "text")

Extractor = Callable[[bytes], str]


def determine_source_type(filename: Optional[str], content_type: Optional[str]) -> SourceType:
    """Classify an upload by content type first, then by file extension."""
    if not filename or not content_type:
        return SourceType.UNKNOWN
    name = filename.lower()
    kind = content_type.lower()
    if "pdf" in kind:
        return SourceType.PDF
    if "text" in kind or name.endswith((".txt", ".md")):
        return SourceType.TEXT
    if "json" in kind or name.endswith(".json"):
        return SourceType.JSON
    if "excel" in kind or "spreadsheet" in kind or name.endswith((".xlsx", ".xls")):
        return SourceType.EXCEL
    if "word" in kind or name.endswith((".docx", ".doc")):
        return SourceType.WORD
    return SourceType.OTHER


def extract_requirement_text(filename: Optional[str], content_type: Optional[str], blob: bytes) -> str:
    """Return the plain text of an uploaded requirement document.

    Raises :class:`InvalidArgumentError` for unsupported or unreadable files.
    """
    if not filename or not content_type:
        raise InvalidArgumentError("Invalid file: a filename and content type are required")
    source_type = determine_source_type(filename, content_type)
    extractor = _EXTRACTORS.get(source_type)
    if extractor is None:
        raise InvalidArgumentError(f"Unsupported file type: {content_type}")
    try:
        text = extractor(blob)
    except InvalidArgumentError:
        raise
    except Exception as exc:
        logger.error("Error extracting text from %s: %s", filename, exc)
        raise InvalidArgumentError(f"Unable to read {filename}: {exc}") from exc
    logger.info("Extracted %d characters from %s (%s)", len(text), filename, source_type.value)
    return text


def _extract_text_plain(blob: bytes) -> str:
    return blob.decode("utf-8", errors="replace")


def _extract_text_pdf(blob: bytes) -> str:
    reader = PdfReader(BytesIO(blob))
    fragments: List[str] = []
    for page in reader.pages:
        text = page.extract_text() or ""
        if text:
            fragments.append(text)
    return "\n".join(fragments)


def _extract_text_json(blob: bytes) -> str:
    try:
        payload = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidArgumentError(f"Invalid JSON document: {exc}") from exc
    if not isinstance(payload, dict):
        return json.dumps(payload)
    pieces = [
        str(payload[key]) for key in JSON_TEXT_FIELDS if payload.get(key) is not None
    ]
    if not pieces:
        return json.dumps(payload)
    return "\n\n".join(pieces)


def _extract_text_excel(blob: bytes) -> str:
    workbook = load_workbook(BytesIO(blob), read_only=True)
    sections: List[str] = []
    try:
        for sheet in workbook.worksheets:
            lines = [f"Sheet: {sheet.title}"]
            for row in sheet.iter_rows(values_only=True):
                cells = [str(value) for value in row if value is not None and str(value) != ""]
                if cells:
                    lines.append("\t".join(cells))
            sections.append("\n".join(lines) + "\n")
    finally:
        workbook.close()
    return "\n".join(sections)


def _extract_text_docx(blob: bytes) -> str:
    document = Document(BytesIO(blob))
    paragraphs = [para.text for para in document.paragraphs if para.text]
    return "\n".join(paragraphs)


_EXTRACTORS = {
    SourceType.PDF: _extract_text_pdf,
    SourceType.TEXT: _extract_text_plain,
    SourceType.JSON: _extract_text_json,
    SourceType.EXCEL: _extract_text_excel,
    SourceType.WORD: _extract_text_docx,
}
