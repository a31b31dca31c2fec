"""
Document loader: turns an uploaded PDF / DOCX / TXT file into the payload
sent to the model gateway.

PDFs travel as base64 and are sent inline; DOCX and text are flattened to
plain text. ``hash_source`` is what the extraction cache is keyed on.
"""
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import List, Literal, Optional

import docx
import pypdf
from pypdf.errors import PyPdfError

from jurispanel.utils.exceptions import EmptyDocumentError, UnsupportedDocumentError

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME = "text/plain"


@dataclass(frozen=True)
class DocumentPayload:
    kind: Literal["text", "pdf"]
    data: str
    mime_type: str
    filename: str = ""
    file_size: int = 0
    page_count: Optional[int] = None

    @property
    def hash_source(self) -> str:
        return self.data

    @property
    def is_pdf(self) -> bool:
        return self.kind == "pdf"

    def excerpt(self, limit: int) -> str:
        """Leading text used by metadata calls; PDFs are sent whole."""
        return self.data if self.is_pdf else self.data[:limit]


def _extract_docx(data: bytes) -> str:
    """Extract plain text from a DOCX byte blob."""
    document = docx.Document(BytesIO(data))
    paragraphs: List[str] = [p.text for p in document.paragraphs]
    return "\n".join(paragraphs).strip()


def _extract_txt(data: bytes) -> str:
    """Decode a plain-text byte blob (UTF-8 with latin-1 fallback)."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1", errors="replace")


def _count_pdf_pages(data: bytes) -> int:
    try:
        reader = pypdf.PdfReader(BytesIO(data))
        return len(reader.pages)
    except PyPdfError as exc:
        raise UnsupportedDocumentError(f"Unreadable PDF: {exc}") from exc


def _detect_kind(filename: str, content_type: str) -> str:
    name = (filename or "").lower()
    ct = (content_type or "").lower()
    if ct == PDF_MIME or name.endswith(".pdf"):
        return "pdf"
    if ct in (DOCX_MIME, "application/msword") or name.endswith(".docx"):
        return "docx"
    if ct.startswith("text/") or name.endswith((".txt", ".md")):
        return "text"
    raise UnsupportedDocumentError(f"Unsupported document type: {content_type or filename}")


def load_document(filename: str, content_type: str, data: bytes) -> DocumentPayload:
    if not data:
        raise EmptyDocumentError()

    kind = _detect_kind(filename, content_type)

    if kind == "pdf":
        pages = _count_pdf_pages(data)
        logger.info("Loaded PDF %s (%d bytes, %d pages)", filename, len(data), pages)
        return DocumentPayload(
            kind="pdf",
            data=base64.b64encode(data).decode("ascii"),
            mime_type=PDF_MIME,
            filename=filename,
            file_size=len(data),
            page_count=pages,
        )

    text = _extract_docx(data) if kind == "docx" else _extract_txt(data)
    if not text.strip():
        raise EmptyDocumentError()
    logger.info("Loaded %s %s (%d chars)", kind, filename, len(text))
    return DocumentPayload(
        kind="text",
        data=text,
        mime_type=DOCX_MIME if kind == "docx" else TEXT_MIME,
        filename=filename,
        file_size=len(data),
    )


def text_document(text: str, filename: str = "") -> DocumentPayload:
    """Payload for text pasted directly into the dashboard."""
    if not text or not text.strip():
        raise EmptyDocumentError()
    return DocumentPayload(
        kind="text",
        data=text,
        mime_type=TEXT_MIME,
        filename=filename,
        file_size=len(text.encode("utf-8")),
    )
