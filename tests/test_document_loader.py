import base64
from io import BytesIO

import docx
import pypdf
import pytest

from jurispanel.services.document_loader import DOCX_MIME, PDF_MIME, load_document, text_document
from jurispanel.utils.exceptions import EmptyDocumentError, UnsupportedDocumentError


def _pdf_bytes(pages: int = 2) -> bytes:
    writer = pypdf.PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=595, height=842)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def _docx_bytes(*paragraphs: str) -> bytes:
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def test_text_upload():
    payload = load_document("pauta.txt", "text/plain", "Sessão de 10/03/2024".encode("utf-8"))

    assert payload.kind == "text"
    assert payload.data == "Sessão de 10/03/2024"
    assert payload.hash_source == payload.data
    assert not payload.is_pdf


def test_latin1_text_falls_back():
    payload = load_document("pauta.txt", "text/plain", "Sessão".encode("latin-1"))

    assert payload.data == "Sessão"


def test_pdf_is_sent_as_base64():
    raw = _pdf_bytes(pages=2)
    payload = load_document("pauta.pdf", "application/octet-stream", raw)

    assert payload.is_pdf
    assert payload.mime_type == PDF_MIME
    assert payload.page_count == 2
    assert base64.b64decode(payload.data) == raw
    assert payload.hash_source == payload.data


def test_docx_is_flattened_to_text():
    payload = load_document("pauta.docx", DOCX_MIME, _docx_bytes("1ª Turma", "Processo 0001234"))

    assert payload.kind == "text"
    assert payload.data == "1ª Turma\nProcesso 0001234"


def test_excerpt_truncates_text_only():
    assert text_document("abcdef").excerpt(3) == "abc"


def test_empty_upload():
    with pytest.raises(EmptyDocumentError):
        load_document("pauta.txt", "text/plain", b"")
    with pytest.raises(EmptyDocumentError):
        text_document("   ")


def test_unsupported_type():
    with pytest.raises(UnsupportedDocumentError):
        load_document("foto.png", "image/png", b"\x89PNG")


def test_corrupt_pdf():
    with pytest.raises(UnsupportedDocumentError):
        load_document("pauta.pdf", PDF_MIME, b"this is not a pdf")
