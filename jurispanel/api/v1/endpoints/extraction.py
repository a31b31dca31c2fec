# jurispanel/api/v1/endpoints/extraction.py

"""
Extraction Endpoints

Upload a judgment-session document, extract its cases with the active AI
provider and publish them as the working session.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from jurispanel.api.v1.deps import get_gateway, get_pipeline, get_session_store, get_workspace
from jurispanel.core.config import settings
from jurispanel.core.logger import logger
from jurispanel.db.schemas import ExtractionResponse, SessionMetadata
from jurispanel.services.document_loader import DocumentPayload, load_document, text_document
from jurispanel.services.extraction_pipeline import ExtractionPipeline, autofill_metadata
from jurispanel.services.providers import ModelGateway, ModelGatewayError
from jurispanel.services.session_store import SessionStore
from jurispanel.services.workspace import ReviewWorkspace
from jurispanel.utils.exceptions import AIServiceError, EmptyDocumentError

router = APIRouter()


async def _read_document(file: Optional[UploadFile], text: Optional[str]) -> DocumentPayload:
    if file is None:
        if text is None:
            raise EmptyDocumentError()
        return text_document(text)

    data = await file.read()
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.MAX_UPLOAD_BYTES} bytes",
        )
    return load_document(file.filename or "", file.content_type or "", data)


@router.post("", response_model=ExtractionResponse, response_model_by_alias=True)
async def extract_cases(
    file: Optional[UploadFile] = File(None),
    text: Optional[str] = Form(None),
    orgao: str = Form(""),
    relator: str = Form(""),
    data: str = Form(""),
    tipo: str = Form(""),
    hora: str = Form(""),
    total_processos: str = Form(""),
    keep_source: bool = Form(False),
    workspace: ReviewWorkspace = Depends(get_workspace),
    pipeline: ExtractionPipeline = Depends(get_pipeline),
    store: SessionStore = Depends(get_session_store),
):
    """
    Extract cases from an uploaded PDF/DOCX/TXT (or pasted text).

    Replaces the working session. 409 while another extraction is running,
    503 when the provider call fails (nothing is published).
    """
    document = await _read_document(file, text)
    metadata = SessionMetadata(
        orgao=orgao, relator=relator, data=data, tipo=tipo, hora=hora, total_processos=total_processos,
    )
    try:
        result = await workspace.extract(pipeline, document, metadata)
    except ModelGatewayError as e:
        logger.error("Extraction failed: %s", e)
        raise AIServiceError(str(e))

    if keep_source:
        store.save_document(document, content_hash=result.content_hash)
    return result


@router.post("/metadata", response_model=SessionMetadata, response_model_by_alias=True)
async def suggest_metadata(
    file: Optional[UploadFile] = File(None),
    text: Optional[str] = Form(None),
    gateway: ModelGateway = Depends(get_gateway),
):
    """
    Suggest session metadata (orgão, relator, data, hora, tipo) for a document.
    Fields the model cannot find come back empty.
    """
    document = await _read_document(file, text)
    return await asyncio.to_thread(autofill_metadata, gateway, document)
