# jurispanel/api/v1/endpoints/sessions.py

"""
Saved session endpoints

Active sessions, the trash (recoverable) and permanent deletion.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from jurispanel.api.v1.deps import get_audit, get_ids, get_session_store, get_workspace
from jurispanel.db.schemas import SessionRecord, WorkspaceResponse
from jurispanel.services.audit_service import AuditService
from jurispanel.services.id_service import IdService
from jurispanel.services.session_store import SessionStore
from jurispanel.services.workspace import ReviewWorkspace

router = APIRouter()


@router.post("", response_model=SessionRecord, response_model_by_alias=True)
def save_session(
    workspace: ReviewWorkspace = Depends(get_workspace),
    store: SessionStore = Depends(get_session_store),
    ids: IdService = Depends(get_ids),
    audit: AuditService = Depends(get_audit),
):
    """Save the working session (first save assigns its L- id)."""
    return workspace.save(store, ids, audit)


@router.get("", response_model=List[SessionRecord], response_model_by_alias=True)
def list_sessions(store: SessionStore = Depends(get_session_store)):
    return store.list_active()


# ============================================================================
# Trash
# ============================================================================

@router.get("/trash", response_model=List[SessionRecord], response_model_by_alias=True)
def list_trash(store: SessionStore = Depends(get_session_store)):
    return store.list_trashed()


@router.post("/trash/{code}/restore", response_model=SessionRecord, response_model_by_alias=True)
def restore_session(
    code: str,
    workspace: ReviewWorkspace = Depends(get_workspace),
    store: SessionStore = Depends(get_session_store),
    audit: AuditService = Depends(get_audit),
):
    return workspace.restore(store, code, audit)


@router.delete("/trash/{code}", status_code=status.HTTP_204_NO_CONTENT)
def purge_session(
    code: str,
    workspace: ReviewWorkspace = Depends(get_workspace),
    store: SessionStore = Depends(get_session_store),
    audit: AuditService = Depends(get_audit),
):
    """Permanently delete a session that is already in the trash."""
    workspace.purge(store, code, audit)


# ============================================================================
# Single session
# ============================================================================

@router.post("/{code}/load", response_model=WorkspaceResponse, response_model_by_alias=True)
def load_session(
    code: str,
    workspace: ReviewWorkspace = Depends(get_workspace),
    store: SessionStore = Depends(get_session_store),
    audit: AuditService = Depends(get_audit),
):
    workspace.load_session(store, code, audit)
    return workspace.to_response()


@router.delete("/{code}", response_model=SessionRecord, response_model_by_alias=True)
def trash_session(
    code: str,
    workspace: ReviewWorkspace = Depends(get_workspace),
    store: SessionStore = Depends(get_session_store),
    audit: AuditService = Depends(get_audit),
):
    """Move a session to the trash."""
    return workspace.delete(store, code, audit)
