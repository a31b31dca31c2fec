"""
Working session endpoints: batch selection, votes and notes
"""
from fastapi import APIRouter, Depends, Query

from jurispanel.api.v1.deps import get_audit, get_ids, get_workspace
from jurispanel.db.schemas import NoteRequest, VoteRequest, WorkspaceResponse
from jurispanel.services.audit_service import AuditService
from jurispanel.services.id_service import IdService
from jurispanel.services.workspace import ReviewWorkspace

router = APIRouter()


@router.get("", response_model=WorkspaceResponse, response_model_by_alias=True)
def get_workspace_state(workspace: ReviewWorkspace = Depends(get_workspace)):
    return workspace.to_response()


@router.post("/new", response_model=WorkspaceResponse, response_model_by_alias=True)
def new_list(workspace: ReviewWorkspace = Depends(get_workspace)):
    """Discard the working session and start an empty one."""
    workspace.new_list()
    return workspace.to_response()


# ============================================================================
# Batch selection
# ============================================================================

# Registered before /batch/{case_id} so "all" is not taken as an id.
@router.post("/batch/all", response_model=WorkspaceResponse, response_model_by_alias=True)
def toggle_select_all(workspace: ReviewWorkspace = Depends(get_workspace)):
    workspace.select_all()
    return workspace.to_response()


@router.post("/batch/{case_id}", response_model=WorkspaceResponse, response_model_by_alias=True)
def toggle_batch(case_id: str, workspace: ReviewWorkspace = Depends(get_workspace)):
    workspace.toggle_batch(case_id)
    return workspace.to_response()


# ============================================================================
# Review
# ============================================================================

@router.post("/cases/{case_id}/vote", response_model=WorkspaceResponse, response_model_by_alias=True)
def vote(
    case_id: str,
    request: VoteRequest,
    workspace: ReviewWorkspace = Depends(get_workspace),
    ids: IdService = Depends(get_ids),
    audit: AuditService = Depends(get_audit),
):
    """
    Vote on a case. If the case is part of the current batch selection the
    vote applies to the whole batch. ``{"type": null}`` clears the vote.
    """
    workspace.vote(case_id, request.type, ids, audit)
    return workspace.to_response()


@router.put("/cases/{case_id}/note", response_model=WorkspaceResponse, response_model_by_alias=True)
def save_note(
    case_id: str,
    request: NoteRequest,
    workspace: ReviewWorkspace = Depends(get_workspace),
    ids: IdService = Depends(get_ids),
    audit: AuditService = Depends(get_audit),
):
    workspace.save_note(case_id, request.text, ids, audit)
    return workspace.to_response()


@router.delete("/cases/{case_id}/note", response_model=WorkspaceResponse, response_model_by_alias=True)
def delete_note(
    case_id: str,
    confirm: bool = Query(False, description="Must be true to delete"),
    workspace: ReviewWorkspace = Depends(get_workspace),
    audit: AuditService = Depends(get_audit),
):
    workspace.delete_note(case_id, confirm, audit)
    return workspace.to_response()
