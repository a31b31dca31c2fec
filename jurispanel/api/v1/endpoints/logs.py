"""
Audit log endpoint
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from jurispanel.api.v1.deps import get_audit
from jurispanel.db.schemas import LogEntry
from jurispanel.services.audit_service import AuditService

router = APIRouter()


@router.get("", response_model=List[LogEntry], response_model_by_alias=True)
def list_logs(
    limit: Optional[int] = Query(None, ge=1, description="Newest entries first"),
    audit: AuditService = Depends(get_audit),
):
    return audit.list_logs(limit)
