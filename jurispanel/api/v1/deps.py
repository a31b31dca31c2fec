"""
API dependencies
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from jurispanel.db.database import get_db
from jurispanel.services.audit_service import AuditService
from jurispanel.services.extraction_cache import ExtractionCache
from jurispanel.services.extraction_pipeline import ExtractionPipeline
from jurispanel.services.id_service import IdService, SqlCounterStore
from jurispanel.services.providers import ModelGateway, build_gateway
from jurispanel.services.session_store import SessionStore
from jurispanel.services.settings_service import SettingsService
from jurispanel.services.workspace import ReviewWorkspace


def get_workspace(request: Request) -> ReviewWorkspace:
    """The single working session, created at startup."""
    return request.app.state.workspace


def get_ids(db: Session = Depends(get_db)) -> IdService:
    return IdService(SqlCounterStore(db))


def get_audit(db: Session = Depends(get_db), ids: IdService = Depends(get_ids)) -> AuditService:
    return AuditService(db, ids=ids)


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


def get_session_store(db: Session = Depends(get_db)) -> SessionStore:
    return SessionStore(db)


def get_gateway(settings_service: SettingsService = Depends(get_settings_service)) -> ModelGateway:
    """Gateway for whichever provider the reviewer has active."""
    return build_gateway(settings_service.get())


def get_pipeline(
    db: Session = Depends(get_db),
    gateway: ModelGateway = Depends(get_gateway),
    ids: IdService = Depends(get_ids),
    audit: AuditService = Depends(get_audit),
) -> ExtractionPipeline:
    return ExtractionPipeline(gateway, ids, ExtractionCache(db), audit)
