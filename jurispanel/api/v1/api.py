"""
Main API router aggregator
"""
from fastapi import APIRouter

from jurispanel.api.v1.endpoints import (
    extraction,
    health,
    logs,
    sessions,
    settings,
    workspace,
)

api_router = APIRouter()

api_router.include_router(extraction.router, prefix="/extraction", tags=["Extraction"])
api_router.include_router(workspace.router, prefix="/workspace", tags=["Workspace"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
api_router.include_router(logs.router, prefix="/logs", tags=["Audit Log"])
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])
