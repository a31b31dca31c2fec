"""
Pydantic validation schemas

Wire names follow the dashboard's JSON (camelCase ids and timestamps,
Portuguese legal field names); Python attributes are snake_case.
"""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

ProviderName = Literal["google", "openai", "anthropic"]
PROVIDER_NAMES: tuple[str, ...] = ("google", "openai", "anthropic")


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# ============================================================================
# Case Schemas
# ============================================================================

class Party(WireModel):
    role: str = ""
    name: str = ""
    advogado: Optional[str] = None


class NoteData(WireModel):
    id: str
    text: str
    created_at: int = Field(..., alias="createdAt")


class VoteData(WireModel):
    id: str
    type: str
    timestamp: int


class CaseRecord(WireModel):
    """
    One judged matter within a session.

    ``status`` is computed from ``voto``; any status supplied on input is
    ignored. Records are frozen: updates go through ``model_copy``.
    """
    model_config = ConfigDict(populate_by_name=True, from_attributes=True, frozen=True)

    internal_id: str = Field(..., alias="internalId")
    content_hash: Optional[str] = Field(None, alias="contentHash")
    chamada: int
    numero_processo: str = ""
    classe: str = ""
    partes: List[Party] = Field(default_factory=list)
    juiz_sentenciante: Optional[str] = None
    ementa: str = ""
    resumo_estruturado: str = ""
    tags: List[str] = Field(default_factory=list)
    observacao: Optional[str] = None
    notes: Optional[NoteData] = None
    voto: Optional[VoteData] = None

    @computed_field
    @property
    def status(self) -> Literal["pending", "reviewed"]:
        return "reviewed" if self.voto is not None else "pending"


# ============================================================================
# Session Schemas
# ============================================================================

class SessionMetadata(WireModel):
    id: Optional[str] = None
    created_at: Optional[int] = Field(None, alias="createdAt")
    orgao: str = ""
    relator: str = ""
    data: str = ""
    tipo: str = ""
    hora: str = ""
    total_processos: str = ""

    @field_validator("orgao", "relator", "data", "tipo", "hora", "total_processos", mode="before")
    @classmethod
    def coerce_text(cls, v):
        if v is None:
            return ""
        return str(v)


class SessionRecord(WireModel):
    id: str
    metadata: SessionMetadata
    cases: List[CaseRecord] = Field(default_factory=list)
    date_saved: int = Field(..., alias="dateSaved")
    state: Literal["active", "trashed"] = "active"


class LogEntry(WireModel):
    id: str
    timestamp: int
    action: str
    details: str
    target_id: Optional[str] = Field(None, alias="targetId")


# ============================================================================
# Workspace Schemas
# ============================================================================

class WorkspaceResponse(WireModel):
    session_id: Optional[str] = Field(None, alias="sessionId")
    metadata: Optional[SessionMetadata] = None
    cases: List[CaseRecord] = Field(default_factory=list)
    batch_ids: List[str] = Field(default_factory=list, alias="batchIds")
    extraction_in_progress: bool = Field(False, alias="extractionInProgress")


class VoteRequest(WireModel):
    type: Optional[str] = None


class NoteRequest(WireModel):
    text: str


class ExtractionResponse(WorkspaceResponse):
    cache_hit: bool = Field(False, alias="cacheHit")
    content_hash: str = Field(..., alias="contentHash")


# ============================================================================
# AI Settings Schemas
# ============================================================================

class ProviderConfig(WireModel):
    name: str = ""
    key: str = ""
    model: str = ""


class AISettings(WireModel):
    active_provider: ProviderName = Field("google", alias="activeProvider")
    configs: Dict[str, ProviderConfig] = Field(default_factory=dict)
    temperature: float = Field(0.2, ge=0.0, le=2.0)

    def active_config(self) -> ProviderConfig:
        return self.configs.get(self.active_provider) or ProviderConfig()


class ProviderConfigUpdate(WireModel):
    name: Optional[str] = None
    key: Optional[str] = None
    model: str = Field(..., min_length=1)


class TemperatureUpdate(WireModel):
    temperature: float = Field(..., ge=0.0, le=2.0)
