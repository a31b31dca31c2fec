"""
SQLAlchemy ORM Models

Persisted layout of saved review sessions: sessions own cases, each case owns
at most one current note and one current vote. Counters, the extraction cache
and reviewer settings live in small key/value tables.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Column,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    TIMESTAMP,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from jurispanel.db.database import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")

# ============================================================================
# Enums
# ============================================================================

class SessionLifecycle(str, enum.Enum):
    """Saved session state; purged sessions are removed outright"""
    active = "active"
    trashed = "trashed"


class CaseReviewStatus(str, enum.Enum):
    """Case review status (derived from vote presence)"""
    pending = "pending"
    reviewed = "reviewed"


# ============================================================================
# Sessions & cases
# ============================================================================

class JudgmentSession(Base):
    """One judgment-calendar sitting"""
    __tablename__ = "sessions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_code = Column(String(32), unique=True, nullable=False, index=True)

    # Session descriptors (free text)
    orgao = Column(Text, nullable=False, default="")
    relator = Column(Text, nullable=False, default="")
    data = Column(String(100), nullable=False, default="")
    tipo = Column(String(100), nullable=False, default="")
    hora = Column(String(50), nullable=False, default="")
    total_processos = Column(String(50), nullable=False, default="")

    # Soft delete
    lifecycle = Column(SQLEnum(SessionLifecycle), nullable=False, default=SessionLifecycle.active)
    trashed_at = Column(TIMESTAMP, nullable=True)

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    saved_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    cases = relationship(
        "SessionCase",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionCase.chamada",
    )
    documents = relationship("SourceDocument", back_populates="session")

    __table_args__ = (
        Index("ix_sessions_lifecycle_saved", "lifecycle", "saved_at"),
    )


class SessionCase(Base):
    """One judged matter inside a saved session"""
    __tablename__ = "cases"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(Uuid(as_uuid=True), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)

    case_code = Column(String(32), unique=True, nullable=False, index=True)
    content_hash = Column(String(16), nullable=True)
    chamada = Column(Integer, nullable=False)
    numero_processo = Column(Text, nullable=False, default="")
    classe = Column(Text, nullable=False, default="")
    partes = Column(JSONType, nullable=False, default=list)
    juiz_sentenciante = Column(Text, nullable=False, default="")
    ementa = Column(Text, nullable=False, default="")
    resumo_estruturado = Column(Text, nullable=False, default="")
    tags = Column(JSONType, nullable=False, default=list)
    observacao = Column(Text, nullable=False, default="")
    status = Column(SQLEnum(CaseReviewStatus), nullable=False, default=CaseReviewStatus.pending)

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    session = relationship("JudgmentSession", back_populates="cases")
    notes = relationship("CaseNote", back_populates="case", cascade="all, delete-orphan")
    votes = relationship("CaseVote", back_populates="case", cascade="all, delete-orphan")


class CaseNote(Base):
    """Reviewer annotation; at most one row per case"""
    __tablename__ = "notes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    case_id = Column(Uuid(as_uuid=True), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    note_code = Column(String(32), nullable=False)
    text = Column(Text, nullable=False, default="")
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    case = relationship("SessionCase", back_populates="notes")


class CaseVote(Base):
    """Reviewer vote; latest wins, no history"""
    __tablename__ = "votes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    case_id = Column(Uuid(as_uuid=True), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    vote_code = Column(String(32), nullable=False)
    type = Column(String(100), nullable=False)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    case = relationship("SessionCase", back_populates="votes")


class SourceDocument(Base):
    """Uploaded source document kept alongside the session it produced"""
    __tablename__ = "documents"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(Uuid(as_uuid=True), ForeignKey("sessions.id", ondelete="SET NULL"), nullable=True, index=True)
    filename = Column(String(512), nullable=False)
    mime_type = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    page_count = Column(Integer, nullable=True)
    content_hash = Column(String(16), nullable=True, index=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    session = relationship("JudgmentSession", back_populates="documents")


# ============================================================================
# Audit trail
# ============================================================================

class AuditLog(Base):
    """Append-only reviewer activity log (newest first by seq)"""
    __tablename__ = "logs"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    log_code = Column(String(32), unique=True, nullable=False)
    action = Column(String(255), nullable=False)
    details = Column(Text, nullable=False, default="")
    target_id = Column(Text, nullable=False, default="")
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, index=True)


# ============================================================================
# Key/value storage
# ============================================================================

class IdCounter(Base):
    """Persistent counter per identifier prefix (L, P, N, LOG, VC, ...)"""
    __tablename__ = "id_counters"

    prefix = Column(String(16), primary_key=True)
    value = Column(Integer, nullable=False, default=0)


class KeyValueEntry(Base):
    """
    Small local key/value store. Holds extraction cache entries
    (``cache_<hash>``) and reviewer settings (``settings_ai``).
    """
    __tablename__ = "kv_store"

    key = Column(String(255), primary_key=True)
    value = Column(JSONType, nullable=False)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
