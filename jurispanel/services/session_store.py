# jurispanel/services/session_store.py

"""
Session store: saved review sessions, their cases, notes and votes.

Lifecycle: active -> trashed -> purged (row removed); trashed -> active on
restore. Every write commits or rolls back as a whole and surfaces failures
as ``PersistenceError``; callers only update their in-memory state after a
write returns.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from jurispanel.core.logger import logger
from jurispanel.db.models import (
    CaseNote,
    CaseReviewStatus,
    CaseVote,
    JudgmentSession,
    SessionCase,
    SessionLifecycle,
    SourceDocument,
)
from jurispanel.db.schemas import CaseRecord, NoteData, Party, SessionMetadata, SessionRecord, VoteData
from jurispanel.services.document_loader import DocumentPayload
from jurispanel.utils.exceptions import PersistenceError, SessionNotFoundError
from jurispanel.utils.helpers import datetime_to_ms, ms_to_datetime

_METADATA_COLUMNS = ("orgao", "relator", "data", "tipo", "hora", "total_processos")


# ============================================================================
# Row <-> record conversion
# ============================================================================

def case_from_row(row: SessionCase) -> CaseRecord:
    note = row.notes[0] if row.notes else None
    vote = row.votes[0] if row.votes else None
    return CaseRecord(
        internal_id=row.case_code,
        content_hash=row.content_hash,
        chamada=row.chamada,
        numero_processo=row.numero_processo or "",
        classe=row.classe or "",
        partes=[Party.model_validate(p) for p in (row.partes or []) if isinstance(p, dict)],
        juiz_sentenciante=row.juiz_sentenciante or None,
        ementa=row.ementa or "",
        resumo_estruturado=row.resumo_estruturado or "",
        tags=list(row.tags or []),
        observacao=row.observacao or None,
        notes=NoteData(id=note.note_code, text=note.text, created_at=datetime_to_ms(note.created_at)) if note else None,
        voto=VoteData(id=vote.vote_code, type=vote.type, timestamp=datetime_to_ms(vote.created_at)) if vote else None,
    )


def record_from_row(row: JudgmentSession) -> SessionRecord:
    metadata = SessionMetadata(
        id=row.session_code,
        created_at=datetime_to_ms(row.created_at),
        **{name: getattr(row, name) or "" for name in _METADATA_COLUMNS},
    )
    return SessionRecord(
        id=row.session_code,
        metadata=metadata,
        cases=sorted((case_from_row(c) for c in row.cases), key=lambda c: c.chamada),
        date_saved=datetime_to_ms(row.saved_at),
        state=row.lifecycle.value,
    )


def _apply_case(row: SessionCase, case: CaseRecord) -> None:
    row.content_hash = case.content_hash
    row.chamada = case.chamada
    row.numero_processo = case.numero_processo
    row.classe = case.classe
    row.partes = [p.model_dump(mode="json") for p in case.partes]
    row.juiz_sentenciante = case.juiz_sentenciante or ""
    row.ementa = case.ementa
    row.resumo_estruturado = case.resumo_estruturado
    row.tags = list(case.tags)
    row.observacao = case.observacao or ""
    row.status = CaseReviewStatus(case.status)
    # latest wins: previous note/vote rows are orphaned and deleted
    row.notes = [
        CaseNote(note_code=case.notes.id, text=case.notes.text, created_at=ms_to_datetime(case.notes.created_at))
    ] if case.notes else []
    row.votes = [
        CaseVote(vote_code=case.voto.id, type=case.voto.type, created_at=ms_to_datetime(case.voto.timestamp))
    ] if case.voto else []


# ============================================================================
# Store
# ============================================================================

class SessionStore:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(JudgmentSession).options(
            selectinload(JudgmentSession.cases).selectinload(SessionCase.notes),
            selectinload(JudgmentSession.cases).selectinload(SessionCase.votes),
        )

    def _row(self, code: str, lifecycle: SessionLifecycle) -> JudgmentSession:
        row = (
            self._query()
            .filter(JudgmentSession.session_code == code, JudgmentSession.lifecycle == lifecycle)
            .first()
        )
        if row is None:
            raise SessionNotFoundError(code)
        return row

    def _commit(self, action: str, code: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Session store %s failed for %s: %s", action, code, e)
            raise PersistenceError(str(e)) from e

    def _link_documents(self, row: JudgmentSession, record: SessionRecord) -> None:
        hashes = {c.content_hash for c in record.cases if c.content_hash}
        if not hashes:
            return
        (
            self.db.query(SourceDocument)
            .filter(SourceDocument.session_id.is_(None), SourceDocument.content_hash.in_(hashes))
            .update({SourceDocument.session_id: row.id}, synchronize_session=False)
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, record: SessionRecord) -> SessionRecord:
        """Upsert by session code; the given cases replace the stored ones."""
        try:
            row = (
                self.db.query(JudgmentSession)
                .filter(JudgmentSession.session_code == record.id)
                .first()
            )
            if row is None:
                row = JudgmentSession(session_code=record.id)
                if record.metadata.created_at:
                    row.created_at = ms_to_datetime(record.metadata.created_at)
                self.db.add(row)

            for name in _METADATA_COLUMNS:
                setattr(row, name, getattr(record.metadata, name))
            row.lifecycle = SessionLifecycle.active
            row.trashed_at = None
            row.saved_at = ms_to_datetime(record.date_saved)

            codes = [c.internal_id for c in record.cases]
            existing = {
                c.case_code: c
                for c in self.db.query(SessionCase).filter(SessionCase.case_code.in_(codes)).all()
            } if codes else {}

            case_rows = []
            for case in record.cases:
                case_row = existing.get(case.internal_id) or SessionCase(case_code=case.internal_id)
                _apply_case(case_row, case)
                case_rows.append(case_row)
            row.cases = case_rows
            self.db.flush()
            self._link_documents(row, record)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Session save failed for %s: %s", record.id, e)
            raise PersistenceError(str(e)) from e

        self._commit("save", record.id)
        logger.info("Session %s saved with %d cases", record.id, len(record.cases))
        return self.get(record.id)

    def trash(self, code: str) -> SessionRecord:
        row = self._row(code, SessionLifecycle.active)
        row.lifecycle = SessionLifecycle.trashed
        row.trashed_at = datetime.utcnow()
        self._commit("trash", code)
        return record_from_row(row)

    def restore(self, code: str) -> SessionRecord:
        row = self._row(code, SessionLifecycle.trashed)
        row.lifecycle = SessionLifecycle.active
        row.trashed_at = None
        self._commit("restore", code)
        return record_from_row(row)

    def purge(self, code: str) -> None:
        """Permanently delete a trashed session."""
        row = self._row(code, SessionLifecycle.trashed)
        self.db.delete(row)
        self._commit("purge", code)
        logger.info("Session %s purged", code)

    def save_document(
        self,
        document: DocumentPayload,
        session_code: Optional[str] = None,
        content_hash: Optional[str] = None,
    ) -> SourceDocument:
        """
        Keep the uploaded source next to the session it produced. A document
        stored before its session exists is linked on that session's first
        save through ``content_hash``.
        """
        session_id = None
        if session_code:
            owner = self.db.query(JudgmentSession).filter(JudgmentSession.session_code == session_code).first()
            session_id = owner.id if owner else None
        row = SourceDocument(
            session_id=session_id,
            filename=document.filename or "documento",
            mime_type=document.mime_type,
            content=document.data,
            file_size=document.file_size,
            page_count=document.page_count,
            content_hash=content_hash,
        )
        self.db.add(row)
        self._commit("save_document", document.filename)
        return row

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, code: str, lifecycle: SessionLifecycle = SessionLifecycle.active) -> SessionRecord:
        return record_from_row(self._row(code, lifecycle))

    def list_active(self) -> List[SessionRecord]:
        rows = (
            self._query()
            .filter(JudgmentSession.lifecycle == SessionLifecycle.active)
            .order_by(JudgmentSession.saved_at.desc())
            .all()
        )
        return [record_from_row(r) for r in rows]

    def list_trashed(self) -> List[SessionRecord]:
        rows = (
            self._query()
            .filter(JudgmentSession.lifecycle == SessionLifecycle.trashed)
            .order_by(JudgmentSession.trashed_at.desc())
            .all()
        )
        return [record_from_row(r) for r in rows]

