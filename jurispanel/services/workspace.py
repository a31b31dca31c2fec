"""
Review workspace: the working session the reviewer is looking at.

Owns the session id, metadata, ordered case tuple and batch selection. The
case tuple is only ever replaced wholesale, so a reader never sees a half
applied batch. At most one extraction runs at a time.
"""
from __future__ import annotations

import asyncio
import logging
import threading
from typing import Optional, Sequence, Tuple

from jurispanel.db.schemas import (
    CaseRecord,
    ExtractionResponse,
    SessionMetadata,
    SessionRecord,
    WorkspaceResponse,
)
from jurispanel.services import review_service
from jurispanel.services.audit_service import AuditService
from jurispanel.services.document_loader import DocumentPayload
from jurispanel.services.extraction_pipeline import ExtractionPipeline
from jurispanel.services.id_service import SESSION_PREFIX, IdService
from jurispanel.services.session_store import SessionStore
from jurispanel.utils.exceptions import CaseNotFoundError, EmptySessionError, ExtractionInProgressError
from jurispanel.utils.helpers import now_ms

logger = logging.getLogger(__name__)


class ReviewWorkspace:
    def __init__(self) -> None:
        self.session_id: Optional[str] = None
        self.metadata: Optional[SessionMetadata] = None
        self.cases: Tuple[CaseRecord, ...] = ()
        self.batch_ids: Tuple[str, ...] = ()
        self.extraction_lock = asyncio.Lock()
        # sync handlers run on threadpool workers
        self._state_lock = threading.RLock()

    @property
    def extraction_in_progress(self) -> bool:
        return self.extraction_lock.locked()

    def _case_ids(self) -> Tuple[str, ...]:
        return tuple(c.internal_id for c in self.cases)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_cases(self, cases: Sequence[CaseRecord], metadata: Optional[SessionMetadata] = None) -> None:
        """Start a new, unsaved working session from freshly extracted cases."""
        with self._state_lock:
            metadata = metadata or SessionMetadata()
            if not metadata.total_processos:
                metadata = metadata.model_copy(update={"total_processos": str(len(cases))})
            if metadata.created_at is None:
                metadata = metadata.model_copy(update={"created_at": now_ms()})
            self.session_id = None
            self.metadata = metadata
            self.cases = tuple(sorted(cases, key=lambda c: c.chamada))
            self.batch_ids = ()

    def load_session(self, store: SessionStore, code: str, audit: AuditService) -> SessionRecord:
        record = store.get(code)
        with self._state_lock:
            self.session_id = record.id
            self.metadata = record.metadata
            self.cases = tuple(record.cases)
            self.batch_ids = ()
        audit.log("Sessão Carregada", f"Sessão {record.id} carregada com {len(record.cases)} processos", record.id)
        return record

    def new_list(self) -> None:
        with self._state_lock:
            self.session_id = None
            self.metadata = None
            self.cases = ()
            self.batch_ids = ()

    async def extract(
        self,
        pipeline: ExtractionPipeline,
        document: DocumentPayload,
        metadata: Optional[SessionMetadata] = None,
    ) -> ExtractionResponse:
        """
        Run one extraction and publish its cases as the working session.

        Raises ``ExtractionInProgressError`` if another extraction holds the
        lock. A failed run publishes nothing.
        """
        if self.extraction_lock.locked():
            raise ExtractionInProgressError()
        async with self.extraction_lock:
            cases, cache_hit, digest = await asyncio.to_thread(pipeline.run, document, metadata)
        self.load_cases(cases, metadata)
        return ExtractionResponse(
            **self.to_response().model_dump(),
            cache_hit=cache_hit,
            content_hash=digest,
        )

    # ------------------------------------------------------------------
    # Batch selection
    # ------------------------------------------------------------------

    def toggle_batch(self, case_id: str) -> Tuple[str, ...]:
        with self._state_lock:
            if case_id not in self._case_ids():
                raise CaseNotFoundError(case_id)
            if case_id in self.batch_ids:
                self.batch_ids = tuple(i for i in self.batch_ids if i != case_id)
            else:
                self.batch_ids = self.batch_ids + (case_id,)
            return self.batch_ids

    def select_all(self) -> Tuple[str, ...]:
        """Select every case, or clear the selection if all are selected."""
        with self._state_lock:
            all_ids = self._case_ids()
            if all_ids and set(self.batch_ids) == set(all_ids):
                self.batch_ids = ()
            else:
                self.batch_ids = all_ids
            return self.batch_ids

    # ------------------------------------------------------------------
    # Review transitions
    # ------------------------------------------------------------------

    def vote(self, case_id: str, vote_type: Optional[str], ids: IdService, audit: AuditService) -> None:
        with self._state_lock:
            used_batch = bool(self.batch_ids) and case_id in self.batch_ids
            self.cases = review_service.apply_vote(self.cases, case_id, vote_type, self.batch_ids, ids, audit)
            if used_batch:
                self.batch_ids = ()

    def save_note(self, case_id: str, text: str, ids: IdService, audit: AuditService) -> None:
        with self._state_lock:
            self.cases = review_service.save_note(self.cases, case_id, text, ids, audit)

    def delete_note(self, case_id: str, confirmed: bool, audit: AuditService) -> None:
        with self._state_lock:
            self.cases = review_service.delete_note(self.cases, case_id, confirmed, audit)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, store: SessionStore, ids: IdService, audit: AuditService) -> SessionRecord:
        """
        Persist the working session. The first save issues an ``L-`` id;
        later saves upsert under the same id.
        """
        with self._state_lock:
            if not self.cases:
                raise EmptySessionError()
            code = self.session_id or ids.next(SESSION_PREFIX)
            metadata = (self.metadata or SessionMetadata()).model_copy(update={"id": code})
            record = SessionRecord(
                id=code,
                metadata=metadata,
                cases=list(self.cases),
                date_saved=now_ms(),
            )
            saved = store.save(record)
            self.session_id = saved.id
            self.metadata = saved.metadata
            audit.log("Sessão Salva", f"Sessão {saved.id} salva com {len(saved.cases)} processos", saved.id)
            return saved

    def delete(self, store: SessionStore, code: str, audit: AuditService) -> SessionRecord:
        with self._state_lock:
            record = store.trash(code)
            if self.session_id == code:
                self.new_list()
        audit.log("Sessão Movida para Lixeira", f"Sessão {code} movida para a lixeira", code)
        return record

    def restore(self, store: SessionStore, code: str, audit: AuditService) -> SessionRecord:
        record = store.restore(code)
        audit.log("Sessão Restaurada", f"Sessão {code} restaurada da lixeira", code)
        return record

    def purge(self, store: SessionStore, code: str, audit: AuditService) -> None:
        store.purge(code)
        audit.log("Sessão Excluída Permanentemente", f"Sessão {code} excluída permanentemente", code)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def to_response(self) -> WorkspaceResponse:
        with self._state_lock:
            return WorkspaceResponse(
                session_id=self.session_id,
                metadata=self.metadata,
                cases=list(self.cases),
                batch_ids=list(self.batch_ids),
                extraction_in_progress=self.extraction_in_progress,
            )
