"""
Per-case review transitions: vote, annotate, delete annotation.

Every function takes the current case tuple and returns a new one; records
are never mutated in place. Each transition writes one audit entry.
"""
from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

from jurispanel.db.schemas import CaseRecord, NoteData, VoteData
from jurispanel.services.audit_service import AuditService
from jurispanel.services.id_service import NOTE_PREFIX, IdService
from jurispanel.utils.exceptions import CaseNotFoundError, NoteDeletionNotConfirmedError
from jurispanel.utils.helpers import now_ms

Cases = Tuple[CaseRecord, ...]


def _find(cases: Sequence[CaseRecord], case_id: str) -> CaseRecord:
    for case in cases:
        if case.internal_id == case_id:
            return case
    raise CaseNotFoundError(case_id)


def _replace(cases: Sequence[CaseRecord], updated: CaseRecord) -> Cases:
    return tuple(updated if c.internal_id == updated.internal_id else c for c in cases)


def vote_targets(cases: Sequence[CaseRecord], target_id: str, batch_ids: Iterable[str]) -> Tuple[str, ...]:
    """The batch when it is non-empty and holds the target, else just the target."""
    _find(cases, target_id)
    batch = set(batch_ids)
    if batch and target_id in batch:
        return tuple(c.internal_id for c in cases if c.internal_id in batch)
    return (target_id,)


def apply_vote(
    cases: Sequence[CaseRecord],
    target_id: str,
    vote_type: Optional[str],
    batch_ids: Iterable[str],
    ids: IdService,
    audit: AuditService,
) -> Cases:
    """
    Vote ``vote_type`` on the target (or its batch). ``None`` clears.

    One vote id and one timestamp are shared by every affected case.
    """
    targets = set(vote_targets(cases, target_id, batch_ids))
    vote_id = ids.next_vote(vote_type)
    timestamp = now_ms()
    voto = VoteData(id=vote_id, type=vote_type, timestamp=timestamp) if vote_type is not None else None

    updated = tuple(
        c.model_copy(update={"voto": voto}) if c.internal_id in targets else c
        for c in cases
    )
    affected = [c.internal_id for c in cases if c.internal_id in targets]
    audit.log(
        "Voto Registrado",
        f"Voto {vote_type if vote_type is not None else 'Removido'} para {len(affected)} processos",
        ",".join(affected),
    )
    return updated


def save_note(
    cases: Sequence[CaseRecord],
    case_id: str,
    text: str,
    ids: IdService,
    audit: AuditService,
) -> Cases:
    case = _find(cases, case_id)
    existing = case.notes
    note = NoteData(
        id=existing.id if existing else ids.next(NOTE_PREFIX),
        text=text,
        created_at=now_ms(),
    )
    audit.log(
        "Anotação Atualizada" if existing else "Anotação Criada",
        f"Anotação {note.id} no processo {case.numero_processo or case_id}",
        case_id,
    )
    return _replace(cases, case.model_copy(update={"notes": note}))


def delete_note(
    cases: Sequence[CaseRecord],
    case_id: str,
    confirmed: bool,
    audit: AuditService,
) -> Cases:
    case = _find(cases, case_id)
    if not confirmed:
        raise NoteDeletionNotConfirmedError(case_id)
    if case.notes is None:
        return tuple(cases)
    audit.log(
        "Anotação Excluída",
        f"Anotação {case.notes.id} removida do processo {case.numero_processo or case_id}",
        case_id,
    )
    return _replace(cases, case.model_copy(update={"notes": None}))
