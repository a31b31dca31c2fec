import pytest
from sqlalchemy.exc import OperationalError

from jurispanel.db.models import CaseNote, CaseVote, JudgmentSession, SessionCase, SourceDocument
from jurispanel.db.schemas import NoteData, SessionMetadata, SessionRecord, VoteData
from jurispanel.services.document_loader import text_document
from jurispanel.services.session_store import SessionStore
from jurispanel.utils.exceptions import PersistenceError, SessionNotFoundError

from conftest import make_case


def record(code="L-001", cases=None, **metadata):
    return SessionRecord(
        id=code,
        metadata=SessionMetadata(id=code, created_at=1_700_000_000_000, **metadata),
        cases=cases if cases is not None else [make_case("P-001", 1), make_case("P-002", 2)],
        date_saved=1_700_000_100_000,
    )


def test_save_twice_upserts_one_row(db):
    store = SessionStore(db)
    store.save(record(orgao="1ª Turma", cases=[make_case("P-001", 1), make_case("P-002", 2), make_case("P-003", 3)]))
    saved = store.save(record(orgao="2ª Turma", cases=[make_case("P-002", 2, classe="Agravo"), make_case("P-004", 4)]))

    assert db.query(JudgmentSession).count() == 1
    assert saved.metadata.orgao == "2ª Turma"
    assert [c.internal_id for c in saved.cases] == ["P-002", "P-004"]
    assert saved.cases[0].classe == "Agravo"
    assert db.query(SessionCase).count() == 2


def test_round_trip_preserves_case_fields(db):
    case = make_case(
        "P-001", 1,
        content_hash="2b5c4",
        tags=["Tributário", "ICMS"],
        observacao="Vista",
        notes=NoteData(id="N-001", text="ver voto", created_at=1_700_000_000_123),
        voto=VoteData(id="VC-001", type="Concordo", timestamp=1_700_000_000_456),
    )
    saved = SessionStore(db).save(record(cases=[case], relator="Des. Fulano"))

    assert saved.cases == [case]
    assert saved.cases[0].status == "reviewed"
    assert saved.metadata.relator == "Des. Fulano"
    assert saved.metadata.created_at == 1_700_000_000_000
    assert saved.date_saved == 1_700_000_100_000


def test_latest_note_and_vote_replace_previous_rows(db):
    store = SessionStore(db)
    store.save(record(cases=[make_case(
        "P-001", 1,
        notes=NoteData(id="N-001", text="a", created_at=1),
        voto=VoteData(id="VC-001", type="Concordo", timestamp=1),
    )]))
    store.save(record(cases=[make_case(
        "P-001", 1,
        notes=NoteData(id="N-001", text="b", created_at=2),
        voto=VoteData(id="VD-001", type="Discordo", timestamp=2),
    )]))

    assert db.query(CaseNote).count() == 1
    assert db.query(CaseVote).count() == 1
    assert store.get("L-001").cases[0].voto.type == "Discordo"


def test_trash_restore_purge_lifecycle(db):
    store = SessionStore(db)
    store.save(record("L-001"))
    store.save(record("L-002", cases=[make_case("P-003", 1), make_case("P-004", 2)]))

    trashed = store.trash("L-001")
    assert trashed.state == "trashed"
    assert [s.id for s in store.list_active()] == ["L-002"]
    assert [s.id for s in store.list_trashed()] == ["L-001"]

    store.restore("L-001")
    assert {s.id for s in store.list_active()} == {"L-001", "L-002"}
    assert store.list_trashed() == []

    store.trash("L-002")
    store.purge("L-002")
    assert store.list_trashed() == []
    assert db.query(JudgmentSession).count() == 1
    assert db.query(SessionCase).count() == 2


def test_purge_requires_trashed_session(db):
    store = SessionStore(db)
    store.save(record("L-001"))

    with pytest.raises(SessionNotFoundError):
        store.purge("L-001")
    with pytest.raises(SessionNotFoundError):
        store.restore("L-001")


def test_unknown_session(db):
    with pytest.raises(SessionNotFoundError):
        SessionStore(db).get("L-404")


def test_commit_failure_raises_persistence_error(db, monkeypatch):
    store = SessionStore(db)
    store.save(record("L-001"))

    def fail():
        raise OperationalError("UPDATE", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", fail)
    with pytest.raises(PersistenceError):
        store.trash("L-001")

    monkeypatch.undo()
    assert [s.id for s in store.list_active()] == ["L-001"]


def test_save_document_links_session(db):
    store = SessionStore(db)
    store.save(record("L-001"))

    row = store.save_document(text_document("PAUTA", filename="pauta.txt"), "L-001")

    assert row.filename == "pauta.txt"
    assert row.session.session_code == "L-001"
    assert db.query(SourceDocument).count() == 1


def test_document_kept_before_save_is_linked_by_hash(db):
    store = SessionStore(db)
    document = store.save_document(text_document("PAUTA", filename="pauta.txt"), content_hash="5a1b")
    assert document.session_id is None

    store.save(record("L-001", cases=[make_case("P-001", 1, content_hash="5a1b"), make_case("P-002", 2)]))

    db.refresh(document)
    assert document.content_hash == "5a1b"
    assert document.session.session_code == "L-001"
