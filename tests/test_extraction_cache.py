from sqlalchemy.exc import OperationalError

from jurispanel.db.models import KeyValueEntry
from jurispanel.db.schemas import Party
from jurispanel.services.extraction_cache import ExtractionCache, cache_key

from conftest import make_case


def test_cache_key_prefix():
    assert cache_key("2b5c4") == "cache_2b5c4"


def test_put_then_get_returns_equal_list(db):
    cache = ExtractionCache(db)
    cases = [
        make_case("P-001", 1, partes=[Party(role="Autor", name="Ana")], tags=["Tributário"]),
        make_case("P-002", 2, observacao="Vista"),
    ]
    cache.put("abc", cases)

    assert cache.get("abc") == cases


def test_miss_returns_none(db):
    assert ExtractionCache(db).get("missing") is None


def test_unreadable_entry_is_a_miss(db):
    db.add(KeyValueEntry(key=cache_key("bad"), value=[{"chamada": "not a number"}]))
    db.commit()

    assert ExtractionCache(db).get("bad") is None


def test_failed_write_is_swallowed(db, monkeypatch):
    def full_disk():
        raise OperationalError("INSERT", {}, Exception("database or disk is full"))

    monkeypatch.setattr(db, "commit", full_disk)
    cache = ExtractionCache(db)

    cache.put("abc", [make_case("P-001", 1)])

    monkeypatch.undo()
    assert cache.get("abc") is None
