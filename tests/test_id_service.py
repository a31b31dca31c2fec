import pytest

from jurispanel.services.id_service import (
    CASE_PREFIX,
    IdService,
    InMemoryCounterStore,
    SqlCounterStore,
    format_id,
    vote_prefix,
)


def test_format_pads_to_three_digits():
    assert format_id("P", 7) == "P-007"
    assert format_id("LOG", 42) == "LOG-042"


def test_counter_grows_past_three_digits():
    ids = IdService(InMemoryCounterStore({"P": 999}))
    assert ids.next("P") == "P-1000"


def test_successive_ids_have_no_gaps(ids):
    suffixes = [int(ids.next(CASE_PREFIX).split("-")[1]) for _ in range(25)]
    assert suffixes == list(range(1, 26))


def test_prefixes_are_independent(ids):
    assert ids.next("P") == "P-001"
    assert ids.next("N") == "N-001"
    assert ids.next("P") == "P-002"


@pytest.mark.parametrize(
    "vote_type,prefix",
    [
        ("Concordo", "VC"),
        ("Concordo em Parte", "VP"),
        ("Discordo", "VD"),
        ("Destaque", "VDE"),
        ("Vista", "VV"),
        ("Abstenção", "VO"),
        (None, "VX"),
    ],
)
def test_vote_prefixes(vote_type, prefix):
    assert vote_prefix(vote_type) == prefix


def test_next_vote_uses_type_prefix(ids):
    assert ids.next_vote("Destaque") == "VDE-001"
    assert ids.next_vote(None) == "VX-001"


def test_sql_counters_survive_new_service_instances(db):
    first = IdService(SqlCounterStore(db))
    assert first.next("L") == "L-001"
    assert first.next("L") == "L-002"
    db.commit()

    second = IdService(SqlCounterStore(db))
    assert second.next("L") == "L-003"


def test_sql_counters_never_repeat_across_open_sessions(session_factory):
    first, second = session_factory(), session_factory()
    try:
        a = IdService(SqlCounterStore(first))
        b = IdService(SqlCounterStore(second))
        issued = [a.next("VC"), b.next("VC"), a.next("VC"), b.next("VC")]
    finally:
        first.close()
        second.close()

    assert issued == ["VC-001", "VC-002", "VC-003", "VC-004"]
