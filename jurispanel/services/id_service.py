"""
Identifier service: issues human-readable, per-prefix sequential ids.

    L-001    saved session
    P-001    case record
    N-001    note
    VC-001   vote (prefix depends on vote type)
    LOG-001  audit log entry

Counters are monotonic for the lifetime of the backing store. There is no
coordination between independent stores.
"""
from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jurispanel.db.models import IdCounter

SESSION_PREFIX = "L"
CASE_PREFIX = "P"
NOTE_PREFIX = "N"
LOG_PREFIX = "LOG"
CLEARED_VOTE_PREFIX = "VX"

VOTE_PREFIXES: Dict[str, str] = {
    "Concordo": "VC",
    "Concordo em Parte": "VP",
    "Discordo": "VD",
    "Destaque": "VDE",
    "Vista": "VV",
}


def vote_prefix(vote_type: Optional[str]) -> str:
    """Prefix for a vote id; clearing a vote (``None``) uses ``VX``."""
    if vote_type is None:
        return CLEARED_VOTE_PREFIX
    return VOTE_PREFIXES.get(vote_type, "VO")


def format_id(prefix: str, value: int) -> str:
    return f"{prefix}-{value:03d}"


class CounterStore(Protocol):
    def increment(self, prefix: str) -> int:
        """Atomically bump the counter for *prefix* and return the new value."""
        ...


class InMemoryCounterStore:
    def __init__(self, initial: Optional[Dict[str, int]] = None) -> None:
        self.values: Dict[str, int] = dict(initial or {})
        self._lock = threading.Lock()

    def increment(self, prefix: str) -> int:
        with self._lock:
            self.values[prefix] = self.values.get(prefix, 0) + 1
            return self.values[prefix]


class SqlCounterStore:
    """
    Counters in the ``id_counters`` table, bumped in the caller's transaction.

    The bump is a single ``UPDATE ... SET value = value + 1 RETURNING value``,
    so two sessions never read the same value. The first use of a prefix
    inserts its row inside a savepoint; losing that insert race falls back to
    the update.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def increment(self, prefix: str) -> int:
        bump = (
            update(IdCounter)
            .where(IdCounter.prefix == prefix)
            .values(value=IdCounter.value + 1)
            .returning(IdCounter.value)
            .execution_options(synchronize_session=False)
        )
        value = self.db.execute(bump).scalar_one_or_none()
        if value is not None:
            return int(value)
        try:
            with self.db.begin_nested():
                self.db.add(IdCounter(prefix=prefix, value=1))
            return 1
        except IntegrityError:
            return int(self.db.execute(bump).scalar_one())


class IdService:
    def __init__(self, store: CounterStore) -> None:
        self.store = store

    def next(self, prefix: str) -> str:
        return format_id(prefix, self.store.increment(prefix))

    def next_vote(self, vote_type: Optional[str]) -> str:
        return self.next(vote_prefix(vote_type))
