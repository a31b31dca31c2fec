"""
Extraction cache: content hash -> previously extracted case list.

Entries live in the ``kv_store`` table under ``cache_<hash>``. Writes are
best-effort: a failed write is logged and dropped so extraction still
succeeds.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jurispanel.db.models import KeyValueEntry
from jurispanel.db.schemas import CaseRecord

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "cache_"


def cache_key(digest: str) -> str:
    return f"{CACHE_KEY_PREFIX}{digest}"


class ExtractionCache:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, digest: str) -> Optional[List[CaseRecord]]:
        row = self.db.get(KeyValueEntry, cache_key(digest))
        if row is None:
            return None
        try:
            return [CaseRecord.model_validate(item) for item in row.value or []]
        except (ValidationError, TypeError) as exc:
            logger.warning("Discarding unreadable cache entry %s: %s", cache_key(digest), exc)
            return None

    def put(self, digest: str, cases: List[CaseRecord]) -> None:
        key = cache_key(digest)
        payload = [c.model_dump(mode="json", by_alias=True) for c in cases]
        try:
            row = self.db.get(KeyValueEntry, key)
            if row is None:
                self.db.add(KeyValueEntry(key=key, value=payload))
            else:
                row.value = payload
            self.db.commit()
            logger.info("Cached %d cases under %s", len(cases), key)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("Extraction cache write failed for %s: %s", key, exc)
