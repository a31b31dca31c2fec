# jurispanel/services/audit_service.py

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jurispanel.core.config import settings
from jurispanel.core.logger import logger
from jurispanel.db.models import AuditLog
from jurispanel.db.schemas import LogEntry
from jurispanel.services.id_service import LOG_PREFIX, IdService, SqlCounterStore
from jurispanel.utils.helpers import datetime_to_ms, ms_to_datetime, now_ms


class AuditService:
    """
    Append-only audit trail of reviewer actions.
    Newest entries first; rows beyond the retention cap are dropped oldest-first.
    """

    def __init__(self, db: Session, ids: Optional[IdService] = None, retention: Optional[int] = None):
        self.db = db
        self.ids = ids or IdService(SqlCounterStore(db))
        self.retention = max(1, int(retention or settings.AUDIT_LOG_RETENTION))

    def log(self, action: str, details: str, target_id: Optional[str] = None) -> LogEntry:
        """
        Record one action. Failures are logged, never raised.

        The log row and the retention trim run in a savepoint, so a failed
        write only undoes the log row. Ids already issued in this unit of
        work (including this entry's) stay committed and are never reissued.
        """
        entry = LogEntry(
            id=self.ids.next(LOG_PREFIX),
            timestamp=now_ms(),
            action=action,
            details=details,
            target_id=target_id,
        )
        try:
            with self.db.begin_nested():
                self.db.add(AuditLog(
                    log_code=entry.id,
                    action=entry.action,
                    details=entry.details,
                    target_id=entry.target_id or "",
                    created_at=ms_to_datetime(entry.timestamp),
                ))
                self.db.flush()
                self._enforce_retention()
        except SQLAlchemyError as e:
            logger.error("Failed to write audit log %s (%s): %s", entry.id, action, e)

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to commit audit log %s (%s): %s", entry.id, action, e)
        return entry

    def _enforce_retention(self) -> None:
        cutoff = (
            self.db.query(AuditLog.seq)
            .order_by(AuditLog.seq.desc())
            .offset(self.retention)
            .limit(1)
            .scalar()
        )
        if cutoff is not None:
            self.db.query(AuditLog).filter(AuditLog.seq <= cutoff).delete(synchronize_session=False)

    def list_logs(self, limit: Optional[int] = None) -> List[LogEntry]:
        limit = min(int(limit or self.retention), self.retention)
        rows = (
            self.db.query(AuditLog)
            .order_by(AuditLog.seq.desc())
            .limit(limit)
            .all()
        )
        return [
            LogEntry(
                id=row.log_code,
                timestamp=datetime_to_ms(row.created_at),
                action=row.action,
                details=row.details,
                target_id=row.target_id or None,
            )
            for row in rows
        ]
