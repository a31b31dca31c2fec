"""
Utility helper functions
"""
from datetime import datetime, timezone
import time


def now_ms() -> int:
    """Current time as epoch milliseconds"""
    return int(time.time() * 1000)


def ms_to_datetime(ms: int) -> datetime:
    """Epoch milliseconds to a naive UTC datetime (the column convention)"""
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).replace(tzinfo=None)


def datetime_to_ms(value: datetime | None) -> int:
    """Naive UTC datetime to epoch milliseconds"""
    if value is None:
        return 0
    return int(round(value.replace(tzinfo=timezone.utc).timestamp() * 1000))


def truncate_text(text: str, length: int = 100) -> str:
    """Truncate text to specified length"""
    if len(text) <= length:
        return text
    return text[:length]


def mask_secret(value: str, visible: int = 4) -> str:
    """Mask an API key, keeping the last few characters"""
    if not value:
        return ""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]
