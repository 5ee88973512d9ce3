from datetime import datetime, timezone


class SystemClock:
    """Source of the current time; swapped for a fixed clock in tests."""

    def utc_now(self) -> datetime:
        return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Return *value* as an aware UTC datetime.

    SQLite drops the offset of ``DateTime(timezone=True)`` columns, so
    naive values read back from the database are taken to be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


clock = SystemClock()
