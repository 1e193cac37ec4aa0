from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    # naive UTC, matching what SQLite hands back
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso(value):
    return value.isoformat() if value is not None else None


# SQLite INTEGER is a signed 64-bit value; larger ids cannot name a row
MAX_INT = 2**63 - 1


def fits_int(value: int) -> bool:
    return -MAX_INT - 1 <= value <= MAX_INT
