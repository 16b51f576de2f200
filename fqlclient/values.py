"""Value types carried by the tagged wire format.

DateStub and TimeStub keep the server's canonical text instead of converting
eagerly to ``datetime``: the server accepts years outside Python's
``datetime`` range and nanosecond precision, so the text is the only lossless
form. Convert explicitly with ``to_date()`` / ``to_datetime()``.

Usage:
    from fqlclient.values import DateStub, TimeStub

    d = DateStub.from_string("2023-03-09")
    t = TimeStub.from_datetime(datetime.now(timezone.utc))
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone

from fqlclient.errors import DateTimeFormatError, DocumentFormatError

# =============================================================================
# ISO-8601 GRAMMAR
# =============================================================================

_YEAR = r"(?:\d{4}|[−-]\d{4,}|\+\d{5,})"
_MONTH = r"(?:0[1-9]|1[0-2])"
_DAY = r"(?:0[1-9]|[12]\d|3[01])"
_HOUR = r"(?:[01][0-9]|2[0-3])"
_MINSEC = r"(?:[0-5][0-9])"
_DECIMAL = r"(?:\.\d+)"

_DATE_PART = rf"({_YEAR}-({_MONTH})-({_DAY}))"
_TIME_PART = rf"({_HOUR}:{_MINSEC}:{_MINSEC}{_DECIMAL}?)"
_ZONE_PART = rf"([zZ]|[+−-]{_HOUR}(?::?{_MINSEC}|:{_MINSEC}:{_MINSEC}))"

PLAIN_DATE = re.compile(rf"^{_DATE_PART}$")
DATE_TIME = re.compile(rf"^{_DATE_PART}T{_TIME_PART}{_ZONE_PART}$")

def _require_str(value: object) -> str:
    if not isinstance(value, str):
        raise TypeError(
            f"Expected string but received {type(value).__name__}: {value!r}"
        )
    return value


# =============================================================================
# REFERENCES
# =============================================================================

class Module(str):
    """Reference to a built-in or user-defined module, e.g. ``Date`` or a
    collection name."""

    def __repr__(self) -> str:
        return f"Module({str.__repr__(self)})"


@dataclass(frozen=True)
class DocumentReference:
    """Reference to a stored document: collection plus id."""
    coll: str
    id: str

    @classmethod
    def from_string(cls, value: str) -> "DocumentReference":
        """Parse the ``Coll:id`` form; splits on the first colon only."""
        coll, sep, doc_id = value.partition(":")
        if not sep:
            raise DocumentFormatError(f"Expected 'collection:id' but received '{value}'")
        return cls(coll=Module(coll), id=doc_id)


# =============================================================================
# DATE / TIME
# =============================================================================

@dataclass(frozen=True)
class DateStub:
    """A calendar date with no time component (``YYYY-MM-DD``).

    Raises:
        TypeError: If date_string is not a str.
        DateTimeFormatError: If it does not match the plain date grammar.
    """
    date_string: str

    def __post_init__(self) -> None:
        _require_str(self.date_string)
        if PLAIN_DATE.match(self.date_string) is None:
            raise DateTimeFormatError(
                f"Expected a plain date string but received '{self.date_string}'"
            )

    @classmethod
    def from_string(cls, date_string: str) -> "DateStub":
        """Validate and wrap a plain date string."""
        return cls(date_string)

    @classmethod
    def from_date(cls, value: date) -> "DateStub":
        """Build from a ``date``; a ``datetime`` is truncated to its UTC date."""
        if isinstance(value, datetime):
            value = _as_utc(value).date()
        return cls(value.isoformat())

    def to_date(self) -> date:
        try:
            return date.fromisoformat(self.date_string)
        except ValueError as e:
            raise DateTimeFormatError(
                f"Date '{self.date_string}' could not be converted to a Python date"
            ) from e

    def __str__(self) -> str:
        return self.date_string

    def __repr__(self) -> str:
        return f'DateStub("{self.date_string}")'


@dataclass(frozen=True)
class TimeStub:
    """An instant in time as a full ISO-8601 timestamp with zone.

    Raises:
        TypeError: If iso_string is not a str.
        DateTimeFormatError: If it does not match the date-time grammar.
    """
    iso_string: str

    def __post_init__(self) -> None:
        _require_str(self.iso_string)
        if DATE_TIME.match(self.iso_string) is None:
            raise DateTimeFormatError(
                f"Expected an ISO date string but received '{self.iso_string}'"
            )

    @classmethod
    def from_string(cls, iso_string: str) -> "TimeStub":
        """Validate and wrap an ISO-8601 timestamp."""
        return cls(iso_string)

    @classmethod
    def from_datetime(cls, value: datetime) -> "TimeStub":
        """Normalize a ``datetime`` to a UTC instant. Naive values are UTC."""
        text = _as_utc(value).isoformat().replace("+00:00", "Z")
        return cls(text)

    def to_datetime(self) -> datetime:
        # fromisoformat on 3.10 only takes 3 or 6 fraction digits and ±HH:MM zones
        match = DATE_TIME.match(self.iso_string.replace("−", "-"))
        date_part, time_part, zone = match.group(1), match.group(4), match.group(5)
        hms, _, fraction = time_part.partition(".")
        if fraction:
            hms = f"{hms}.{fraction[:6].ljust(6, '0')}"
        if zone in ("z", "Z"):
            zone = "+00:00"
        elif len(zone) == 5:
            zone = f"{zone[:3]}:{zone[3:]}"
        try:
            return datetime.fromisoformat(f"{date_part}T{hms}{zone}")
        except ValueError as e:
            raise DateTimeFormatError(
                f"Time '{self.iso_string}' could not be converted to a Python datetime"
            ) from e

    def __str__(self) -> str:
        return self.iso_string

    def __repr__(self) -> str:
        return f'TimeStub("{self.iso_string}")'


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


__all__ = [
    "DATE_TIME",
    "PLAIN_DATE",
    "DateStub",
    "DocumentReference",
    "Module",
    "TimeStub",
]
