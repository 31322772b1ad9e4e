"""Date-like values found in stored records.

Stored documents carry instants in three shapes: native ``datetime`` objects,
store timestamps (seconds + nanoseconds since the epoch, also seen serialized
as ``{"seconds": ..., "nanoseconds": ...}``) and ISO-8601 strings. ``classify``
is the only place that inspects raw values; everything else works on the
tagged ``Instant`` union.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Mapping, Optional, Union

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, order=True)
class StoreTimestamp:
    seconds: int
    nanos: int = 0

    @classmethod
    def from_datetime(cls, dt: datetime) -> "StoreTimestamp":
        delta = ensure_utc(dt) - EPOCH
        return cls(
            seconds=delta.days * 86400 + delta.seconds,
            nanos=delta.microseconds * 1000,
        )

    @classmethod
    def now(cls) -> "StoreTimestamp":
        return cls.from_datetime(datetime.now(tz=timezone.utc))

    def to_datetime(self) -> datetime:
        return EPOCH + timedelta(seconds=self.seconds, microseconds=self.nanos // 1000)


@dataclass(frozen=True)
class NativeInstant:
    value: datetime


@dataclass(frozen=True)
class IsoString:
    text: str


Instant = Union[NativeInstant, StoreTimestamp, IsoString]


class _ServerTimestamp:
    """Placeholder replaced with the store's clock when a write is applied."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


def classify(value: Any) -> Optional[Instant]:
    """Tag a raw value, or return None if it is not date-like."""
    if isinstance(value, StoreTimestamp):
        return value
    if isinstance(value, datetime):
        return NativeInstant(value)
    if isinstance(value, date):
        return NativeInstant(datetime.combine(value, time.min))
    if isinstance(value, str):
        return IsoString(value) if value.strip() else None
    if isinstance(value, Mapping):
        seconds = value.get("seconds")
        if isinstance(seconds, int) and not isinstance(seconds, bool):
            nanos = value.get("nanoseconds", value.get("nanos", 0))
            return StoreTimestamp(seconds, int(nanos or 0))
    return None


def to_datetime(instant: Instant) -> Optional[datetime]:
    if isinstance(instant, NativeInstant):
        return ensure_utc(instant.value)
    if isinstance(instant, StoreTimestamp):
        return instant.to_datetime()
    if isinstance(instant, IsoString):
        return parse_iso(instant.text)
    raise TypeError(f"Not an instant: {instant!r}")


def value_to_datetime(value: Any) -> Optional[datetime]:
    instant = classify(value)
    return to_datetime(instant) if instant is not None else None


def to_instant(value: Any) -> Optional[str]:
    """Canonical ISO-8601 string for any date-like value, else None."""
    dt = value_to_datetime(value)
    return format_iso(dt) if dt is not None else None


def parse_iso(text: str) -> Optional[datetime]:
    text = text.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def format_iso(dt: datetime) -> str:
    return ensure_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def ensure_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def days_from_now(days: int) -> StoreTimestamp:
    return StoreTimestamp.from_datetime(datetime.now(tz=timezone.utc) + timedelta(days=days))


def from_epoch_millis(value: Union[int, float]) -> Optional[datetime]:
    """Milliseconds since the epoch, as JSON imports carry them; None if out of range."""
    try:
        return EPOCH + timedelta(milliseconds=value)
    except (OverflowError, ValueError):
        return None
