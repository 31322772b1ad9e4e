"""Core shared models."""

import re
from datetime import date, datetime, time
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..utils.instants import ensure_utc, format_iso, value_to_datetime

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class CamelModel(BaseModel):
    """Models that travel as camelCase documents and payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _coerce_stored_instant(value: Any) -> Any:
    if value is None or isinstance(value, datetime):
        return value
    converted = value_to_datetime(value)
    return converted if converted is not None else value


# Timestamps read back from the store may be any date-like shape.
StoredInstant = Annotated[Optional[datetime], BeforeValidator(_coerce_stored_instant)]


class Family(str, Enum):
    LOANS = "loans"
    RESERVATIONS = "reservations"
    EQUIPMENT = "equipment"


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"


def _bound(value: Any, end_of_day: bool) -> Any:
    if isinstance(value, str) and _DATE_ONLY.match(value.strip()):
        value = date.fromisoformat(value.strip())
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.max if end_of_day else time.min)
    return value


class DateRange(BaseModel):
    """Inclusive on both ends. A bare date as ``end`` covers that whole day."""

    start: datetime
    end: datetime

    @field_validator("start", mode="before")
    @classmethod
    def _start_bound(cls, value: Any) -> Any:
        return _bound(value, end_of_day=False)

    @field_validator("end", mode="before")
    @classmethod
    def _end_bound(cls, value: Any) -> Any:
        return _bound(value, end_of_day=True)

    @field_validator("start", "end")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def contains(self, moment: datetime) -> bool:
        return self.start <= ensure_utc(moment) <= self.end

    def to_summary(self) -> dict[str, str]:
        return {"start": format_iso(self.start), "end": format_iso(self.end)}


class RecordRef(BaseModel):
    family: Family
    collection: str
    id: str


class CollectedRecord(RecordRef):
    """A record picked up for deletion, with its full stored data."""

    data: dict[str, Any] = Field(default_factory=dict)
