"""Request options for export and delete operations."""

from typing import Any, Optional

from pydantic import Field, field_validator

from .common import CamelModel, DateRange, ExportFormat, Family


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return value


class ExportFilters(CamelModel):
    status: list[str] = Field(default_factory=list)
    category: list[str] = Field(default_factory=list)  # equipment only

    @field_validator("status", "category", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> Any:
        return _as_list(value)


class ExportOptions(CamelModel):
    data_type: Family = Family.LOANS
    format: ExportFormat = ExportFormat.CSV
    date_range: Optional[DateRange] = None
    filters: ExportFilters = Field(default_factory=ExportFilters)


class DeleteOptions(CamelModel):
    data_types: list[Family] = Field(default_factory=list)
    date_range: Optional[DateRange] = None
    create_backup: bool = True
    confirmation_phrase: str = ""
