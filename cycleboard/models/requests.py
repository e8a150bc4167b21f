"""Request bodies accepted by the CycleBoard HTTP app."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from cycleboard.models.base import CycleBoardBase


class ReorderRequest(CycleBoardBase):
    active_id: int
    over_id: int


class SortSpec(CycleBoardBase):
    column: str
    descending: bool = False


class FilterRequest(CycleBoardBase):
    value: str | None = None


class VisibilityRequest(CycleBoardBase):
    visible: bool | None = None  # None flips the current state


class SelectionRequest(CycleBoardBase):
    row_ids: list[int] = Field(default_factory=list)


class PaginationRequest(CycleBoardBase):
    page_index: int | None = None
    page_size: int | None = None


class RowEditRequest(CycleBoardBase):
    symptoms: str | None = None
    estrogen_level: str | None = None
    progesterone_level: str | None = None
    reviewer: str | None = None


class FormFieldsRequest(CycleBoardBase):
    fields: dict[str, Any] = Field(default_factory=dict)
