"""Endpoints for the cycle dashboard table and its detail drawer.

All table operations are local view state: nothing here writes to the data
service, and the next refresh discards manual order and inline edits.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from cycleboard.dashboard.detail import DetailView
from cycleboard.dependencies import Dashboard
from cycleboard.models.base import ErrorDetail
from cycleboard.models.requests import (
    FilterRequest,
    PaginationRequest,
    ReorderRequest,
    RowEditRequest,
    SelectionRequest,
    SortSpec,
    VisibilityRequest,
)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/table")
async def get_table(view: Dashboard) -> Any:
    return view.snapshot()


@router.post("/refresh", responses={502: {"model": ErrorDetail}})
async def refresh(view: Dashboard) -> Any:
    if not await view.refresh() and view.error:
        raise HTTPException(status_code=502, detail=view.error)
    return view.snapshot()


@router.post("/reorder")
async def reorder(view: Dashboard, body: ReorderRequest) -> Any:
    view.table.reorder(body.active_id, body.over_id)
    return view.snapshot()


@router.put("/sorting")
async def set_sorting(view: Dashboard, body: list[SortSpec]) -> Any:
    view.table.set_sort([(s.column, s.descending) for s in body])
    return view.snapshot()


@router.put("/filters/{column}")
async def set_filter(column: str, view: Dashboard, body: FilterRequest) -> Any:
    view.table.set_filter(column, body.value)
    return view.snapshot()


@router.post("/columns/{column}/toggle")
async def toggle_column(column: str, view: Dashboard, body: VisibilityRequest) -> Any:
    view.table.toggle_column_visibility(column, body.visible)
    return view.snapshot()


@router.put("/selection")
async def set_selection(view: Dashboard, body: SelectionRequest) -> Any:
    view.table.set_selection(body.row_ids)
    return view.snapshot()


@router.put("/pagination")
async def set_pagination(view: Dashboard, body: PaginationRequest) -> Any:
    if body.page_size is not None:
        view.table.set_page_size(body.page_size)
    if body.page_index is not None:
        view.table.set_page(body.page_index)
    return view.snapshot()


@router.get("/rows/{row_id}", responses={404: {"model": ErrorDetail}})
async def get_row_detail(row_id: int, view: Dashboard) -> Any:
    detail = await view.open_detail(row_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Row not found")
    return detail.to_dict()


@router.patch("/rows/{row_id}", responses={404: {"model": ErrorDetail}})
async def edit_row(row_id: int, view: Dashboard, body: RowEditRequest) -> Any:
    row = view.table.get_row(row_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Row not found")

    updates = body.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    detail = DetailView(row, view.client, view.table)
    try:
        for name, value in updates.items():
            detail.set_draft(name, value)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    edited = detail.commit()
    return edited.to_dict() if edited else row.to_dict()
