"""Endpoints for the symptom logging form."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from cycleboard.dependencies import Form
from cycleboard.errors import FormBusy, SubmitFailure, SymptomValidationError
from cycleboard.models.base import ErrorDetail
from cycleboard.models.requests import FormFieldsRequest

router = APIRouter(prefix="/symptoms", tags=["symptoms"])


@router.get("", responses={409: {"model": ErrorDetail}, 422: {"model": ErrorDetail}})
async def load_form(form: Form, on_date: date | None = Query(default=None, alias="date")) -> Any:
    try:
        await form.load(on_date)
    except FormBusy as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except SymptomValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return form.to_dict()


@router.put("/fields", responses={422: {"model": ErrorDetail}})
async def set_fields(form: Form, body: FormFieldsRequest) -> Any:
    try:
        for name, value in body.fields.items():
            form.set_field(name, value)
    except SymptomValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return form.to_dict()


@router.post(
    "/submit",
    responses={
        409: {"model": ErrorDetail},
        422: {"model": ErrorDetail},
        502: {"model": ErrorDetail},
    },
)
async def submit(form: Form) -> Any:
    try:
        outcome = await form.submit()
    except FormBusy as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except SymptomValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except SubmitFailure as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return {
        "entry_id": outcome.entry_id,
        "created": outcome.created,
        "message": outcome.message,
        "form": form.to_dict(),
    }
