"""Shared Pydantic base models and utilities."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CycleBoardBase(BaseModel):
    """Base model with shared config for all service payload schemas.

    Unknown keys sent by the data service are ignored so the decoders keep
    working when the backend grows new fields.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class ServiceRecord(BaseModel):
    """Base for records decoded from data service responses.

    String values are kept exactly as sent: a whitespace-only note is still
    a logged note.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        extra="ignore",
    )


class ErrorDetail(BaseModel):
    detail: str
