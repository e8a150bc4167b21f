"""Pydantic models for the data service payloads: cycles, daily entries,
the per-cycle hormone series, and the symptom payload written by the form."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from cycleboard.models.base import CycleBoardBase, ServiceRecord


# ---------- Enums ----------

class CervicalMucus(str, Enum):
    none = "none"
    sticky = "sticky"
    watery = "watery"
    egg_white = "egg-white"
    creamy = "creamy"
    atypical = "atypical"


# ---------- Cycles ----------

class Cycle(ServiceRecord):
    id: int | None = None
    start_date: date | None = None
    phase: str | None = None


# ---------- Daily entries ----------

class DailyEntry(ServiceRecord):
    """One day's logged observations as returned by ``GET /daily-entries/``."""

    id: int
    date: date
    cycle: Cycle | None = None
    cramps: int | None = None
    bloating: int | None = None
    tender_breasts: int | None = None
    headache: int | None = None
    acne: int | None = None
    mood: int | None = None
    stress: int | None = None
    energy: int | None = None
    cervical_mucus: str | None = None
    sleep_quality: int | None = None
    libido: int | None = None
    notes: str | None = None

    @field_validator("cycle", mode="before")
    @classmethod
    def _cycle_reference(cls, value: Any) -> Any:
        # Some serializers send the parent cycle as a bare primary key.
        if isinstance(value, int) and not isinstance(value, bool):
            return {"id": value}
        return value


class EntryPage(ServiceRecord):
    """Paginated list envelope (``{"results": [...]}``)."""

    results: list[DailyEntry] = Field(default_factory=list)
    count: int | None = None


class EntryCreated(ServiceRecord):
    id: int


# ---------- Hormone series ----------

class HormoneSeries(ServiceRecord):
    """Day-indexed estradiol/progesterone levels for the active cycle.

    ``days[i]`` labels ``estradiol[i]`` and ``progesterone[i]``; the three
    lists must be the same length.
    """

    days: list[int]
    estradiol: list[float]
    progesterone: list[float]

    @model_validator(mode="after")
    def _aligned(self) -> "HormoneSeries":
        n = len(self.days)
        if len(self.estradiol) != n or len(self.progesterone) != n:
            raise ValueError(
                "hormone series is not aligned: "
                f"days={n}, estradiol={len(self.estradiol)}, "
                f"progesterone={len(self.progesterone)}"
            )
        return self


# ---------- Symptom payload ----------

class SymptomPayload(CycleBoardBase):
    """Full symptom payload sent on both create and update."""

    date: date
    cramps: int = Field(default=0, ge=0, le=5)
    bloating: int = Field(default=0, ge=0, le=5)
    tender_breasts: int = Field(default=0, ge=0, le=5)
    headache: int = Field(default=0, ge=0, le=5)
    acne: int = Field(default=0, ge=0, le=5)
    mood: int = Field(default=3, ge=0, le=5)
    stress: int = Field(default=0, ge=0, le=5)
    energy: int = Field(default=3, ge=0, le=5)
    cervical_mucus: CervicalMucus = CervicalMucus.none
    sleep_quality: int = Field(default=3, ge=0, le=5)
    libido: int = Field(default=2, ge=0, le=5)
    notes: str = ""
