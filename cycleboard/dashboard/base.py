"""Display models for the cycle dashboard.

``DisplayRow`` is the reconciled, UI-ready representation of one daily
entry joined with its hormone sample.  Rows are immutable; local edits and
reorders produce new rows / new orderings rather than mutating in place.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum

NOT_AVAILABLE = "N/A"
UNKNOWN_PHASE = "Unknown"
NO_SYMPTOMS = "None"


class RowStatus(str, Enum):
    """Logging status of a row.

    Derived from symptom presence on every fetch.  A persisted review
    workflow would add members here.
    """

    DONE = "Done"
    PENDING = "Pending"


class Reviewer(str, Enum):
    """Reviewer placeholder.

    The data service has no reviewer assignment yet, so every fetched row
    starts ``UNASSIGNED``.  A locally assigned reviewer is stored as the
    plain name string instead.
    """

    UNASSIGNED = "Assign reviewer"


@dataclass(frozen=True)
class DisplayRow:
    """One dashboard row.

    Attributes:
        id:                 Daily entry id; stable across fetches and reorders.
        cycle_day:          ``"Day {n}"`` label.
        phase:              Parent cycle phase, or ``"Unknown"``.
        status:             Done when any summary symptom is present.
        estrogen_level:     Two-decimal estradiol string, or ``"N/A"``.
        progesterone_level: Two-decimal progesterone string, or ``"N/A"``.
        symptoms:           Comma-joined symptom summary, or ``"None"``.
        reviewer:           ``Reviewer.UNASSIGNED`` or an assigned name.
    """

    id: int
    cycle_day: str
    phase: str
    status: RowStatus
    estrogen_level: str
    progesterone_level: str
    symptoms: str
    reviewer: Reviewer | str = Reviewer.UNASSIGNED

    @property
    def is_assigned(self) -> bool:
        return self.reviewer != Reviewer.UNASSIGNED

    def cell(self, column_id: str) -> str:
        """Return the display text for ``column_id`` ("" for non-data columns)."""
        value = getattr(self, column_id, "")
        if isinstance(value, Enum):
            return value.value
        return str(value)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        data["reviewer"] = self.cell("reviewer")
        return data


@dataclass(frozen=True)
class ChartPoint:
    """One point of the detail-view hormone chart."""

    day: str
    estrogen: float
    progesterone: float
