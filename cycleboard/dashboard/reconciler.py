"""Join daily entries with the active cycle's hormone series.

``reconcile()`` is a pure function: the same entries and series always
produce the same rows, in the same order as the entries were fetched.

Hormone join key
----------------
The hormone sample for the entry at list position ``i`` is the one whose
``days`` value equals ``i + 1``.  The key is the entry's *position in the
fetched list*, not its computed cycle day or calendar date.  If the service
returns entries out of date order, with gaps, or covering a different span
than the series, levels land on the wrong rows.  Existing dashboards and
fixtures depend on this join, so it is kept as is.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal

from cycleboard.dashboard.base import (
    NO_SYMPTOMS,
    NOT_AVAILABLE,
    UNKNOWN_PHASE,
    DisplayRow,
    Reviewer,
    RowStatus,
)
from cycleboard.dashboard.config_loader import get_table_config
from cycleboard.models.entries import DailyEntry, HormoneSeries

logger = logging.getLogger("cycleboard.dashboard.reconciler")

_CENTS = Decimal("0.01")


def reconcile(
    entries: Sequence[DailyEntry],
    series: HormoneSeries,
    summary_fields: Mapping[str, str] | None = None,
) -> list[DisplayRow]:
    """Build one DisplayRow per entry.

    Args:
        entries:        Daily entries in fetched order.
        series:         Hormone series for the active cycle.
        summary_fields: Ordered field → label map for the symptom summary.
                        Defaults to the table config.

    Returns:
        Rows in the same order as ``entries``.  No sorting or filtering.
    """
    fields = summary_fields if summary_fields is not None else get_table_config().summary_fields
    day_index = _first_index_by_day(series.days)

    rows = []
    for i, entry in enumerate(entries):
        summary = summarize_symptoms(entry, fields)
        estrogen, progesterone = _levels_at(series, day_index.get(i + 1))
        rows.append(
            DisplayRow(
                id=entry.id,
                cycle_day=cycle_day_label(entry, i),
                phase=(entry.cycle.phase if entry.cycle else None) or UNKNOWN_PHASE,
                status=RowStatus.DONE if summary else RowStatus.PENDING,
                estrogen_level=estrogen,
                progesterone_level=progesterone,
                symptoms=summary or NO_SYMPTOMS,
                reviewer=Reviewer.UNASSIGNED,
            )
        )

    unmatched = sum(1 for r in rows if r.estrogen_level == NOT_AVAILABLE)
    if unmatched:
        logger.debug(
            "%d of %d rows have no hormone sample (series covers %d days)",
            unmatched, len(rows), len(series.days),
        )
    return rows


def cycle_day_label(entry: DailyEntry, index: int) -> str:
    """``Day {n}`` from the cycle start date, else ``Day {index + 1}``.

    ``n`` is the whole number of days since the cycle start, 1-indexed, so
    the start date itself is day 1.
    """
    start = entry.cycle.start_date if entry.cycle else None
    if start is not None:
        return f"Day {(entry.date - start).days + 1}"
    return f"Day {index + 1}"


def summarize_symptoms(entry: DailyEntry, fields: Mapping[str, str]) -> str:
    """Comma-joined ``"Label: value"`` fragments for every truthy field.

    Zero, empty and missing values are skipped.  Returns ``""`` when no
    field contributes.
    """
    parts = []
    for name, label in fields.items():
        value = getattr(entry, name, None)
        if value:
            parts.append(f"{label}: {value}")
    return ", ".join(parts)


def format_level(value: float) -> str:
    """Two decimals, exact halves rounded up (50.125 -> "50.13")."""
    return str(Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP))


def _first_index_by_day(days: Sequence[int]) -> dict[int, int]:
    index: dict[int, int] = {}
    for i, day in enumerate(days):
        index.setdefault(day, i)
    return index


def _levels_at(series: HormoneSeries, idx: int | None) -> tuple[str, str]:
    if idx is None:
        return NOT_AVAILABLE, NOT_AVAILABLE
    return format_level(series.estradiol[idx]), format_level(series.progesterone[idx])
