"""Row detail drawer: hormone chart plus an editable draft of the row.

Opening a row issues its own ``GET /dashboard/`` rather than reusing the
series the table was reconciled from.  The chart covers the whole series so
the selected day is shown in context.  A chart failure only degrades the
chart; the row fields and the draft stay usable.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from cycleboard.dashboard.base import ChartPoint, DisplayRow, Reviewer
from cycleboard.dashboard.view_model import EDITABLE_FIELDS, TableViewModel
from cycleboard.errors import FetchFailure
from cycleboard.models.entries import HormoneSeries
from cycleboard.services.data_service import DataServiceClient

logger = logging.getLogger("cycleboard.dashboard.detail")

CHART_ERROR = "Failed to load hormone data"


def build_chart_series(series: HormoneSeries) -> list[ChartPoint]:
    """One ``ChartPoint`` per sample, labelled ``Day {days[i]}``."""
    return [
        ChartPoint(day=f"Day {day}", estrogen=e2, progesterone=p4)
        for day, e2, p4 in zip(series.days, series.estradiol, series.progesterone)
    ]


class DetailView:
    """State of one open detail drawer.

    Usage::

        detail = await DetailView.open(table.get_row(7), client, table)
        detail.set_draft("reviewer", "Dr. Lee")
        detail.commit()
    """

    def __init__(
        self,
        row: DisplayRow,
        client: DataServiceClient,
        table: TableViewModel | None = None,
        reviewers: Sequence[str] | None = None,
    ) -> None:
        self.row = row
        self._client = client
        self._table = table
        if reviewers is None:
            reviewers = table.config.reviewers if table is not None else ()
        self.reviewers = list(reviewers)
        self.chart: list[ChartPoint] = []
        self.chart_loading = False
        self.chart_error: str | None = None
        self.draft: dict[str, str] = {
            name: row.cell(name) for name in sorted(EDITABLE_FIELDS)
        }
        self._generation = 0
        self._closed = False

    @classmethod
    async def open(
        cls,
        row: DisplayRow,
        client: DataServiceClient,
        table: TableViewModel | None = None,
    ) -> "DetailView":
        view = cls(row, client, table)
        await view.load_chart()
        return view

    @property
    def title(self) -> str:
        return f"{self.row.cycle_day} - {self.row.phase}"

    @property
    def description(self) -> str:
        return f"Hormone levels and symptoms for {self.row.cycle_day}"

    async def load_chart(self) -> None:
        """Fetch the hormone series and rebuild the chart.

        Results arriving after ``close()`` or after a newer load are dropped.
        """
        self._generation += 1
        generation = self._generation
        self.chart_loading = True
        self.chart_error = None
        try:
            series = await self._client.get_hormone_series()
        except FetchFailure as exc:
            if self._is_current(generation):
                logger.warning("Detail chart for row %s failed: %s", self.row.id, exc)
                self.chart_error = CHART_ERROR
                self.chart_loading = False
            return
        if not self._is_current(generation):
            logger.debug("Discarding stale chart result for row %s", self.row.id)
            return
        self.chart = build_chart_series(series)
        self.chart_loading = False

    def close(self) -> None:
        self._closed = True

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    # ------------------------------------------------------------------
    # Draft editing
    # ------------------------------------------------------------------

    def set_draft(self, name: str, value: str) -> None:
        """Update one draft field.

        Raises:
            KeyError:   If ``name`` is not an editable field.
            ValueError: If ``reviewer`` is not one of the configured names.
        """
        if name not in EDITABLE_FIELDS:
            raise KeyError(name)
        if name == "reviewer" and value != Reviewer.UNASSIGNED.value and value not in self.reviewers:
            raise ValueError(f"Unknown reviewer {value!r}; choose one of {self.reviewers}")
        self.draft[name] = value

    def commit(self) -> DisplayRow | None:
        """Write changed draft fields into the table as a local edit."""
        if self._table is None:
            return None
        changes = {k: v for k, v in self.draft.items() if v != self.row.cell(k)}
        if not changes:
            return self.row
        edited = self._table.apply_edit(self.row.id, **changes)
        if edited is not None:
            self.row = edited
        return edited

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "row": self.row.to_dict(),
            "chart": [
                {"day": p.day, "estrogen": p.estrogen, "progesterone": p.progesterone}
                for p in self.chart
            ],
            "chart_loading": self.chart_loading,
            "chart_error": self.chart_error,
            "draft": dict(self.draft),
            "reviewers": list(self.reviewers),
        }
