"""Dashboard lifecycle: mount, refresh, unmount.

Each refresh takes a new generation number.  A fetch that completes after
the view was unmounted, or after a newer refresh started, is discarded
without touching the table.  No timeout is applied here; a request that
never completes leaves ``loading`` set.
"""

from __future__ import annotations

import logging

from cycleboard.dashboard.detail import DetailView
from cycleboard.dashboard.fetcher import fetch_dashboard
from cycleboard.dashboard.reconciler import reconcile
from cycleboard.dashboard.view_model import TableViewModel
from cycleboard.errors import FetchFailure
from cycleboard.services.data_service import DataServiceClient

logger = logging.getLogger("cycleboard.dashboard.controller")

LOAD_ERROR = "Failed to load data"


class DashboardView:
    """The data-table dashboard bound to one data service client."""

    def __init__(
        self,
        client: DataServiceClient,
        table: TableViewModel | None = None,
    ) -> None:
        self.client = client
        self.table = table or TableViewModel()
        self.loading = True
        self.error: str | None = None
        self._mounted = False
        self._generation = 0

    @property
    def mounted(self) -> bool:
        return self._mounted

    async def mount(self) -> None:
        self._mounted = True
        logger.info("Dashboard mounted")
        await self.refresh()

    def unmount(self) -> None:
        """Detach the view; any in-flight refresh result will be dropped."""
        self._mounted = False
        self._generation += 1
        logger.info("Dashboard unmounted")

    async def refresh(self) -> bool:
        """Fetch, reconcile and load the table.

        On failure the current rows are kept and ``error`` is set.

        Returns:
            True if new rows were loaded.
        """
        self._generation += 1
        generation = self._generation
        self.loading = True

        try:
            payload = await fetch_dashboard(self.client)
        except FetchFailure as exc:
            if not self._is_current(generation):
                logger.debug("Discarding stale dashboard failure: %s", exc)
                return False
            logger.warning("Dashboard refresh failed: %s", exc)
            self.error = LOAD_ERROR
            self.loading = False
            return False

        if not self._is_current(generation):
            logger.debug("Discarding stale dashboard result (generation %d)", generation)
            return False

        rows = reconcile(payload.entries, payload.series, self.table.config.summary_fields)
        self.table.load(rows)
        self.error = None
        self.loading = False
        logger.info("Dashboard loaded %d rows", len(rows))
        return True

    def _is_current(self, generation: int) -> bool:
        return self._mounted and generation == self._generation

    async def open_detail(self, row_id: int) -> DetailView | None:
        """Open the detail drawer for ``row_id``; None if the row is unknown."""
        row = self.table.get_row(row_id)
        if row is None:
            return None
        return await DetailView.open(row, self.client, self.table)

    def snapshot(self) -> dict:
        """Serializable view of the current page and table state."""
        table = self.table
        state = table.state
        return {
            "loading": self.loading,
            "error": self.error,
            "rows": [r.to_dict() for r in table.page_rows],
            "row_ids": [r.id for r in table.ordered_rows],
            "visible_columns": table.visible_columns,
            "hideable_columns": table.hideable_columns,
            "sorting": [{"column": c, "descending": d} for c, d in state.sorting],
            "filters": dict(state.filters),
            "selection": sorted(state.selection),
            "selected_row_count": table.selected_row_count,
            "filtered_row_count": table.filtered_row_count,
            "page_index": state.page_index,
            "page_size": state.page_size,
            "page_sizes": table.config.pagination.page_sizes,
            "page_count": table.page_count,
            "can_previous_page": table.can_previous_page,
            "can_next_page": table.can_next_page,
        }
