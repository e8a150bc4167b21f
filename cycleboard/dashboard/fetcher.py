"""Dual read for the dashboard: daily entries + hormone series.

Both reads run concurrently.  Reconciliation needs both, so a failure on
either side fails the whole refresh and the surviving read is cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from cycleboard.models.entries import DailyEntry, HormoneSeries
from cycleboard.services.data_service import DataServiceClient

logger = logging.getLogger("cycleboard.dashboard.fetcher")


@dataclass(frozen=True)
class DashboardPayload:
    """Both decoded payloads of one successful refresh."""

    entries: list[DailyEntry]
    series: HormoneSeries


async def fetch_dashboard(client: DataServiceClient) -> DashboardPayload:
    """Fetch every daily entry and the full hormone series.

    No date range, cycle selector or server-side pagination is pushed down;
    the table pages, sorts and filters on the client.

    Raises:
        FetchFailure: If either read fails.  Nothing partial is returned.
    """
    entries_task = asyncio.ensure_future(client.list_daily_entries())
    series_task = asyncio.ensure_future(client.get_hormone_series())
    tasks = (entries_task, series_task)

    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        for task in tasks:
            if task in done and task.exception() is not None:
                raise task.exception()
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()

    entries = entries_task.result()
    series = series_task.result()
    logger.debug(
        "Fetched %d entries and %d hormone samples", len(entries), len(series.days)
    )
    return DashboardPayload(entries=entries, series=series)
