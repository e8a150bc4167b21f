"""Tests for the concurrent dashboard fetch."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from cycleboard.dashboard.fetcher import DashboardPayload, fetch_dashboard
from cycleboard.errors import FetchFailure


class TestFetchDashboard:
    @pytest.mark.asyncio
    async def test_returns_both_payloads(self, mock_client: MagicMock, entries, series) -> None:
        payload = await fetch_dashboard(mock_client)
        assert isinstance(payload, DashboardPayload)
        assert payload.entries == entries
        assert payload.series == series
        mock_client.list_daily_entries.assert_awaited_once_with()
        mock_client.get_hormone_series.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_entries_failure_fails_whole_fetch(self, mock_client: MagicMock) -> None:
        mock_client.list_daily_entries = AsyncMock(side_effect=FetchFailure("boom"))
        with pytest.raises(FetchFailure):
            await fetch_dashboard(mock_client)

    @pytest.mark.asyncio
    async def test_series_failure_fails_whole_fetch(self, mock_client: MagicMock) -> None:
        mock_client.get_hormone_series = AsyncMock(side_effect=FetchFailure("bad series"))
        with pytest.raises(FetchFailure, match="bad series"):
            await fetch_dashboard(mock_client)

    @pytest.mark.asyncio
    async def test_reads_run_concurrently(self, entries, series) -> None:
        started: list[str] = []
        release = asyncio.Event()

        async def slow_entries():
            started.append("entries")
            await release.wait()
            return entries

        async def slow_series():
            started.append("series")
            await release.wait()
            return series

        client = MagicMock()
        client.list_daily_entries = slow_entries
        client.get_hormone_series = slow_series

        task = asyncio.ensure_future(fetch_dashboard(client))
        for _ in range(3):
            await asyncio.sleep(0)
        assert sorted(started) == ["entries", "series"]
        release.set()
        payload = await task
        assert payload.entries == entries

    @pytest.mark.asyncio
    async def test_failure_cancels_sibling_read(self, entries) -> None:
        cancelled = asyncio.Event()

        async def hung_entries():
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return entries

        client = MagicMock()
        client.list_daily_entries = hung_entries
        client.get_hormone_series = AsyncMock(side_effect=FetchFailure("down"))

        with pytest.raises(FetchFailure):
            await fetch_dashboard(client)
        for _ in range(3):
            await asyncio.sleep(0)
        assert cancelled.is_set()
