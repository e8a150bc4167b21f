"""Shared fixtures for dashboard tests: service payloads, rows, mock client."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from cycleboard.dashboard.base import DisplayRow, Reviewer, RowStatus
from cycleboard.dashboard.config_loader import TableConfig, load_table_config
from cycleboard.models.entries import DailyEntry, HormoneSeries

CYCLE = {"id": 4, "start_date": "2026-02-01", "phase": "follicular"}


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@pytest.fixture
def table_config() -> TableConfig:
    """The bundled table config."""
    return load_table_config()


# ---------------------------------------------------------------------------
# Service payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def entries_raw() -> list[dict]:
    """Four consecutive days of a cycle, as the data service sends them."""
    return [
        {"id": 11, "date": "2026-02-01", "cycle": CYCLE, "cramps": 4, "bloating": 2,
         "mood": 2, "cervical_mucus": "sticky", "notes": "heavy day"},
        {"id": 12, "date": "2026-02-02", "cycle": CYCLE, "cramps": 3, "mood": 3},
        {"id": 13, "date": "2026-02-03", "cycle": CYCLE},
        {"id": 14, "date": "2026-02-04", "cycle": CYCLE, "notes": "felt fine",
         "sleep_quality": 4},
    ]


@pytest.fixture
def entries(entries_raw: list[dict]) -> list[DailyEntry]:
    return [DailyEntry.model_validate(e) for e in entries_raw]


@pytest.fixture
def series_raw() -> dict:
    return {
        "days": [1, 2, 3, 4],
        "estradiol": [35.5, 41.256, 48.0, 60.1],
        "progesterone": [0.4, 0.45, 0.5, 0.62],
    }


@pytest.fixture
def series(series_raw: dict) -> HormoneSeries:
    return HormoneSeries.model_validate(series_raw)


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------


def make_row(row_id: int, cycle_day: str | None = None, **overrides) -> DisplayRow:
    values = {
        "id": row_id,
        "cycle_day": cycle_day or f"Day {row_id}",
        "phase": "Unknown",
        "status": RowStatus.PENDING,
        "estrogen_level": "N/A",
        "progesterone_level": "N/A",
        "symptoms": "None",
        "reviewer": Reviewer.UNASSIGNED,
    }
    values.update(overrides)
    return DisplayRow(**values)


@pytest.fixture
def many_rows() -> list[DisplayRow]:
    """25 rows, ids 1..25, every third one Done."""
    return [
        make_row(
            i,
            status=RowStatus.DONE if i % 3 == 0 else RowStatus.PENDING,
            symptoms=f"Cramps: {i % 5}" if i % 3 == 0 else "None",
            phase="luteal" if i > 14 else "follicular",
        )
        for i in range(1, 26)
    ]


# ---------------------------------------------------------------------------
# Mock data service
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client(entries: list[DailyEntry], series: HormoneSeries) -> MagicMock:
    """Mock DataServiceClient returning the sample payloads."""
    client = MagicMock()
    client.list_daily_entries = AsyncMock(return_value=entries)
    client.get_hormone_series = AsyncMock(return_value=series)
    client.create_entry = AsyncMock(return_value=99)
    client.update_entry = AsyncMock(return_value={})
    return client
