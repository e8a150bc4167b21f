"""Shared fixtures for symptom form tests."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from cycleboard.dashboard.config_loader import SymptomFormConfig, load_table_config
from cycleboard.models.entries import DailyEntry
from cycleboard.symptoms.form import SymptomForm

TODAY = date(2026, 2, 10)


@pytest.fixture
def form_config() -> SymptomFormConfig:
    return load_table_config().symptom_form


@pytest.fixture
def existing_entry() -> DailyEntry:
    """An entry already logged for TODAY."""
    return DailyEntry.model_validate({
        "id": 42,
        "date": TODAY.isoformat(),
        "cycle": 4,
        "cramps": 3,
        "bloating": 0,
        "mood": 4,
        "energy": None,
        "libido": 0,
        "cervical_mucus": "creamy",
        "notes": "ok day",
    })


@pytest.fixture
def form_client() -> MagicMock:
    """Mock data service with no entry for any date."""
    client = MagicMock()
    client.list_daily_entries = AsyncMock(return_value=[])
    client.create_entry = AsyncMock(return_value=77)
    client.update_entry = AsyncMock(return_value={})
    return client


@pytest.fixture
def form(form_client: MagicMock, form_config: SymptomFormConfig) -> SymptomForm:
    return SymptomForm(form_client, form_config, today=lambda: TODAY)
