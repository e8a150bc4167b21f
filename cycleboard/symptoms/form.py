"""Symptom logging form state.

Loads the existing entry for the chosen date, validates locally, and either
creates (``POST``) or updates (``PATCH``) the entry.  Once a create
succeeds the returned id is kept, so submitting again for the same date
updates instead of creating a duplicate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Any

from cycleboard.dashboard.config_loader import SymptomFormConfig, get_table_config
from cycleboard.errors import FetchFailure, FormBusy, SymptomValidationError
from cycleboard.models.entries import DailyEntry, SymptomPayload
from cycleboard.services.data_service import DataServiceClient

logger = logging.getLogger("cycleboard.symptoms.form")

SLIDER_FIELDS = (
    "cramps",
    "bloating",
    "tender_breasts",
    "headache",
    "acne",
    "mood",
    "stress",
    "energy",
    "sleep_quality",
    "libido",
)

NOTHING_REPORTED = "Please log at least one symptom or cervical mucus observation."
LOAD_ERROR = "Failed to load entry"
CREATED_MESSAGE = "Symptoms logged successfully!"
UPDATED_MESSAGE = "Symptoms updated successfully!"


@dataclass(frozen=True)
class SubmitOutcome:
    """Result of a successful submit."""

    entry_id: int
    created: bool
    message: str


class SymptomForm:
    """Form state for logging one day's symptoms.

    Usage::

        form = SymptomForm(client)
        await form.load()                   # today's entry, if any
        form.set_field("cramps", 3)
        outcome = await form.submit()
    """

    def __init__(
        self,
        client: DataServiceClient,
        config: SymptomFormConfig | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._client = client
        self._config = config or get_table_config().symptom_form
        self._today = today
        self.entry_id: int | None = None
        self.loading = False
        self.fetching = False
        self.error: str | None = None
        self._generation = 0
        self._values: dict[str, Any] = {"date": today(), **self._defaults()}

    def _defaults(self) -> dict[str, Any]:
        values: dict[str, Any] = {name: self._config.defaults.get(name, 0) for name in SLIDER_FIELDS}
        values["cervical_mucus"] = "none"
        values["notes"] = ""
        return values

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    @property
    def entry_date(self) -> date:
        return self._values["date"]

    @property
    def busy(self) -> bool:
        return self.loading or self.fetching

    @property
    def submit_label(self) -> str:
        if self.loading:
            return "Saving..."
        return "Update Symptoms" if self.entry_id else "Save Symptoms"

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self, on_date: date | None = None) -> None:
        """Load the entry for ``on_date`` (default: the form's current date).

        An existing entry fills the form and sets ``entry_id``; no entry
        resets every symptom field to its default and clears ``entry_id``.
        A load superseded by a later one is discarded.

        Raises:
            FormBusy:               If a submit is in flight.
            SymptomValidationError: If ``on_date`` is in the future.
        """
        if self.loading:
            raise FormBusy("Entry is still saving")
        if on_date is not None:
            self._check_date(on_date)
            self._values["date"] = on_date
        target = self._values["date"]

        self._generation += 1
        generation = self._generation
        self.fetching = True
        try:
            entries = await self._client.list_daily_entries(on_date=target)
        except FetchFailure as exc:
            if generation == self._generation:
                logger.warning("Loading entry for %s failed: %s", target, exc)
                self.error = LOAD_ERROR
                self.fetching = False
            return

        if generation != self._generation:
            logger.debug("Discarding stale entry load for %s", target)
            return

        if entries:
            self._populate(entries[0])
        else:
            self.entry_id = None
            self._values.update(self._defaults())
        self.error = None
        self.fetching = False

    def _populate(self, entry: DailyEntry) -> None:
        defaults = self._defaults()
        self.entry_id = entry.id
        self._values["date"] = entry.date
        for name in SLIDER_FIELDS:
            value = getattr(entry, name)
            # Only a missing value takes the default; a stored 0 stays 0.
            self._values[name] = defaults[name] if value is None else value
        self._values["cervical_mucus"] = entry.cervical_mucus or "none"
        self._values["notes"] = entry.notes or ""

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def set_field(self, name: str, value: Any) -> None:
        """Set one form field.

        Use ``load(on_date)`` to change the date, since that re-fetches.

        Raises:
            SymptomValidationError: On an unknown field or an invalid value.
        """
        if name in SLIDER_FIELDS:
            lo, hi = self._config.slider_min, self._config.slider_max
            if isinstance(value, bool) or not isinstance(value, int) or not lo <= value <= hi:
                raise SymptomValidationError(f"{name} must be an integer between {lo} and {hi}")
        elif name == "cervical_mucus":
            if value not in self._config.cervical_mucus_options:
                raise SymptomValidationError(
                    f"cervical_mucus must be one of {self._config.cervical_mucus_options}"
                )
        elif name == "notes":
            value = "" if value is None else str(value)
        else:
            raise SymptomValidationError(f"Unknown form field {name!r}")
        self._values[name] = value

    def _check_date(self, value: date) -> None:
        if value > self._today():
            raise SymptomValidationError("Cannot log symptoms for a future date.")

    def has_symptoms(self) -> bool:
        """True if any slider differs from its default or mucus was observed.

        Notes alone do not count.
        """
        defaults = self._defaults()
        if any(self._values[name] != defaults[name] for name in SLIDER_FIELDS):
            return True
        return self._values["cervical_mucus"] != "none"

    def payload(self) -> SymptomPayload:
        return SymptomPayload(**self._values)

    # ------------------------------------------------------------------
    # Submitting
    # ------------------------------------------------------------------

    async def submit(self) -> SubmitOutcome:
        """Validate locally, then create or update the entry.

        Raises:
            FormBusy:               If a load or another submit is in flight.
            SymptomValidationError: If nothing was reported.  No request is made.
            SubmitFailure:          If the data service rejects the write.
        """
        if self.busy:
            raise FormBusy("Entry is still loading or saving")
        if not self.has_symptoms():
            raise SymptomValidationError(NOTHING_REPORTED)

        payload = self.payload()
        self.loading = True
        try:
            if self.entry_id:
                await self._client.update_entry(self.entry_id, payload)
                outcome = SubmitOutcome(self.entry_id, created=False, message=UPDATED_MESSAGE)
            else:
                new_id = await self._client.create_entry(payload)
                self.entry_id = new_id
                outcome = SubmitOutcome(new_id, created=True, message=CREATED_MESSAGE)
        finally:
            self.loading = False

        logger.info("%s entry %s for %s", "Created" if outcome.created else "Updated",
                    outcome.entry_id, payload.date)
        return outcome

    def to_dict(self) -> dict:
        values = self.values
        values["date"] = values["date"].isoformat()
        return {
            "values": values,
            "entry_id": self.entry_id,
            "fetching": self.fetching,
            "loading": self.loading,
            "error": self.error,
            "submit_label": self.submit_label,
            "cervical_mucus_options": list(self._config.cervical_mucus_options),
        }
