"""Async client for the cycle-tracking REST data service.

Endpoints used:
    GET   /daily-entries/             — every logged day, oldest first
    GET   /daily-entries/?date=<ISO>  — the entry for one date (0 or 1 results)
    GET   /dashboard/                 — hormone series for the active cycle
    POST  /daily-entries/             — create an entry, returns its id
    PATCH /daily-entries/<id>/        — update an entry

Every response is decoded through the pydantic models in
``cycleboard.models.entries`` before it leaves this module, so callers only
ever see validated ``DailyEntry`` / ``HormoneSeries`` objects or an error.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from cycleboard.config import Settings, get_settings
from cycleboard.errors import FetchFailure, SubmitFailure
from cycleboard.models.entries import (
    DailyEntry,
    EntryCreated,
    EntryPage,
    HormoneSeries,
    SymptomPayload,
)

logger = logging.getLogger("cycleboard.services.data_service")

ENTRIES_PATH = "/daily-entries/"
DASHBOARD_PATH = "/dashboard/"

_ENTRY_LIST = TypeAdapter(list[DailyEntry])


class DataServiceClient:
    """Thin typed wrapper over the data service.

    Usage::

        client = DataServiceClient()
        entries = await client.list_daily_entries()
        series = await client.get_hormone_series()
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url:    Service root, e.g. ``https://example.org/api``.
            token:       Optional bearer token.
            timeout:     Per-request timeout in seconds (None = no timeout).
            http_client: Optional pre-configured httpx client (for testing).
            settings:    Settings used for any argument left unset.
        """
        s = settings or get_settings()
        self._base_url = (base_url or s.api_base_url).rstrip("/")
        self._token = token if token is not None else s.api_token
        self._timeout = timeout if timeout is not None else s.request_timeout_seconds
        self._http_client = http_client

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_daily_entries(self, on_date: date | None = None) -> list[DailyEntry]:
        """Fetch daily entries, optionally filtered to a single date.

        Raises:
            FetchFailure: On transport errors, non-2xx responses, or a payload
                that is neither a list of entries nor a ``results`` envelope.
        """
        params = {"date": on_date.isoformat()} if on_date else None
        body = await self._get(ENTRIES_PATH, params=params)
        try:
            if isinstance(body, dict) and "results" in body:
                return EntryPage.model_validate(body).results
            return _ENTRY_LIST.validate_python(body)
        except ValidationError as exc:
            logger.warning("Malformed daily-entries payload: %s", exc)
            raise FetchFailure("Malformed daily entries payload", path=ENTRIES_PATH) from exc

    async def get_hormone_series(self) -> HormoneSeries:
        """Fetch the hormone series for the active cycle.

        Raises:
            FetchFailure: On transport errors, non-2xx responses, or a
                misaligned / malformed series.
        """
        body = await self._get(DASHBOARD_PATH)
        try:
            return HormoneSeries.model_validate(body)
        except ValidationError as exc:
            logger.warning("Malformed hormone series payload: %s", exc)
            raise FetchFailure("Malformed hormone series payload", path=DASHBOARD_PATH) from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_entry(self, payload: SymptomPayload) -> int:
        """Create a daily entry and return the server-assigned id.

        Raises:
            SubmitFailure: On any failure, with the backend detail if present.
        """
        body = await self._send("POST", ENTRIES_PATH, payload)
        try:
            return EntryCreated.model_validate(body).id
        except ValidationError as exc:
            raise SubmitFailure("Response did not include an entry id") from exc

    async def update_entry(self, entry_id: int, payload: SymptomPayload) -> dict[str, Any]:
        """Update an existing daily entry with the full payload.

        Raises:
            SubmitFailure: On any failure, with the backend detail if present.
        """
        body = await self._send("PATCH", f"{ENTRIES_PATH}{entry_id}/", payload)
        return body if isinstance(body, dict) else {}

    # ------------------------------------------------------------------
    # Private HTTP helpers
    # ------------------------------------------------------------------

    def _build_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self._base_url}{path}"
        headers = self._build_headers()

        if self._http_client:
            return await self._http_client.request(method, url, headers=headers, **kwargs)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.request(method, url, headers=headers, **kwargs)

    async def _get(self, path: str, params: dict | None = None) -> Any:
        """GET ``path`` and return the parsed JSON body.

        Raises:
            FetchFailure: On transport errors, non-2xx responses, or non-JSON.
        """
        try:
            response = await self._request("GET", path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            logger.warning("GET %s failed: %s", path, exc)
            raise FetchFailure(f"GET {path} failed: {exc}", path=path) from exc
        except ValueError as exc:
            logger.warning("GET %s returned invalid JSON: %s", path, exc)
            raise FetchFailure(f"GET {path} returned invalid JSON", path=path) from exc

    async def _send(self, method: str, path: str, payload: SymptomPayload) -> Any:
        """Send ``payload`` with ``method`` and return the parsed JSON body.

        Raises:
            SubmitFailure: With the backend's ``detail`` when available.
        """
        logger.debug("%s %s payload=%s", method, path, payload.model_dump(mode="json"))
        try:
            response = await self._request(method, path, json=payload.model_dump(mode="json"))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = _error_detail(exc.response)
            logger.warning("%s %s rejected (%s): %s", method, path, exc.response.status_code, detail)
            raise SubmitFailure(detail, status_code=exc.response.status_code) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise SubmitFailure("Unknown error") from exc

        try:
            return response.json()
        except ValueError:
            return {}


def _error_detail(response: httpx.Response) -> str:
    """Extract a human-readable detail from an error response.

    Prefers the ``detail`` key, then the whole JSON body, then the raw text.
    """
    try:
        body = response.json()
    except ValueError:
        return response.text or "Unknown error"
    if isinstance(body, dict) and body.get("detail") is not None:
        return str(body["detail"])
    if body is None:
        return "Unknown error"
    return json.dumps(body)
