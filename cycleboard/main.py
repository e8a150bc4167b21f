"""CycleBoard — FastAPI application entry point.

Holds one dashboard view and one symptom logging form in process memory and
serves their state as JSON to the rendering front end.

Run locally:
    uvicorn cycleboard.main:app --reload --port 8080
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cycleboard.config import Settings, get_settings
from cycleboard.dashboard.controller import DashboardView
from cycleboard.routers import dashboard, health, symptoms
from cycleboard.services.data_service import DataServiceClient
from cycleboard.symptoms.form import SymptomForm

# ---------- Logging ----------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("cycleboard")


# ---------- App factory ----------

def create_app(
    settings: Settings | None = None,
    client: DataServiceClient | None = None,
) -> FastAPI:
    """Build the app.

    Args:
        settings: Settings override; defaults to the environment.
        client:   Data service client override (for testing).  When omitted
                  a shared httpx client is opened for the app's lifetime.
    """
    settings = settings or get_settings()
    logging.getLogger("cycleboard").setLevel(settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup / shutdown hooks."""
        logger.info(
            "Starting CycleBoard v%s [%s] against %s",
            settings.app_version,
            settings.environment,
            settings.api_base_url,
        )
        http_client: httpx.AsyncClient | None = None
        data_client = client
        if data_client is None:
            http_client = httpx.AsyncClient(timeout=settings.request_timeout_seconds)
            data_client = DataServiceClient(settings=settings, http_client=http_client)

        app.state.dashboard = DashboardView(data_client)
        app.state.symptom_form = SymptomForm(data_client)
        await app.state.dashboard.mount()
        await app.state.symptom_form.load()
        yield
        app.state.dashboard.unmount()
        if http_client is not None:
            await http_client.aclose()
        logger.info("CycleBoard shut down")

    app = FastAPI(
        title="CycleBoard",
        description="Cycle dashboard and symptom logging for a menstrual-cycle tracking service.",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside v1 prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(dashboard.router, prefix=v1_prefix)
    app.include_router(symptoms.router, prefix=v1_prefix)

    return app


app = create_app()
