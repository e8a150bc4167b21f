"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from cycleboard.config import Settings, get_settings
from cycleboard.dashboard.controller import DashboardView
from cycleboard.symptoms.form import SymptomForm


async def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with, falling back to the environment."""
    return getattr(request.app.state, "settings", None) or get_settings()


async def get_dashboard(request: Request) -> DashboardView:
    """Return the dashboard view created in the app lifespan."""
    view: DashboardView | None = getattr(request.app.state, "dashboard", None)
    if view is None:
        raise HTTPException(status_code=503, detail="Dashboard not initialized")
    return view


async def get_symptom_form(request: Request) -> SymptomForm:
    form: SymptomForm | None = getattr(request.app.state, "symptom_form", None)
    if form is None:
        raise HTTPException(status_code=503, detail="Symptom form not initialized")
    return form


# Annotated shortcuts for route signatures
Dashboard = Annotated[DashboardView, Depends(get_dashboard)]
Form = Annotated[SymptomForm, Depends(get_symptom_form)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
