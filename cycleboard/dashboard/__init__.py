"""CycleBoard data-table dashboard.

Fetches daily entries and the active cycle's hormone series, reconciles them
into display rows, and keeps the table's view state.

Modules:
    base          — DisplayRow, ChartPoint, RowStatus, Reviewer
    config_loader — Load/validate/hot-reload table_config.yaml
    fetcher       — Concurrent dual read of entries + hormone series
    reconciler    — Pure entries × series join into DisplayRows
    view_model    — Sorting, filtering, visibility, selection, paging, local reorder
    detail        — Row detail drawer with its own hormone re-fetch
    controller    — Mount / refresh / unmount lifecycle
"""

from cycleboard.dashboard.base import ChartPoint, DisplayRow, Reviewer, RowStatus
from cycleboard.dashboard.config_loader import TableConfig, get_table_config
from cycleboard.dashboard.controller import DashboardView
from cycleboard.dashboard.detail import DetailView, build_chart_series
from cycleboard.dashboard.fetcher import DashboardPayload, fetch_dashboard
from cycleboard.dashboard.reconciler import reconcile
from cycleboard.dashboard.view_model import TableState, TableViewModel

__all__ = [
    "ChartPoint",
    "DisplayRow",
    "Reviewer",
    "RowStatus",
    "TableConfig",
    "get_table_config",
    "DashboardView",
    "DetailView",
    "build_chart_series",
    "DashboardPayload",
    "fetch_dashboard",
    "reconcile",
    "TableState",
    "TableViewModel",
]
