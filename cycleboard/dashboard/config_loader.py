"""Load, validate, and hot-reload the CycleBoard table configuration.

The config lives in ``table_config.yaml`` alongside this module.  It is
loaded once on first use and cached.  Call ``reload_table_config()`` to
re-read it from disk without restarting.

Usage::

    from cycleboard.dashboard.config_loader import get_table_config

    config = get_table_config()
    config.pagination.page_sizes        # [10, 20, 30, 40, 50]
    config.column("cycle_day").hideable # False
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("cycleboard.dashboard.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "table_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class ColumnConfig:
    """One table column."""

    id: str
    header: str
    hideable: bool = True
    sortable: bool = True


@dataclass
class PaginationConfig:
    """Allowed page sizes and the initial one."""

    page_sizes: list[int]
    default_page_size: int


@dataclass
class SymptomFormConfig:
    """Slider bounds, slider defaults and mucus choices for the logging form."""

    slider_min: int
    slider_max: int
    defaults: dict[str, int]
    cervical_mucus_options: list[str]


@dataclass
class TableConfig:
    """Complete, validated table configuration.

    Attributes:
        version:        Config schema version string.
        columns:        Column definitions in display order.
        pagination:     Page size settings.
        reviewers:      Names offered when assigning a reviewer.
        summary_fields: Ordered field → label map for the symptoms summary.
        symptom_form:   Logging form settings.
    """

    version: str
    columns: list[ColumnConfig]
    pagination: PaginationConfig
    reviewers: list[str]
    summary_fields: dict[str, str]
    symptom_form: SymptomFormConfig
    _raw: dict = field(default_factory=dict, repr=False)

    def column(self, column_id: str) -> ColumnConfig | None:
        for col in self.columns:
            if col.id == column_id:
                return col
        return None

    @property
    def column_ids(self) -> list[str]:
        return [c.id for c in self.columns]

    @property
    def hideable_columns(self) -> list[str]:
        return [c.id for c in self.columns if c.hideable]


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when table_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Table config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> TableConfig:
    """Validate the raw YAML dict and construct a TableConfig.

    All problems are collected and reported together.

    Raises:
        ConfigValidationError: If required fields are missing or invalid.
    """
    errors: list[str] = []

    version = str(raw.get("version", "1.0"))

    # ── Columns ──
    columns: list[ColumnConfig] = []
    seen: set[str] = set()
    for i, col in enumerate(raw.get("columns") or []):
        if not isinstance(col, dict) or "id" not in col:
            errors.append(f"columns[{i}] must be a mapping with an 'id'")
            continue
        col_id = str(col["id"])
        if col_id in seen:
            errors.append(f"columns[{i}]: duplicate column id '{col_id}'")
            continue
        seen.add(col_id)
        columns.append(
            ColumnConfig(
                id=col_id,
                header=str(col.get("header") or ""),
                hideable=bool(col.get("hideable", True)),
                sortable=bool(col.get("sortable", True)),
            )
        )
    if not columns:
        errors.append("'columns' section is missing or empty")

    # ── Pagination ──
    pg_raw = raw.get("pagination") or {}
    page_sizes: list[int] = []
    for size in pg_raw.get("page_sizes", [10, 20, 30, 40, 50]):
        try:
            n = int(size)
        except (TypeError, ValueError):
            errors.append(f"pagination.page_sizes entries must be integers, got {size!r}")
            continue
        if n < 1:
            errors.append(f"pagination.page_sizes entry {n} must be >= 1")
        page_sizes.append(n)
    default_size = int(pg_raw.get("default_page_size", page_sizes[0] if page_sizes else 10))
    if page_sizes and default_size not in page_sizes:
        errors.append(
            f"pagination.default_page_size {default_size} is not one of {page_sizes}"
        )
    pagination = PaginationConfig(page_sizes=page_sizes, default_page_size=default_size)

    # ── Reviewers ──
    reviewers = [str(r) for r in (raw.get("reviewers") or [])]

    # ── Summary fields ──
    sf_raw = raw.get("summary_fields") or {}
    if not isinstance(sf_raw, dict) or not sf_raw:
        errors.append("'summary_fields' must be a non-empty mapping of field → label")
        sf_raw = {}
    summary_fields = {str(k): str(v) for k, v in sf_raw.items()}

    # ── Symptom form ──
    form_raw = raw.get("symptom_form") or {}
    slider_min = int(form_raw.get("slider_min", 0))
    slider_max = int(form_raw.get("slider_max", 5))
    if slider_min >= slider_max:
        errors.append(f"symptom_form slider range [{slider_min}, {slider_max}] is empty")
    defaults: dict[str, int] = {}
    for name, value in (form_raw.get("defaults") or {}).items():
        try:
            v = int(value)
        except (TypeError, ValueError):
            errors.append(f"symptom_form.defaults.{name} must be an integer, got {value!r}")
            continue
        if not (slider_min <= v <= slider_max):
            errors.append(
                f"symptom_form.defaults.{name} = {v} is out of range "
                f"[{slider_min}, {slider_max}]"
            )
        defaults[str(name)] = v
    mucus_options = [str(m) for m in form_raw.get("cervical_mucus_options", ["none"])]
    if "none" not in mucus_options:
        errors.append("symptom_form.cervical_mucus_options must include 'none'")
    symptom_form = SymptomFormConfig(
        slider_min=slider_min,
        slider_max=slider_max,
        defaults=defaults,
        cervical_mucus_options=mucus_options,
    )

    if errors:
        raise ConfigValidationError(
            f"table_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return TableConfig(
        version=version,
        columns=columns,
        pagination=pagination,
        reviewers=reviewers,
        summary_fields=summary_fields,
        symptom_form=symptom_form,
        _raw=raw,
    )


def load_table_config(path: Path | None = None) -> TableConfig:
    """Load and validate the table config from disk.

    Args:
        path: Override path to YAML. Uses the bundled table_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded table config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: TableConfig | None = None
_config_lock = threading.Lock()


def get_table_config() -> TableConfig:
    """Return the global TableConfig singleton, loading it on first call."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_table_config()
    return _config


def reload_table_config(path: Path | None = None) -> TableConfig:
    """Reload the table config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_table_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded table config: %s → %s", old_version, new_config.version)
    return new_config


def _reset_for_tests(config: Any = None) -> None:
    global _config
    with _config_lock:
        _config = config
