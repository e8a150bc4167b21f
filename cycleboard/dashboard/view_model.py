"""In-memory view model for the cycle dashboard table.

Holds the reconciled rows plus orthogonal UI state: sorting, column filters,
column visibility, row selection, pagination, and the local-only display
order and inline edits.

Every write builds a new frozen ``TableState`` and swaps it in one
assignment, so readers never observe a half-applied update.  None of the
operations can fail: out-of-range page indexes are clamped and unsupported
values (unknown columns, page sizes outside the configured set) are ignored
with a warning.

Row pipeline for reads::

    fetched rows ─▶ local display order ─▶ local edits ─▶ filters ─▶ sorting ─▶ page slice

Local order and local edits are display state only.  They are never sent to
the data service and the next ``load()`` discards them.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace

from cycleboard.dashboard.base import DisplayRow, Reviewer
from cycleboard.dashboard.config_loader import TableConfig, get_table_config

logger = logging.getLogger("cycleboard.dashboard.view_model")

#: Row fields that may be edited locally from the detail drawer.
EDITABLE_FIELDS = frozenset({"symptoms", "estrogen_level", "progesterone_level", "reviewer"})

_NUMBER_RE = re.compile(r"(\d+(?:\.\d+)?)")


@dataclass(frozen=True)
class TableState:
    """One immutable snapshot of the table.

    Attributes:
        rows:           Rows in authoritative (fetched) order.
        display_order:  Row ids in local display order.
        local_edits:    Locally edited rows keyed by id.
        sorting:        ``(column, descending)`` pairs, highest priority first.
        filters:        Column → case-insensitive substring filter.
        hidden_columns: Columns currently hidden.
        selection:      Selected row ids.
        page_index:     Zero-based current page.
        page_size:      Rows per page.
    """

    rows: tuple[DisplayRow, ...] = ()
    display_order: tuple[int, ...] = ()
    local_edits: dict[int, DisplayRow] = field(default_factory=dict)
    sorting: tuple[tuple[str, bool], ...] = ()
    filters: dict[str, str] = field(default_factory=dict)
    hidden_columns: frozenset[str] = frozenset()
    selection: frozenset[int] = frozenset()
    page_index: int = 0
    page_size: int = 10


class TableViewModel:
    """Dashboard table state and its derived reads.

    Usage::

        table = TableViewModel()
        table.load(reconcile(entries, series))
        table.set_sort([("cycle_day", False)])
        table.reorder(active_id=3, over_id=1)
        for row in table.page_rows:
            ...
    """

    def __init__(
        self,
        config: TableConfig | None = None,
        rows: Iterable[DisplayRow] = (),
    ) -> None:
        self._config = config or get_table_config()
        self._state = TableState(page_size=self._config.pagination.default_page_size)
        rows = tuple(rows)
        if rows:
            self.load(rows)

    @property
    def state(self) -> TableState:
        return self._state

    @property
    def config(self) -> TableConfig:
        return self._config

    def _commit(self, **changes) -> None:
        self._state = replace(self._state, **changes)

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def load(self, rows: Iterable[DisplayRow]) -> None:
        """Replace rows with a freshly reconciled set.

        Drops the local display order and local edits, keeps only selected
        ids that still exist, and clamps the page index.
        """
        rows = tuple(rows)
        ids = tuple(r.id for r in rows)
        known = set(ids)
        self._commit(
            rows=rows,
            display_order=ids,
            local_edits={},
            selection=frozenset(i for i in self._state.selection if i in known),
        )
        self._commit(page_index=self._clamp_page(self._state.page_index))

    def get_row(self, row_id: int) -> DisplayRow | None:
        edited = self._state.local_edits.get(row_id)
        if edited is not None:
            return edited
        for row in self._state.rows:
            if row.id == row_id:
                return row
        return None

    def reorder(self, active_id: int, over_id: int) -> bool:
        """Move ``active_id`` to the position currently held by ``over_id``.

        Array-move semantics: the active row is removed and reinserted at the
        over row's index; every other row keeps its relative order.  Purely
        local, nothing is sent to the data service.

        Returns:
            True if the order changed.
        """
        order = list(self._state.display_order)
        if active_id == over_id or active_id not in order or over_id not in order:
            return False
        old_index = order.index(active_id)
        new_index = order.index(over_id)
        order.insert(new_index, order.pop(old_index))
        self._commit(display_order=tuple(order))
        logger.debug("Moved row %s from %d to %d", active_id, old_index, new_index)
        return True

    def apply_edit(self, row_id: int, **changes: str) -> DisplayRow | None:
        """Apply a local inline edit to one row.

        Only ``EDITABLE_FIELDS`` may change.  Assigning the reviewer
        placeholder text restores ``Reviewer.UNASSIGNED``.

        Returns:
            The edited row, or None if ``row_id`` is unknown.

        Raises:
            TypeError: If a non-editable field is passed.
        """
        bad = set(changes) - EDITABLE_FIELDS
        if bad:
            raise TypeError(f"Fields are not editable: {sorted(bad)}")
        row = self.get_row(row_id)
        if row is None:
            return None
        if changes.get("reviewer") == Reviewer.UNASSIGNED.value:
            changes["reviewer"] = Reviewer.UNASSIGNED
        edited = replace(row, **changes)
        self._commit(local_edits={**self._state.local_edits, row_id: edited})
        return edited

    # ------------------------------------------------------------------
    # Sorting / filtering / visibility
    # ------------------------------------------------------------------

    def set_sort(self, sorting: Sequence[tuple[str, bool]]) -> None:
        """Replace the sort order with ``(column, descending)`` pairs."""
        accepted = []
        for column, descending in sorting:
            col = self._config.column(column)
            if col is None or not col.sortable:
                logger.warning("Ignoring sort on unsortable column %r", column)
                continue
            accepted.append((column, bool(descending)))
        self._commit(sorting=tuple(accepted))

    def set_filter(self, column: str, value: str | None) -> None:
        """Set (or clear, with None / "") the filter on one column.

        Changing filters returns to the first page.
        """
        if self._config.column(column) is None:
            logger.warning("Ignoring filter on unknown column %r", column)
            return
        filters = dict(self._state.filters)
        if value:
            filters[column] = value
        else:
            filters.pop(column, None)
        self._commit(filters=filters, page_index=0)

    def toggle_column_visibility(self, column: str, visible: bool | None = None) -> None:
        """Show or hide a column; flips the current state when ``visible`` is None."""
        col = self._config.column(column)
        if col is None or not col.hideable:
            logger.warning("Ignoring visibility toggle for column %r", column)
            return
        hidden = set(self._state.hidden_columns)
        show = (column in hidden) if visible is None else visible
        if show:
            hidden.discard(column)
        else:
            hidden.add(column)
        self._commit(hidden_columns=frozenset(hidden))

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def set_selection(self, row_ids: Iterable[int]) -> None:
        known = set(self._state.display_order)
        self._commit(selection=frozenset(i for i in row_ids if i in known))

    def toggle_row_selected(self, row_id: int, selected: bool | None = None) -> None:
        if row_id not in self._state.display_order:
            return
        current = set(self._state.selection)
        if selected is None:
            selected = row_id not in current
        if selected:
            current.add(row_id)
        else:
            current.discard(row_id)
        self._commit(selection=frozenset(current))

    def toggle_page_selected(self, selected: bool) -> None:
        """Select or deselect every row on the current page."""
        page_ids = {r.id for r in self.page_rows}
        current = set(self._state.selection)
        current = current | page_ids if selected else current - page_ids
        self._commit(selection=frozenset(current))

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def set_page(self, page_index: int) -> None:
        self._commit(page_index=self._clamp_page(page_index))

    def set_page_size(self, page_size: int) -> None:
        """Change rows per page, keeping the current top row on screen.

        Sizes outside the configured set are ignored.
        """
        if page_size not in self._config.pagination.page_sizes:
            logger.warning(
                "Ignoring page size %r (allowed: %s)",
                page_size, self._config.pagination.page_sizes,
            )
            return
        top_row = self._state.page_index * self._state.page_size
        self._commit(page_size=page_size, page_index=top_row // page_size)
        self._commit(page_index=self._clamp_page(self._state.page_index))

    def first_page(self) -> None:
        self.set_page(0)

    def previous_page(self) -> None:
        self.set_page(self._state.page_index - 1)

    def next_page(self) -> None:
        self.set_page(self._state.page_index + 1)

    def last_page(self) -> None:
        self.set_page(self.page_count - 1)

    def _clamp_page(self, page_index: int) -> int:
        return max(0, min(page_index, self.page_count - 1))

    # ------------------------------------------------------------------
    # Derived reads
    # ------------------------------------------------------------------

    @property
    def ordered_rows(self) -> list[DisplayRow]:
        """All rows in local display order with local edits applied."""
        by_id = {r.id: r for r in self._state.rows}
        by_id.update(self._state.local_edits)
        return [by_id[i] for i in self._state.display_order]

    @property
    def filtered_rows(self) -> list[DisplayRow]:
        rows = self.ordered_rows
        for column, needle in self._state.filters.items():
            needle = needle.lower()
            rows = [r for r in rows if needle in r.cell(column).lower()]
        return rows

    @property
    def sorted_rows(self) -> list[DisplayRow]:
        rows = self.filtered_rows
        # Stable sorts applied lowest priority first give a multi-column sort.
        for column, descending in reversed(self._state.sorting):
            rows.sort(key=lambda r, c=column: _natural_key(r.cell(c)), reverse=descending)
        return rows

    @property
    def page_rows(self) -> list[DisplayRow]:
        start = self._state.page_index * self._state.page_size
        return self.sorted_rows[start:start + self._state.page_size]

    @property
    def filtered_row_count(self) -> int:
        return len(self.filtered_rows)

    @property
    def selected_row_count(self) -> int:
        """Selected rows among those passing the current filters."""
        selection = self._state.selection
        return sum(1 for r in self.filtered_rows if r.id in selection)

    @property
    def page_count(self) -> int:
        return math.ceil(self.filtered_row_count / self._state.page_size)

    @property
    def can_previous_page(self) -> bool:
        return self._state.page_index > 0

    @property
    def can_next_page(self) -> bool:
        return self._state.page_index < self.page_count - 1

    @property
    def is_all_page_selected(self) -> bool:
        page = self.page_rows
        return bool(page) and all(r.id in self._state.selection for r in page)

    @property
    def is_some_page_selected(self) -> bool:
        return any(r.id in self._state.selection for r in self.page_rows)

    @property
    def visible_columns(self) -> list[str]:
        hidden = self._state.hidden_columns
        return [c for c in self._config.column_ids if c not in hidden]

    @property
    def hideable_columns(self) -> list[str]:
        return self._config.hideable_columns


def _natural_key(text: str) -> tuple:
    """Sort key that orders embedded numbers numerically ("Day 2" < "Day 10")."""
    key = []
    for token in _NUMBER_RE.split(text):
        if not token:
            continue
        if _NUMBER_RE.fullmatch(token):
            key.append((0, float(token), ""))
        else:
            key.append((1, 0.0, token.lower()))
    return tuple(key)
