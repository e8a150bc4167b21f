"""Tests for joining daily entries with the hormone series."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from cycleboard.dashboard.base import Reviewer, RowStatus
from cycleboard.dashboard.reconciler import (
    cycle_day_label,
    format_level,
    reconcile,
    summarize_symptoms,
)
from cycleboard.models.entries import DailyEntry, HormoneSeries

SUMMARY_FIELDS = {
    "cramps": "Cramps",
    "bloating": "Bloating",
    "mood": "Mood",
    "cervical_mucus": "Cervical Mucus",
    "notes": "Notes",
}


def entry(entry_id: int, day: str, **fields) -> DailyEntry:
    return DailyEntry.model_validate({"id": entry_id, "date": day, **fields})


def hormones(days, e2, p4) -> HormoneSeries:
    return HormoneSeries(days=days, estradiol=e2, progesterone=p4)


# ---------------------------------------------------------------------------
# Worked examples
# ---------------------------------------------------------------------------


class TestReconcileExamples:
    def test_two_entries_without_cycle(self) -> None:
        entries = [entry(1, "2024-01-01", cramps=2), entry(2, "2024-01-02")]
        series = hormones([1, 2], [50.123, 60], [1.1, 1.4])

        rows = reconcile(entries, series, SUMMARY_FIELDS)

        assert [r.id for r in rows] == [1, 2]
        assert rows[0].cycle_day == "Day 1"
        assert rows[0].status is RowStatus.DONE
        assert rows[0].estrogen_level == "50.12"
        assert rows[0].progesterone_level == "1.10"
        assert rows[0].symptoms == "Cramps: 2"
        assert rows[1].cycle_day == "Day 2"
        assert rows[1].status is RowStatus.PENDING
        assert rows[1].estrogen_level == "60.00"
        assert rows[1].progesterone_level == "1.40"
        assert rows[1].symptoms == "None"

    def test_levels_round_exact_halves_up(self) -> None:
        rows = reconcile(
            [entry(1, "2024-01-01")], hormones([1], [50.125], [0.375]), SUMMARY_FIELDS
        )
        assert (rows[0].estrogen_level, rows[0].progesterone_level) == ("50.13", "0.38")

    def test_format_level_uses_stored_binary_value(self) -> None:
        # 1.005 is stored just below the half, so it rounds down.
        assert format_level(1.005) == "1.00"
        assert format_level(2.675) == "2.67"
        assert format_level(0.005) == "0.01"

    def test_short_series_gives_not_available(self) -> None:
        entries = [entry(1, "2024-01-01", cramps=2), entry(2, "2024-01-02")]
        series = hormones([1], [50.0], [1.0])

        rows = reconcile(entries, series, SUMMARY_FIELDS)

        assert rows[0].estrogen_level == "50.00"
        assert rows[1].estrogen_level == "N/A"
        assert rows[1].progesterone_level == "N/A"

    def test_phase_defaults_to_unknown(self) -> None:
        rows = reconcile([entry(1, "2024-01-01")], hormones([], [], []), SUMMARY_FIELDS)
        assert rows[0].phase == "Unknown"

    def test_reviewer_is_unassigned(self, entries, series) -> None:
        rows = reconcile(entries, series, SUMMARY_FIELDS)
        assert all(r.reviewer is Reviewer.UNASSIGNED for r in rows)
        assert all(not r.is_assigned for r in rows)
        assert rows[0].cell("reviewer") == "Assign reviewer"

    def test_uses_configured_summary_fields_by_default(self, entries, series) -> None:
        rows = reconcile(entries, series)
        assert rows[0].symptoms.startswith("Cramps: 4, Bloating: 2")


# ---------------------------------------------------------------------------
# Cycle day
# ---------------------------------------------------------------------------


class TestCycleDay:
    @pytest.mark.parametrize("offset", [0, 1, 13, 27, 40])
    def test_offset_from_cycle_start(self, offset: int) -> None:
        start = date(2026, 1, 10)
        e = entry(1, (start + timedelta(days=offset)).isoformat(),
                  cycle={"start_date": start.isoformat(), "phase": "luteal"})
        assert cycle_day_label(e, index=7) == f"Day {offset + 1}"

    def test_positional_fallback_without_start_date(self) -> None:
        e = entry(1, "2026-01-10", cycle={"phase": "luteal"})
        assert cycle_day_label(e, index=4) == "Day 5"

    def test_cycle_given_as_bare_id_falls_back(self) -> None:
        e = entry(1, "2026-01-10", cycle=3)
        assert e.cycle is not None and e.cycle.id == 3
        assert cycle_day_label(e, index=0) == "Day 1"

    def test_entry_before_cycle_start(self) -> None:
        e = entry(1, "2026-01-08", cycle={"start_date": "2026-01-10"})
        assert cycle_day_label(e, index=0) == "Day -1"

    def test_cycle_phase_carried_to_row(self, entries, series) -> None:
        rows = reconcile(entries, series, SUMMARY_FIELDS)
        assert [r.cycle_day for r in rows] == ["Day 1", "Day 2", "Day 3", "Day 4"]
        assert {r.phase for r in rows} == {"follicular"}


# ---------------------------------------------------------------------------
# Symptom summary / status
# ---------------------------------------------------------------------------


class TestSymptomSummary:
    def test_fields_in_fixed_order(self) -> None:
        e = entry(1, "2026-01-01", notes="tired", mood=4, cramps=1,
                  cervical_mucus="creamy", bloating=2)
        assert summarize_symptoms(e, SUMMARY_FIELDS) == (
            "Cramps: 1, Bloating: 2, Mood: 4, Cervical Mucus: creamy, Notes: tired"
        )

    @pytest.mark.parametrize(
        "fields",
        [{}, {"cramps": 0}, {"notes": ""}, {"mood": 0, "bloating": 0, "notes": None}],
    )
    def test_absent_or_zero_is_pending(self, fields: dict) -> None:
        rows = reconcile([entry(1, "2026-01-01", **fields)], hormones([], [], []), SUMMARY_FIELDS)
        assert rows[0].status is RowStatus.PENDING
        assert rows[0].symptoms == "None"

    @pytest.mark.parametrize(
        "fields",
        [{"cramps": 1}, {"bloating": 5}, {"mood": 3}, {"cervical_mucus": "watery"},
         {"notes": "spotting"}],
    )
    def test_any_present_field_is_done(self, fields: dict) -> None:
        rows = reconcile([entry(1, "2026-01-01", **fields)], hormones([], [], []), SUMMARY_FIELDS)
        assert rows[0].status is RowStatus.DONE

    def test_whitespace_only_note_is_done(self) -> None:
        e = entry(1, "2026-01-01", notes="   ")
        assert e.notes == "   "
        rows = reconcile([e], hormones([], [], []), SUMMARY_FIELDS)
        assert rows[0].status is RowStatus.DONE
        assert rows[0].symptoms == "Notes:    "

    def test_note_spacing_kept_in_summary(self) -> None:
        e = entry(1, "2026-01-01", notes="  spotting ")
        assert summarize_symptoms(e, SUMMARY_FIELDS) == "Notes:   spotting "

    def test_fields_outside_summary_do_not_count(self) -> None:
        e = entry(1, "2026-01-01", headache=4, energy=1, libido=5)
        rows = reconcile([e], hormones([], [], []), SUMMARY_FIELDS)
        assert rows[0].status is RowStatus.PENDING


# ---------------------------------------------------------------------------
# Positional hormone join
# ---------------------------------------------------------------------------


class TestHormoneJoin:
    def test_join_uses_list_position_not_cycle_day(self) -> None:
        # Entry dated day 10 of its cycle but first in the list: it gets the
        # sample labelled day 1.
        e = entry(1, "2026-01-19", cycle={"start_date": "2026-01-10"})
        series = hormones([1, 10], [11.0, 99.0], [0.1, 0.9])
        row = reconcile([e], series, SUMMARY_FIELDS)[0]
        assert row.cycle_day == "Day 10"
        assert row.estrogen_level == "11.00"

    def test_unordered_days_are_matched_by_value(self) -> None:
        entries = [entry(1, "2026-01-01"), entry(2, "2026-01-02")]
        series = hormones([2, 1], [20.0, 10.0], [2.0, 1.0])
        rows = reconcile(entries, series, SUMMARY_FIELDS)
        assert rows[0].estrogen_level == "10.00"
        assert rows[1].estrogen_level == "20.00"

    def test_duplicate_day_uses_first_sample(self) -> None:
        series = hormones([1, 1], [5.0, 7.0], [0.5, 0.7])
        row = reconcile([entry(1, "2026-01-01")], series, SUMMARY_FIELDS)[0]
        assert row.estrogen_level == "5.00"

    def test_series_days_not_starting_at_one(self) -> None:
        entries = [entry(1, "2026-01-01"), entry(2, "2026-01-02"), entry(3, "2026-01-03")]
        series = hormones([3], [33.333], [3.336])
        rows = reconcile(entries, series, SUMMARY_FIELDS)
        assert [r.estrogen_level for r in rows] == ["N/A", "N/A", "33.33"]
        assert rows[2].progesterone_level == "3.34"


# ---------------------------------------------------------------------------
# Purity
# ---------------------------------------------------------------------------


class TestPurity:
    def test_repeated_calls_are_identical(self, entries, series) -> None:
        first = reconcile(entries, series, SUMMARY_FIELDS)
        second = reconcile(entries, series, SUMMARY_FIELDS)
        assert first == second
        assert [r.to_dict() for r in first] == [r.to_dict() for r in second]

    def test_inputs_not_mutated(self, entries, series) -> None:
        before_entries = [e.model_dump() for e in entries]
        before_series = series.model_dump()
        reconcile(entries, series, SUMMARY_FIELDS)
        assert [e.model_dump() for e in entries] == before_entries
        assert series.model_dump() == before_series

    def test_order_preserved(self, series) -> None:
        shuffled = [entry(3, "2026-01-03"), entry(1, "2026-01-01"), entry(2, "2026-01-02")]
        rows = reconcile(shuffled, series, SUMMARY_FIELDS)
        assert [r.id for r in rows] == [3, 1, 2]
