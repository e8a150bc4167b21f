"""Symptom logging form: per-date load, local validation, create-or-update."""

from cycleboard.symptoms.form import SubmitOutcome, SymptomForm

__all__ = ["SubmitOutcome", "SymptomForm"]
