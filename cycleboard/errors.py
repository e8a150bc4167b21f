"""Error taxonomy for the dashboard and symptom-logging flows.

Read failures and write failures are terminal at the UI boundary: callers
reset their loading flag and surface a message.  Nothing here retries.
"""

from __future__ import annotations


class CycleBoardError(Exception):
    """Base class for all CycleBoard errors."""


class FetchFailure(CycleBoardError):
    """A read against the data service failed.

    Covers transport errors, non-2xx responses, and payloads that do not
    decode into the expected shape.
    """

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class SubmitFailure(CycleBoardError):
    """A create or update against the data service failed.

    Attributes:
        detail: Backend-supplied detail message, or "Unknown error".
    """

    def __init__(self, detail: str, *, status_code: int | None = None) -> None:
        super().__init__(f"Failed to save symptoms: {detail}")
        self.detail = detail
        self.status_code = status_code


class SymptomValidationError(CycleBoardError, ValueError):
    """Local form validation failed.  Never reaches the network."""


class FormBusy(CycleBoardError):
    """The form is already loading an entry or saving one."""
