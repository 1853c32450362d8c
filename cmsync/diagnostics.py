"""Diagnostics — turn errors into ordered, severity-tagged messages.

``translate_error`` is the single place where the different error shapes
(structured remote validation errors and opaque exceptions) become one
uniform list for display. Callers show diagnostics in the order produced:
detail warnings first, then the error that ended the operation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from cmsync.errors import ErrorDetail, RemoteValidationError


class Severity(Enum):
    ERROR = "error"  # The operation failed
    WARNING = "warning"  # Context for an error


@dataclass
class Diagnostic:
    """A single message to surface to the user."""

    severity: Severity
    summary: str


def _format_detail(detail: ErrorDetail) -> str:
    path = ".".join(str(p) for p in detail.path or [])
    return f"{detail.details} ({path})"


def translate_error(err: BaseException | None) -> list[Diagnostic]:
    """Translate an error into diagnostics.

    Args:
        err: Any exception, or None.

    Returns:
        ``[]`` for None. For a ``RemoteValidationError`` one warning per
        nested detail, in order, followed by one error with the top-level
        message. For anything else a single error with the exception text.
    """
    if err is None:
        return []

    if isinstance(err, RemoteValidationError):
        diagnostics = [
            Diagnostic(severity=Severity.WARNING, summary=_format_detail(d)) for d in err.errors
        ]
        diagnostics.append(Diagnostic(severity=Severity.ERROR, summary=err.message))
        return diagnostics

    return [Diagnostic(severity=Severity.ERROR, summary=str(err))]


def has_error(diagnostics: list[Diagnostic]) -> bool:
    return any(d.severity == Severity.ERROR for d in diagnostics)


def errors(diagnostics: list[Diagnostic]) -> list[Diagnostic]:
    return [d for d in diagnostics if d.severity == Severity.ERROR]


def warnings(diagnostics: list[Diagnostic]) -> list[Diagnostic]:
    return [d for d in diagnostics if d.severity == Severity.WARNING]
