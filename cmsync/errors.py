"""Error taxonomy for the reconciliation engine.

Mapping failures (unsupported variants, invalid declarations) are fatal and
abort the whole cycle. Remote failures (conflict, not found, validation,
transport) are raised by the store and turned into diagnostics by
``cmsync.diagnostics.translate_error``.
"""

from __future__ import annotations

from dataclasses import dataclass


class CMSyncError(Exception):
    """Base class for every error raised by cmsync."""


class UnsupportedVariantError(CMSyncError):
    """A validation (or default value) kind the engine does not model."""


class UnsupportedDefaultValueTypeError(UnsupportedVariantError):
    """A default-value map holding a scalar type other than str or bool."""


class InvalidDeclarationError(CMSyncError):
    """Desired state that cannot be drafted into a remote payload."""


class ConflictError(CMSyncError):
    """A write was submitted with a version older than the remote's."""

    def __init__(self, resource_id: str, submitted: int, current: int):
        self.resource_id = resource_id
        self.submitted = submitted
        self.current = current
        super().__init__(
            f"version mismatch for '{resource_id}': "
            f"submitted {submitted}, remote is at {current}"
        )


class NotFoundError(CMSyncError):
    """The identity does not exist on the remote side."""

    def __init__(self, resource_id: str, kind: str = "content type"):
        self.resource_id = resource_id
        self.kind = kind
        super().__init__(f"{kind} '{resource_id}' not found")


class TransportError(CMSyncError):
    """Opaque failure reported by the transport collaborator."""


@dataclass
class ErrorDetail:
    """One entry of the ``details.errors`` list of a remote error payload."""

    details: str
    path: list[str | int] | None = None


class RemoteValidationError(CMSyncError):
    """Structured rejection from the remote system (message + details)."""

    def __init__(self, message: str, errors: list[ErrorDetail] | None = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)

    @classmethod
    def from_payload(cls, payload: dict) -> RemoteValidationError:
        """Build from ``{message, details?: {errors: [{path?, details}]}}``."""
        details = payload.get("details") or {}
        errors = [
            ErrorDetail(details=e.get("details", ""), path=e.get("path"))
            for e in details.get("errors") or []
        ]
        return cls(payload.get("message", ""), errors)

    def to_payload(self) -> dict:
        payload: dict = {"message": self.message}
        if self.errors:
            payload["details"] = {
                "errors": [
                    {"details": e.details, **({"path": e.path} if e.path is not None else {})}
                    for e in self.errors
                ]
            }
        return payload
