from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Deterministic rejection of a call. Mapped to an HTTP response in app.main."""

    code = "error"
    status_code = 400

    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class NotFound(DomainError):
    code = "not_found"
    status_code = 404


class Forbidden(DomainError):
    code = "forbidden"
    status_code = 403


class Conflict(DomainError):
    code = "conflict"
    status_code = 409


class InvalidState(DomainError):
    code = "invalid_state"
    status_code = 409

    def __init__(self, *, status: str, transition: str):
        super().__init__(
            f"Cannot {transition} a hotel in status '{status}'",
            details=[{"status": status, "transition": transition}],
        )
        self.status = status
        self.transition = transition
