"""Error taxonomy shared by the use cases and their transports."""

from __future__ import annotations


class PeerLinkError(Exception):
    """Base class for failures raised by the application core."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class ValidationError(PeerLinkError, ValueError):
    """Malformed input, such as an empty message body."""

    kind = "validation"


class NotFoundError(PeerLinkError, LookupError):
    """A referenced user, message or notification does not exist."""

    kind = "not_found"


class SenderNotFoundError(NotFoundError):
    """The sender of a message could not be resolved after it was stored."""


class UnauthorizedError(PeerLinkError, PermissionError):
    """The acting user does not own the resource."""

    kind = "unauthorized"


class CollaboratorError(PeerLinkError, RuntimeError):
    """Persistence or subscription failure."""

    kind = "collaborator"


__all__ = [
    "PeerLinkError",
    "ValidationError",
    "NotFoundError",
    "SenderNotFoundError",
    "UnauthorizedError",
    "CollaboratorError",
]
