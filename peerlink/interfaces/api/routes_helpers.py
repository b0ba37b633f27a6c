"""Helpers shared by the API routers."""

from __future__ import annotations

from fastapi import HTTPException, status

from peerlink.domain.exceptions import (
    CollaboratorError,
    NotFoundError,
    PeerLinkError,
    UnauthorizedError,
    ValidationError,
)


def to_http_exception(
    exc: PeerLinkError, *, hide_ownership: bool = False, resource: str = "Resource"
) -> HTTPException:
    """Translate a core error into the matching HTTP failure.

    With ``hide_ownership`` an :class:`UnauthorizedError` is reported exactly like
    a missing resource, so identifiers owned by others stay hidden.
    """

    if isinstance(exc, UnauthorizedError) and hide_ownership:
        exc = NotFoundError(f"{resource} not found")

    if isinstance(exc, ValidationError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, UnauthorizedError):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, CollaboratorError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=status_code, detail=exc.to_dict())
