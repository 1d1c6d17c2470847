"""Translation of identity errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from identity.dependencies.authentication import WWW_AUTHENTICATE
from identity.ports.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    IdentityError,
    NotFoundError,
    UnauthorizedError,
)

_STATUS_BY_KIND: tuple[tuple[type[IdentityError], int], ...] = (
    (BadRequestError, status.HTTP_400_BAD_REQUEST),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def to_http_exception(error: IdentityError) -> HTTPException:
    """Map an identity error to the HTTPException for its kind.

    Unknown kinds, including ``InternalError``, become a 500 carrying the
    error's (generic) message.
    """
    for kind, status_code in _STATUS_BY_KIND:
        if isinstance(error, kind):
            headers = (
                {"WWW-Authenticate": WWW_AUTHENTICATE}
                if status_code == status.HTTP_401_UNAUTHORIZED
                else None
            )
            return HTTPException(
                status_code=status_code, detail=error.message, headers=headers
            )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error.message
    )
