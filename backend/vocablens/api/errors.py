from fastapi import HTTPException, status

from vocablens.errors import (
    ConfigurationError,
    MalformedResponseError,
    PersistenceError,
    UpstreamError,
    VocabLensError,
)


def to_http_error(error: VocabLensError, action: str) -> HTTPException:
    """Map a service error to a generic, user-facing HTTP error."""
    if isinstance(error, ConfigurationError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{action} is not configured. Check the API key and try again.",
        )
    if isinstance(error, (UpstreamError, MalformedResponseError)):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"{action} failed. Please try again.",
        )
    if isinstance(error, PersistenceError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{action} failed. Your change was not saved.",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"{action} failed."
    )
