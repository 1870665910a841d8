from fastapi import HTTPException, status

from app.core.exceptions import (
    SchedulingError, ValidationError, InvalidTransitionError, AuthorizationError, NotFoundError
)


def to_http_exception(error: SchedulingError) -> HTTPException:
    """Map a scheduling error onto the HTTP status it is answered with."""
    if isinstance(error, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, AuthorizationError):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(error, InvalidTransitionError):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(error, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return HTTPException(status_code=status_code, detail=error.message)
