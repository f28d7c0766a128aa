from fastapi import HTTPException, status

from vidya.config import settings


def clear_cookie_headers() -> dict[str, str]:
    """Set-Cookie header that expires the auth cookie on an error response."""
    return {
        "set-cookie": (
            f'{settings.AUTH_COOKIE_NAME}=""; expires=Thu, 01 Jan 1970 00:00:00 GMT; '
            "Max-Age=0; Path=/; SameSite=lax"
        )
    }


class CredentialsException(HTTPException):
    def __init__(self, detail: str = "Authentication required", clear_cookie: bool = False):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers=clear_cookie_headers() if clear_cookie else None,
        )


class ForbiddenException(HTTPException):
    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class SurveyRequiredException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": "Survey completion required", "redirectTo": "/survey"},
        )


class NotFoundException(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictException(HTTPException):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ValidationException(HTTPException):
    def __init__(self, detail: str = "Validation error"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AccountLockedException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_423_LOCKED,
            detail="Account locked due to multiple failed attempts. Please contact support.",
        )


class AdvisoryUnavailableException(HTTPException):
    def __init__(self, detail: str = "AI advisory service is temporarily unavailable"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
