"""
Application error type.

Every error raised by the API layer itself is an ``AppError`` tagged with an
``ErrorKind``. Handlers dispatch on the kind, never on the exception class.
"""

import enum
from fastapi import Request, status
from fastapi.responses import JSONResponse


class ErrorKind(str, enum.Enum):
    """Kinds of client-facing failures and the HTTP status each maps to."""
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


class AppError(Exception):
    """A failure with a kind and a human-readable message."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @classmethod
    def bad_request(cls, message: str = "Bad Request") -> "AppError":
        return cls(ErrorKind.BAD_REQUEST, message)

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized") -> "AppError":
        return cls(ErrorKind.UNAUTHORIZED, message)

    @classmethod
    def forbidden(cls, message: str = "Forbidden") -> "AppError":
        return cls(ErrorKind.FORBIDDEN, message)

    @classmethod
    def not_found(cls, message: str = "Not Found") -> "AppError":
        return cls(ErrorKind.NOT_FOUND, message)

    def __repr__(self):
        return f"<AppError(kind={self.kind.value}, message='{self.message}')>"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as ``{"detail": message}`` with the kind's status."""
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.UNAUTHORIZED else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )
