"""Custom exceptions for the content layer.

Every error the data layer signals is an ``HTTPException`` so that FastAPI
turns it into the right response without extra handlers, while views and
tests can still catch each kind on its own.
"""

from typing import Optional

from fastapi import HTTPException, status


class ContentError(HTTPException):
    """Base exception for content reads and writes."""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Error inesperado"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            status_code=self.default_status,
            detail=detail or self.default_detail,
        )

    def __str__(self) -> str:
        return str(self.detail)


class ValidationError(ContentError):
    """A required field is missing or malformed. Raised before any database call."""

    default_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Datos inválidos"


class NotFoundError(ContentError):
    """The expected row does not exist."""

    default_status = status.HTTP_404_NOT_FOUND
    default_detail = "Recurso no encontrado"


class ConstraintError(ContentError):
    """
    The database rejected a write, e.g. a duplicate slug.

    The driver message is kept verbatim in ``detail``. Never retried.
    """

    default_status = status.HTTP_409_CONFLICT
    default_detail = "La operación viola una restricción de la base de datos"


class TransientError(ContentError):
    """
    Network or timeout failure that is expected to go away on retry.

    ``exhausted_retries`` is set once the retry policy gave up; ``attempts``
    then holds the number of invocations made.
    """

    default_status = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Servicio temporalmente no disponible"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail)
        self.exhausted_retries = False
        self.attempts = 0


__all__ = [
    "ContentError",
    "ValidationError",
    "NotFoundError",
    "ConstraintError",
    "TransientError",
]
