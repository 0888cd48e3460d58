"""Error taxonomy shared by services and routes.

Services raise these; ``cleanstock.main`` renders them as
``{"message": ..., "error": ...}`` with the matching HTTP status.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, error: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.error = error
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.error:
            body["error"] = self.error
        return body


class ValidationError(AppError):
    status_code = 400


class ConflictError(AppError):
    status_code = 400


class InvalidTransition(AppError):
    """Order status change not allowed from the current status."""

    status_code = 400


class LowStockViolation(AppError):
    """Stock movement would take a product below zero."""

    status_code = 400


class AuthError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class StoreError(AppError):
    status_code = 500
