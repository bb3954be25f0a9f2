"""
Error taxonomy shared by the repository, credential and entity layers.

The core raises these; `main.py` maps each kind to an HTTP status. Nothing
below the router layer should raise `HTTPException` directly.
"""

from __future__ import annotations

from typing import Any


class AppError(RuntimeError):
    pass


class NotFoundError(AppError):
    pass


class InvalidCredentialError(AppError):
    pass


class InvalidTokenError(AppError):
    pass


class ConflictError(AppError):
    pass


class InvalidPasswordError(AppError):
    pass


class PersistenceError(AppError):
    """
    The document store call failed. The message names the attempted operation;
    the store's own exception is chained as `__cause__`.
    """


class ConfigurationError(AppError):
    pass


# Malformed predicate triples are a caller bug, not a store failure.
class QueryError(ValueError):
    pass


class RequestValidationFailed(AppError):
    def __init__(self, violations: list[dict[str, Any]]):
        super().__init__("Request validation failed.")
        self.violations = violations
