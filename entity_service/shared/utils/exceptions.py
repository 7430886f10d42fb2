"""
Centralized exceptions for consistent error handling.

Every exception is an HTTPException so that a web layer embedding the
services can return them unchanged, and each one logs itself on creation.

Usage:
    from entity_service.shared.utils.exceptions import NotFoundError, ValidationError

    raise NotFoundError("User", user_id)
    raise NotFoundError("User", ids, missing=[99])
    raise ValidationError("Unknown operator 'between'", field="operator")
"""

from fastapi import HTTPException, status
from typing import Any

from entity_service.shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        # Log the error with context
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def __str__(self) -> str:
        return str(self.detail)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Carries the identifiers that could not be resolved in ``missing``.

    Usage:
        raise NotFoundError("User", 123)
        raise NotFoundError("User", [1, 2, 99], missing=[99])
    """

    def __init__(
        self,
        entity: str,
        entity_id: Any = None,
        missing: list[Any] | None = None,
        **log_context: Any,
    ):
        self.entity = entity
        self.entity_id = entity_id
        if missing is None:
            if isinstance(entity_id, (list, tuple)):
                missing = list(entity_id)
            elif entity_id is not None:
                missing = [entity_id]
            else:
                missing = []
        self.missing = missing

        if isinstance(entity_id, (list, tuple)):
            ids_str = ", ".join(str(i) for i in self.missing)
            detail = f"No query results for {entity} with IDs [{ids_str}]"
        elif entity_id is not None:
            detail = f"{entity} with ID {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            missing=self.missing,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Unknown column 'nickname' on User", field="nickname")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Failed to seed users")
    """

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class ConfigurationError(InternalError):
    """A service was constructed or used without the collaborators it needs."""

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(detail, **log_context)

