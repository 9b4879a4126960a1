"""Boundary between services (which raise) and callers (which get a result).

Controllers wrap every service call with :func:`run_operation` so that no
exception crosses into the HTTP layer: domain errors keep their message,
anything else is logged and reported as a generic failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .exceptions import (
    AuthorizationError,
    DomainError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


@dataclass(frozen=True)
class OperationResult:
    success: bool
    data: Any = None
    error: Optional[str] = None
    status_code: int = 200

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}


def status_code_for(error: DomainError) -> int:
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, StateConflictError):
        return 409
    return 400


def run_operation(operation: Callable[[], Any], *, name: str = "operation") -> OperationResult:
    try:
        return OperationResult(success=True, data=operation())
    except DomainError as e:
        logger.warning("%s rejected: %s (%s)", name, e, type(e).__name__)
        return OperationResult(success=False, error=str(e), status_code=status_code_for(e))
    except Exception:
        logger.exception("%s failed", name)
        return OperationResult(success=False, error=UNEXPECTED_ERROR_MESSAGE, status_code=500)
