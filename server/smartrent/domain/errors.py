from __future__ import annotations
"""server/smartrent/domain/errors.py
~~~~~~~~~~~~~~~~~~~~~~~~
Taxonomie d'erreurs métier.

Chaque erreur porte un `code` (ErrorCode) que la couche application recopie
dans ses résultats et que la couche HTTP traduit en statut.
"""
from enum import Enum
from typing import Iterable


class ErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION = "VALIDATION"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"


class DomainError(Exception):
    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    code = ErrorCode.NOT_FOUND


class ForbiddenError(DomainError):
    code = ErrorCode.FORBIDDEN


class ValidationError(DomainError):
    code = ErrorCode.VALIDATION


class ConflictError(DomainError):
    code = ErrorCode.CONFLICT


class InvalidTransitionError(DomainError):
    """Transition refusée par la machine à états ; le message liste les options valides."""

    code = ErrorCode.INVALID_TRANSITION

    def __init__(self, current, requested, valid: Iterable) -> None:
        self.current = current
        self.requested = requested
        self.valid = sorted(valid, key=lambda s: getattr(s, "value", str(s)))
        options = ", ".join(getattr(s, "value", str(s)) for s in self.valid) or "none"
        super().__init__(
            f"Cannot change status from {_v(current)} to {_v(requested)}. "
            f"Valid transitions: {options}"
        )


def _v(x) -> str:
    return getattr(x, "value", str(x))
