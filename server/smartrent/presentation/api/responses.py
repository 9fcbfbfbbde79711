from __future__ import annotations
"""
server/smartrent/presentation/api/responses.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Traduction résultat de use-case -> réponse HTTP.

- ok      : commit de la transaction de la requête, valeur renvoyée ;
- échec   : rollback, HTTPException au statut correspondant à l'ErrorCode,
            corps `{"detail": {"code", "message", ...details}}`.
"""

from typing import TypeVar

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from smartrent.application.results import UseCaseResult
from smartrent.domain.errors import ErrorCode

T = TypeVar("T")

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def unwrap(result: UseCaseResult[T], db: Session) -> T:
    if result.ok:
        db.commit()
        return result.value

    db.rollback()
    code = result.error_code or ErrorCode.INTERNAL
    detail = {"code": code.value, "message": result.error}
    if result.details:
        detail.update(result.details)
    raise HTTPException(
        status_code=STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=detail,
    )
