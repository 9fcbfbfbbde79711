from __future__ import annotations
"""
server/smartrent/presentation/api/deps.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Dépendances communes côté "presentation" (API).

Contenu :
- get_current_user : lit `Authorization: Bearer <jwt>`, vérifie le JWT,
  charge l'utilisateur en DB et expose (id, rôle).
- get_alert_use_cases / get_department_use_cases : use-cases construits
  sur la Session de la requête.

Conventions :
- 401 si en-tête manquant / token invalide / user introuvable
- 403 si user inactif
- Le rôle retenu est celui stocké en base ; le claim `role` du jeton n'est
  qu'indicatif (un rôle révoqué prend effet sans attendre l'expiration).
"""

import uuid
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from smartrent.core.security import decode_token
from smartrent.domain.enums import UserRole
from smartrent.infrastructure.container import (
    AlertUseCases,
    DepartmentUseCases,
    build_alert_use_cases,
    build_department_use_cases,
)
from smartrent.infrastructure.persistence.database.session import get_db
from smartrent.infrastructure.persistence.repositories.user_repository import UserRepository

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: uuid.UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """
    Récupère l'utilisateur courant à partir du jeton Bearer.

    Raises:
        HTTPException(401): en-tête manquant, token invalide/expiré, utilisateur introuvable
        HTTPException(403): utilisateur désactivé
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("missing_token")

    claims = decode_token(credentials.credentials)
    if not claims or not claims.get("sub"):
        raise _unauthorized("invalid_token")

    try:
        user_id = uuid.UUID(str(claims["sub"]))
    except ValueError:
        raise _unauthorized("invalid_token")

    user = UserRepository(db).find_by_id(user_id)
    if user is None:
        raise _unauthorized("user_not_found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="user_disabled")

    return CurrentUser(id=user.id, role=user.role)


def get_alert_use_cases(db: Session = Depends(get_db)) -> AlertUseCases:
    return build_alert_use_cases(db)


def get_department_use_cases(db: Session = Depends(get_db)) -> DepartmentUseCases:
    return build_department_use_cases(db)
