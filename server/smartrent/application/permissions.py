from __future__ import annotations
"""server/smartrent/application/permissions.py
~~~~~~~~~~~~~~~~~~~~~~~~
Règle d'accès unique pour les alertes.

- admin : toute alerte, toute action ;
- user  : lecture et ajout de note sur ses propres alertes uniquement ;
- statut, priorité, assignation, suppression, statistiques : admin seulement.
"""
import logging
import uuid

from smartrent.domain.alert import Alert
from smartrent.domain.enums import UserRole
from smartrent.domain.errors import ForbiddenError

logger = logging.getLogger(__name__)


def _role(role) -> UserRole | None:
    try:
        return UserRole(role)
    except ValueError:
        return None


def is_admin(role) -> bool:
    return _role(role) is UserRole.ADMIN


def can_access_alert(alert: Alert, requester_id: uuid.UUID, role) -> bool:
    r = _role(role)
    if r is UserRole.ADMIN:
        return True
    if r is UserRole.USER:
        return alert.reporter_id == requester_id
    return False


def require_admin(role, action: str) -> None:
    if not is_admin(role):
        logger.info("Refus (%s) : rôle %r non admin", action, role)
        raise ForbiddenError(f"You do not have permission to {action}")


def require_alert_access(alert: Alert, requester_id: uuid.UUID, role, action: str) -> None:
    if not can_access_alert(alert, requester_id, role):
        logger.info("Refus (%s) : alerte %s, demandeur %s (%r)", action, alert.id, requester_id, role)
        raise ForbiddenError(f"You do not have permission to {action}")
