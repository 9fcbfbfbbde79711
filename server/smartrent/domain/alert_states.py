# server/smartrent/domain/alert_states.py

from __future__ import annotations
"""
Cycle de vie d'une alerte : table de transitions par statut.

    PENDING ──► IN_PROGRESS ──► RESOLVED
       │             │
       └──────┬──────┘
              ▼
          CANCELLED

Le « state » n'est pas un objet stocké : il se déduit du statut courant à
chaque appel. RESOLVED et CANCELLED sont terminaux.
"""

from smartrent.domain.enums import AlertStatus
from smartrent.domain.errors import InvalidTransitionError

TRANSITIONS: dict[AlertStatus, frozenset[AlertStatus]] = {
    AlertStatus.PENDING: frozenset({AlertStatus.IN_PROGRESS, AlertStatus.CANCELLED}),
    AlertStatus.IN_PROGRESS: frozenset({AlertStatus.RESOLVED, AlertStatus.CANCELLED}),
    AlertStatus.RESOLVED: frozenset(),
    AlertStatus.CANCELLED: frozenset(),
}

DESCRIPTIONS: dict[AlertStatus, str] = {
    AlertStatus.PENDING: "Alert reported, waiting to be handled",
    AlertStatus.IN_PROGRESS: "Alert being handled by maintenance staff",
    AlertStatus.RESOLVED: "Alert resolved",
    AlertStatus.CANCELLED: "Alert cancelled",
}


def valid_transitions(status: AlertStatus) -> frozenset[AlertStatus]:
    return TRANSITIONS[AlertStatus(status)]


def can_transition(current: AlertStatus, target: AlertStatus) -> bool:
    try:
        target = AlertStatus(target)
    except ValueError:
        return False
    return target in valid_transitions(current)


def ensure_transition(current: AlertStatus, target: AlertStatus) -> AlertStatus:
    """Retourne le statut cible normalisé, ou lève InvalidTransitionError."""
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target, valid_transitions(current))
    return AlertStatus(target)


def is_terminal(status: AlertStatus) -> bool:
    return not valid_transitions(status)


def describe(status: AlertStatus) -> str:
    return DESCRIPTIONS[AlertStatus(status)]
