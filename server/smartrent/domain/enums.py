from __future__ import annotations
"""server/smartrent/domain/enums.py
~~~~~~~~~~~~~~~~~~~~~~~~
Vocabulaire métier échangé avec les clients.

⚠️ Les *valeurs* sont le contrat wire avec les clients existants : ne pas les
traduire ni les renommer (seuls les noms Python sont libres).
"""
from enum import Enum


class AlertStatus(str, Enum):
    PENDING = "PENDIENTE"
    IN_PROGRESS = "EN_PROGRESO"
    RESOLVED = "RESUELTO"
    CANCELLED = "CANCELADO"


class AlertCategory(str, Enum):
    MAINTENANCE = "MANTENIMIENTO"
    CLEANING = "LIMPIEZA"
    SECURITY = "SEGURIDAD"
    SERVICES = "SERVICIOS"
    NOISE = "RUIDO"
    OTHER = "OTRO"


class AlertPriority(str, Enum):
    LOW = "BAJA"
    MEDIUM = "MEDIA"
    HIGH = "ALTA"
    URGENT = "URGENTE"


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class DepartmentStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"


# Ordres métier utilisés pour les tris (et non l'ordre alphabétique des valeurs).
PRIORITY_RANK: dict[AlertPriority, int] = {
    AlertPriority.LOW: 0,
    AlertPriority.MEDIUM: 1,
    AlertPriority.HIGH: 2,
    AlertPriority.URGENT: 3,
}

STATUS_RANK: dict[AlertStatus, int] = {
    AlertStatus.PENDING: 0,
    AlertStatus.IN_PROGRESS: 1,
    AlertStatus.RESOLVED: 2,
    AlertStatus.CANCELLED: 3,
}

ACTIVE_STATUSES: frozenset[AlertStatus] = frozenset({AlertStatus.PENDING, AlertStatus.IN_PROGRESS})
CLOSED_STATUSES: frozenset[AlertStatus] = frozenset({AlertStatus.RESOLVED, AlertStatus.CANCELLED})
