from __future__ import annotations
"""
server/smartrent/api/schemas/alert.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Pydantic schemas pour les alertes.

- Les enums restent typées : une valeur inconnue (ex: "CRITICA") est rejetée en 422
  avant même d'atteindre le use-case.
- Les bornes de longueur reprennent celles de l'entité (100 / 500) ; l'entité
  reste l'autorité finale (trim, vide après trim, etc.).
- Les schémas de sortie sont construits depuis les entités du domaine
  (`from_entity`), jamais depuis les lignes ORM.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from smartrent.domain.alert import (
    MAX_DESCRIPTION_LENGTH,
    MAX_IMAGES,
    MAX_TITLE_LENGTH,
    Alert,
    AlertNote,
)
from smartrent.domain.enums import AlertCategory, AlertPriority, AlertStatus
from smartrent.domain.repositories import AlertStats, PaginatedAlerts, Pagination


class AlertCreateIn(BaseModel):
    """Payload de création. Le rapporteur est toujours l'utilisateur authentifié."""

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str = Field(..., min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    category: AlertCategory
    priority: AlertPriority = AlertPriority.MEDIUM
    department_id: uuid.UUID
    # URLs déjà hébergées (l'upload est fait ailleurs).
    images: list[str] = Field(default_factory=list, max_length=MAX_IMAGES)

    # Avant la borne MAX_IMAGES : les entrées vides ne comptent pas.
    @field_validator("images", mode="before")
    @classmethod
    def _strip_images(cls, v):
        if isinstance(v, (list, tuple)):
            v = [s.strip() if isinstance(s, str) else s for s in v]
            return [s for s in v if s != ""]
        return v


class AlertStatusIn(BaseModel):
    status: AlertStatus
    # Longueur contrôlée après trim par le use-case.
    notes: Optional[str] = None


class AlertNoteIn(BaseModel):
    note: str


class AlertAssignIn(BaseModel):
    staff_id: uuid.UUID


class AlertPriorityIn(BaseModel):
    priority: AlertPriority


class AlertNoteOut(BaseModel):
    author_id: uuid.UUID
    text: str
    created_at: datetime
    formatted: str

    @classmethod
    def from_entity(cls, note: AlertNote) -> "AlertNoteOut":
        return cls(
            author_id=note.author_id,
            text=note.text,
            created_at=note.created_at,
            formatted=note.format(),
        )


class AlertOut(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    category: AlertCategory
    priority: AlertPriority
    status: AlertStatus
    status_description: str
    valid_transitions: list[AlertStatus]
    reporter_id: uuid.UUID
    department_id: uuid.UUID
    assigned_to: Optional[uuid.UUID] = None
    images: list[str]
    notes: list[AlertNoteOut]
    is_active: bool
    days_open: int
    version: int
    created_at: datetime
    updated_at: datetime
    resolved_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, alert: Alert) -> "AlertOut":
        return cls(
            id=alert.id,
            title=alert.title,
            description=alert.description,
            category=alert.category,
            priority=alert.priority,
            status=alert.status,
            status_description=alert.state_description(),
            valid_transitions=sorted(alert.valid_transitions(), key=lambda s: s.value),
            reporter_id=alert.reporter_id,
            department_id=alert.department_id,
            assigned_to=alert.assigned_to,
            images=alert.images,
            notes=[AlertNoteOut.from_entity(n) for n in alert.notes],
            is_active=alert.is_active(),
            days_open=alert.days_open(),
            version=alert.version,
            created_at=alert.created_at,
            updated_at=alert.updated_at,
            resolved_at=alert.resolved_at,
        )


class PaginationOut(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_entity(cls, p: Pagination) -> "PaginationOut":
        return cls(
            current_page=p.current_page,
            total_pages=p.total_pages,
            total_count=p.total_count,
            has_next=p.has_next,
            has_previous=p.has_previous,
        )


class AlertPageOut(BaseModel):
    alerts: list[AlertOut]
    pagination: PaginationOut

    @classmethod
    def from_entity(cls, page: PaginatedAlerts) -> "AlertPageOut":
        return cls(
            alerts=[AlertOut.from_entity(a) for a in page.alerts],
            pagination=PaginationOut.from_entity(page.pagination),
        )


class MonthlyTrendOut(BaseModel):
    month: str
    count: int
    resolved: int


class AlertStatsOut(BaseModel):
    total: int
    by_status: dict[str, int]
    by_category: dict[str, int]
    by_priority: dict[str, int]
    average_resolution_days: float
    overdue_count: int
    active_count: int
    monthly_trend: list[MonthlyTrendOut]

    @classmethod
    def from_entity(cls, stats: AlertStats) -> "AlertStatsOut":
        return cls(
            total=stats.total,
            by_status=stats.by_status,
            by_category=stats.by_category,
            by_priority=stats.by_priority,
            average_resolution_days=stats.average_resolution_days,
            overdue_count=stats.overdue_count,
            active_count=stats.active_count,
            monthly_trend=[
                MonthlyTrendOut(month=p.month, count=p.count, resolved=p.resolved)
                for p in stats.monthly_trend
            ],
        )


class EnumOptionOut(BaseModel):
    """Entrée de liste déroulante : valeur wire + libellé lisible."""

    value: str
    label: str
