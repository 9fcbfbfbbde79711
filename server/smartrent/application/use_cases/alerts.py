from __future__ import annotations
"""server/smartrent/application/use_cases/alerts.py
~~~~~~~~~~~~~~~~~~~~~~~~
Use-cases alertes.

Chaque classe est un coordinateur sans état :
permission -> chargement -> mutation/lecture -> persistance -> résultat.
Les collaborateurs sont injectés par le constructeur (cf. smartrent.infrastructure.container).
"""
import logging
import uuid
from datetime import datetime
from typing import Optional, Sequence

from smartrent.application.permissions import is_admin, require_admin, require_alert_access
from smartrent.application.results import UseCase
from smartrent.core.config import settings
from smartrent.domain.alert import MAX_IMAGES, Alert
from smartrent.domain.enums import AlertCategory, AlertPriority, AlertStatus
from smartrent.domain.errors import NotFoundError, ValidationError
from smartrent.domain.repositories import (
    SORT_FIELDS,
    SORT_ORDERS,
    AlertFilters,
    AlertQueryOptions,
    AlertRepository,
    AlertStats,
    DepartmentRepository,
    PaginatedAlerts,
    UserRepository,
)

logger = logging.getLogger(__name__)

MAX_NOTE_LENGTH = 500


def _enum(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {field_name} {value!r}; expected one of: {allowed}") from e


def _enum_list(enum_cls, value, field_name: str):
    if value is None:
        return None
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [_enum(enum_cls, v, field_name) for v in value]
        return items or None
    return _enum(enum_cls, value, field_name)


def _clean_note(note: Optional[str]) -> str:
    text = (note or "").strip()
    if not text:
        raise ValidationError("Note cannot be empty")
    if len(text) > MAX_NOTE_LENGTH:
        raise ValidationError(f"Note cannot exceed {MAX_NOTE_LENGTH} characters")
    return text


def _load(alerts: AlertRepository, alert_id: uuid.UUID) -> Alert:
    alert = alerts.find_by_id(alert_id)
    if alert is None:
        raise NotFoundError("Alert not found")
    return alert


# ──────────────────────────────────────────────────────────────────────────────
# Création / lecture
# ──────────────────────────────────────────────────────────────────────────────

class CreateAlertUseCase(UseCase):
    failure_message = "Could not create the alert"

    def __init__(
        self,
        alerts: AlertRepository,
        departments: DepartmentRepository,
        users: UserRepository,
    ) -> None:
        self.alerts = alerts
        self.departments = departments
        self.users = users

    def _execute(
        self,
        *,
        title: str,
        description: str,
        category: AlertCategory,
        priority: AlertPriority,
        reporter_id: uuid.UUID,
        department_id: uuid.UUID,
        images: Optional[Sequence[str]] = None,
    ) -> Alert:
        if not self.users.exists(reporter_id):
            raise NotFoundError("User not found")
        if not self.departments.exists(department_id):
            raise NotFoundError("Department not found")
        if images and len(images) > MAX_IMAGES:
            raise ValidationError(f"Cannot upload more than {MAX_IMAGES} images")

        alert = Alert(
            title=title,
            description=description,
            category=_enum(AlertCategory, category, "category"),
            priority=_enum(AlertPriority, priority, "priority"),
            reporter_id=reporter_id,
            department_id=department_id,
            images=images,
        )
        return self.alerts.create(alert)


class GetAlertByIdUseCase(UseCase):
    failure_message = "Could not fetch the alert"

    def __init__(self, alerts: AlertRepository) -> None:
        self.alerts = alerts

    def _execute(self, *, alert_id: uuid.UUID, requester_id: uuid.UUID, requester_role: str) -> Alert:
        alert = _load(self.alerts, alert_id)
        require_alert_access(alert, requester_id, requester_role, "view this alert")
        return alert


class GetAlertsUseCase(UseCase):
    """
    Liste paginée, filtrée selon le rôle : un non-admin ne voit que ses alertes,
    quels que soient les filtres demandés. `search` bascule sur la recherche
    plein texte, toujours bornée par les mêmes filtres.
    """

    failure_message = "Could not fetch alerts"

    def __init__(self, alerts: AlertRepository) -> None:
        self.alerts = alerts

    def _execute(
        self,
        *,
        requester_id: uuid.UUID,
        requester_role: str,
        filters: Optional[AlertFilters] = None,
        page: int = 1,
        limit: Optional[int] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        search: Optional[str] = None,
    ) -> PaginatedAlerts:
        filters = self._scoped_filters(filters or AlertFilters(), requester_id, requester_role)
        options = self._options(page, limit, sort_by, sort_order)

        if search and search.strip():
            return self.alerts.search_by_text(search.strip(), filters, options)
        return self.alerts.find_many(filters, options)

    @staticmethod
    def _scoped_filters(filters: AlertFilters, requester_id: uuid.UUID, role: str) -> AlertFilters:
        scoped = AlertFilters(
            reporter_id=filters.reporter_id,
            department_id=filters.department_id,
            assigned_to=filters.assigned_to,
            status=_enum_list(AlertStatus, filters.status, "status"),
            category=_enum_list(AlertCategory, filters.category, "category"),
            priority=_enum_list(AlertPriority, filters.priority, "priority"),
            date_from=filters.date_from,
            date_to=filters.date_to,
            is_active=filters.is_active,
        )
        if not is_admin(role):
            scoped.reporter_id = requester_id
        return scoped

    @staticmethod
    def _options(page: int, limit: Optional[int], sort_by: str, sort_order: str) -> AlertQueryOptions:
        if sort_by not in SORT_FIELDS:
            raise ValidationError(f"Invalid sort field {sort_by!r}; expected one of: {', '.join(SORT_FIELDS)}")
        if sort_order not in SORT_ORDERS:
            raise ValidationError("sort_order must be 'asc' or 'desc'")
        limit = settings.ALERT_PAGE_SIZE_DEFAULT if limit is None else int(limit)
        limit = max(1, min(limit, settings.ALERT_PAGE_SIZE_MAX))
        return AlertQueryOptions(page=max(1, int(page or 1)), limit=limit, sort_by=sort_by, sort_order=sort_order)


class GetAlertStatsUseCase(UseCase):
    failure_message = "Could not compute alert statistics"

    def __init__(self, alerts: AlertRepository) -> None:
        self.alerts = alerts

    def _execute(
        self,
        *,
        requester_role: str,
        department_id: Optional[uuid.UUID] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> AlertStats:
        require_admin(requester_role, "view alert statistics")
        filters = AlertFilters(department_id=department_id, date_from=date_from, date_to=date_to)
        return self.alerts.get_stats(
            filters,
            overdue_days=settings.ALERT_OVERDUE_DAYS,
            trend_months=settings.ALERT_TREND_MONTHS,
        )


# ──────────────────────────────────────────────────────────────────────────────
# Mutations
# ──────────────────────────────────────────────────────────────────────────────

class UpdateAlertStatusUseCase(UseCase):
    """
    Transition de statut (admin). En entrant dans IN_PROGRESS sans assigné,
    le demandeur devient l'assigné. Une note optionnelle accompagne le changement.
    """

    failure_message = "Could not update the alert status"

    def __init__(self, alerts: AlertRepository) -> None:
        self.alerts = alerts

    def _execute(
        self,
        *,
        alert_id: uuid.UUID,
        new_status: AlertStatus,
        requester_id: uuid.UUID,
        requester_role: str,
        notes: Optional[str] = None,
    ) -> Alert:
        require_admin(requester_role, "update alert status")
        target = _enum(AlertStatus, new_status, "status")
        note = _clean_note(notes) if notes and notes.strip() else None

        alert = _load(self.alerts, alert_id)
        previous = alert.status
        alert.transition_to(target)

        if note:
            alert.add_note(note, requester_id)
        if target is AlertStatus.IN_PROGRESS and alert.assigned_to is None:
            alert.assign_to(requester_id)

        saved = self.alerts.update(alert)
        logger.info("Alerte %s : %s -> %s (par %s)", alert_id, previous.value, target.value, requester_id)
        return saved


class AddAlertNoteUseCase(UseCase):
    failure_message = "Could not add the note"

    def __init__(self, alerts: AlertRepository) -> None:
        self.alerts = alerts

    def _execute(
        self,
        *,
        alert_id: uuid.UUID,
        note: str,
        author_id: uuid.UUID,
        requester_role: str,
    ) -> Alert:
        alert = _load(self.alerts, alert_id)
        require_alert_access(alert, author_id, requester_role, "add notes to this alert")
        alert.add_note(_clean_note(note), author_id)
        return self.alerts.update(alert)


class AssignAlertUseCase(UseCase):
    failure_message = "Could not assign the alert"

    def __init__(self, alerts: AlertRepository, users: UserRepository) -> None:
        self.alerts = alerts
        self.users = users

    def _execute(
        self,
        *,
        alert_id: uuid.UUID,
        staff_id: uuid.UUID,
        requester_id: uuid.UUID,
        requester_role: str,
    ) -> Alert:
        require_admin(requester_role, "assign alerts")
        alert = _load(self.alerts, alert_id)
        if not self.users.exists(staff_id):
            raise NotFoundError("Assignee not found")
        alert.assign_to(staff_id)
        saved = self.alerts.update(alert)
        logger.info("Alerte %s assignée à %s (par %s)", alert_id, staff_id, requester_id)
        return saved


class UpdateAlertPriorityUseCase(UseCase):
    failure_message = "Could not update the alert priority"

    def __init__(self, alerts: AlertRepository) -> None:
        self.alerts = alerts

    def _execute(
        self,
        *,
        alert_id: uuid.UUID,
        priority: AlertPriority,
        requester_id: uuid.UUID,
        requester_role: str,
    ) -> Alert:
        require_admin(requester_role, "change alert priority")
        new_priority = _enum(AlertPriority, priority, "priority")
        alert = _load(self.alerts, alert_id)
        alert.update_priority(new_priority)
        return self.alerts.update(alert)


class DeleteAlertUseCase(UseCase):
    """Suppression définitive : nettoyage administratif exceptionnel uniquement."""

    failure_message = "Could not delete the alert"

    def __init__(self, alerts: AlertRepository) -> None:
        self.alerts = alerts

    def _execute(self, *, alert_id: uuid.UUID, requester_role: str) -> bool:
        require_admin(requester_role, "delete alerts")
        if not self.alerts.delete(alert_id):
            raise NotFoundError("Alert not found")
        return True
