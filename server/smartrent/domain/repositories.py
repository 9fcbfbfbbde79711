from __future__ import annotations
"""server/smartrent/domain/repositories.py
~~~~~~~~~~~~~~~~~~~~~~~~
Contrats de persistance consommés par les use-cases.

Les implémentations (SQLAlchemy) vivent dans
`smartrent.infrastructure.persistence.repositories` ; elles retournent des
entités du domaine, jamais des lignes ORM.
"""
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Protocol, Sequence, Union

from smartrent.domain.alert import Alert
from smartrent.domain.department import Department, User
from smartrent.domain.enums import AlertCategory, AlertPriority, AlertStatus

SORT_FIELDS = ("createdAt", "updatedAt", "priority", "status")
SORT_ORDERS = ("asc", "desc")


@dataclass
class AlertFilters:
    reporter_id: Optional[uuid.UUID] = None
    department_id: Optional[uuid.UUID] = None
    assigned_to: Optional[uuid.UUID] = None
    status: Union[AlertStatus, Sequence[AlertStatus], None] = None
    category: Union[AlertCategory, Sequence[AlertCategory], None] = None
    priority: Union[AlertPriority, Sequence[AlertPriority], None] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    is_active: Optional[bool] = None


@dataclass
class AlertQueryOptions:
    page: int = 1
    limit: int = 10
    sort_by: str = "createdAt"
    sort_order: str = "desc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Pagination:
    current_page: int
    total_pages: int
    total_count: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, *, page: int, limit: int, total_count: int) -> "Pagination":
        total_pages = math.ceil(total_count / limit) if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_count=total_count,
            has_next=page < total_pages,
            has_previous=page > 1,
        )


@dataclass
class PaginatedAlerts:
    alerts: list[Alert]
    pagination: Pagination


@dataclass
class MonthlyTrendPoint:
    month: str
    count: int
    resolved: int


@dataclass
class AlertStats:
    total: int
    by_status: dict[str, int]
    by_category: dict[str, int]
    by_priority: dict[str, int]
    average_resolution_days: float
    overdue_count: int
    active_count: int
    monthly_trend: list[MonthlyTrendPoint] = field(default_factory=list)


class AlertRepository(Protocol):
    def create(self, alert: Alert) -> Alert: ...

    def find_by_id(self, alert_id: uuid.UUID) -> Optional[Alert]: ...

    def find_many(self, filters: AlertFilters, options: AlertQueryOptions) -> PaginatedAlerts: ...

    def search_by_text(
        self, term: str, filters: AlertFilters, options: AlertQueryOptions
    ) -> PaginatedAlerts: ...

    def update(self, alert: Alert) -> Alert: ...

    def delete(self, alert_id: uuid.UUID) -> bool: ...

    def exists(self, alert_id: uuid.UUID) -> bool: ...

    def get_stats(
        self, filters: AlertFilters, *, overdue_days: int, trend_months: int
    ) -> AlertStats: ...

    def count_by_status(self, filters: AlertFilters | None = None) -> dict[str, int]: ...

    def count_by_category(self, filters: AlertFilters | None = None) -> dict[str, int]: ...

    def count_by_priority(self, filters: AlertFilters | None = None) -> dict[str, int]: ...


class UserRepository(Protocol):
    def find_by_id(self, user_id: uuid.UUID) -> Optional[User]: ...

    def exists(self, user_id: uuid.UUID) -> bool: ...


class DepartmentRepository(Protocol):
    def find_by_id(self, department_id: uuid.UUID) -> Optional[Department]: ...

    def find_by_code(self, code: str) -> Optional[Department]: ...

    def exists(self, department_id: uuid.UUID) -> bool: ...

    def create(self, department: Department) -> Department: ...

    def soft_delete(self, department_id: uuid.UUID) -> bool: ...
