from __future__ import annotations

"""server/smartrent/infrastructure/persistence/repositories/alert_repository.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Repository alertes (SQLAlchemy).

Principes :
- Le repo **reçoit** une Session gérée par l'appelant (endpoint via
  `Depends(get_db)`, tests via un sessionmaker).
- Il ne crée ni ne ferme la session et **ne commit pas** : il `flush` pour que
  les ids/versions soient visibles, l'appelant valide ou annule la transaction.
- Il retourne des entités `Alert` du domaine, jamais des `AlertModel`.
- `update` applique une concurrence optimiste : UPDATE ... WHERE version = :lue.
  Aucune ligne touchée => ConflictError (l'alerte a bougé entre lecture et écriture).
"""

import logging
import uuid
from collections import Counter
from typing import Iterable, Optional, Sequence

from sqlalchemy import and_, case, delete, func, or_, select, true, update
from sqlalchemy.orm import Session

from smartrent.core.utils.datetime import (
    as_utc,
    days_ago,
    days_between_ceil,
    month_key,
    months_ago,
    utcnow,
)
from smartrent.domain.alert import Alert, AlertNote
from smartrent.domain.enums import (
    ACTIVE_STATUSES,
    CLOSED_STATUSES,
    PRIORITY_RANK,
    STATUS_RANK,
    AlertCategory,
    AlertPriority,
    AlertStatus,
)
from smartrent.domain.errors import ConflictError, NotFoundError
from smartrent.domain.repositories import (
    AlertFilters,
    AlertQueryOptions,
    AlertStats,
    MonthlyTrendPoint,
    PaginatedAlerts,
    Pagination,
)
from smartrent.infrastructure.persistence.database.models.alert import AlertModel

logger = logging.getLogger(__name__)

_PRIORITY_ORDER = case({p.value: r for p, r in PRIORITY_RANK.items()}, value=AlertModel.priority, else_=-1)
_STATUS_ORDER = case({s.value: r for s, r in STATUS_RANK.items()}, value=AlertModel.status, else_=-1)

_SORT_COLUMNS = {
    "createdAt": AlertModel.created_at,
    "updatedAt": AlertModel.updated_at,
    "priority": _PRIORITY_ORDER,
    "status": _STATUS_ORDER,
}


# ──────────────────────────────────────────────────────────────────────────────
# Mapping ligne <-> entité
# ──────────────────────────────────────────────────────────────────────────────

def _to_entity(row: AlertModel) -> Alert:
    return Alert.restore(
        id=row.id,
        title=row.title,
        description=row.description,
        category=AlertCategory(row.category),
        priority=AlertPriority(row.priority),
        status=AlertStatus(row.status),
        reporter_id=row.reporter_id,
        department_id=row.department_id,
        assigned_to=row.assigned_to,
        images=list(row.images or []),
        notes=[AlertNote.from_dict(n) for n in (row.notes or [])],
        created_at=row.created_at,
        updated_at=row.updated_at,
        resolved_at=row.resolved_at,
        version=row.version,
    )


def _mutable_values(alert: Alert) -> dict:
    """Champs réécrits à chaque update (les champs figés à la création n'y sont pas)."""
    return {
        "priority": alert.priority.value,
        "status": alert.status.value,
        "assigned_to": alert.assigned_to,
        "images": alert.images,
        "notes": [n.to_dict() for n in alert.notes],
        "updated_at": alert.updated_at,
        "resolved_at": alert.resolved_at,
    }


def _values(x) -> list[str]:
    """Valeur unique ou liste d'enums -> liste de chaînes."""
    if x is None:
        return []
    if isinstance(x, (str, bytes)) or not isinstance(x, Iterable):
        x = [x]
    return [getattr(v, "value", v) for v in x]


def _conditions(filters: AlertFilters | None) -> list:
    if filters is None:
        return []
    conds = []
    if filters.reporter_id:
        conds.append(AlertModel.reporter_id == filters.reporter_id)
    if filters.department_id:
        conds.append(AlertModel.department_id == filters.department_id)
    if filters.assigned_to:
        conds.append(AlertModel.assigned_to == filters.assigned_to)
    for column, wanted in (
        (AlertModel.status, filters.status),
        (AlertModel.category, filters.category),
        (AlertModel.priority, filters.priority),
    ):
        vals = _values(wanted)
        if vals:
            conds.append(column.in_(vals))
    if filters.date_from:
        conds.append(AlertModel.created_at >= filters.date_from)
    if filters.date_to:
        conds.append(AlertModel.created_at <= filters.date_to)
    if filters.is_active is not None:
        statuses = ACTIVE_STATUSES if filters.is_active else CLOSED_STATUSES
        conds.append(AlertModel.status.in_([s.value for s in statuses]))
    return conds


def _order_by(options: AlertQueryOptions) -> list:
    column = _SORT_COLUMNS.get(options.sort_by, AlertModel.created_at)
    if options.sort_order == "asc":
        return [column.asc(), AlertModel.created_at.asc(), AlertModel.id.asc()]
    return [column.desc(), AlertModel.created_at.desc(), AlertModel.id.asc()]


class AlertRepository:
    """Repository pour la gestion des alertes."""

    def __init__(self, session: Session) -> None:
        self.s = session

    # ------------------------------------------------------------------
    # Écritures
    # ------------------------------------------------------------------
    def create(self, alert: Alert) -> Alert:
        row = AlertModel(
            # UUID généré côté app : id disponible avant commit
            id=uuid.uuid4(),
            title=alert.title,
            description=alert.description,
            category=alert.category.value,
            reporter_id=alert.reporter_id,
            department_id=alert.department_id,
            created_at=alert.created_at,
            version=1,
            **_mutable_values(alert),
        )
        self.s.add(row)
        self.s.flush()
        logger.info("Alerte créée id=%s reporter=%s", row.id, row.reporter_id)
        return _to_entity(row)

    def update(self, alert: Alert) -> Alert:
        if alert.id is None:
            raise NotFoundError("Alert has not been saved yet")

        stmt = (
            update(AlertModel)
            .where(AlertModel.id == alert.id, AlertModel.version == alert.version)
            .values(version=AlertModel.version + 1, **_mutable_values(alert))
            .execution_options(synchronize_session=False)
        )
        result = self.s.execute(stmt)

        if not result.rowcount:
            if not self.exists(alert.id):
                raise NotFoundError("Alert not found")
            logger.info("Conflit de version sur alerte id=%s (version lue=%s)", alert.id, alert.version)
            raise ConflictError("Alert was modified concurrently; reload it and retry")

        row = self.s.get(AlertModel, alert.id, populate_existing=True)
        logger.info("Alerte mise à jour id=%s status=%s version=%s", row.id, row.status, row.version)
        return _to_entity(row)

    def delete(self, alert_id: uuid.UUID) -> bool:
        result = self.s.execute(delete(AlertModel).where(AlertModel.id == alert_id))
        deleted = bool(result.rowcount)
        if deleted:
            logger.info("Alerte supprimée id=%s", alert_id)
        return deleted

    # ------------------------------------------------------------------
    # Lectures
    # ------------------------------------------------------------------
    def find_by_id(self, alert_id: uuid.UUID) -> Optional[Alert]:
        row = self.s.get(AlertModel, alert_id)
        return _to_entity(row) if row else None

    def exists(self, alert_id: uuid.UUID) -> bool:
        return self.s.scalar(select(func.count()).select_from(AlertModel).where(AlertModel.id == alert_id)) > 0

    def find_many(self, filters: AlertFilters, options: AlertQueryOptions) -> PaginatedAlerts:
        return self._page(_conditions(filters), options)

    def search_by_text(self, term: str, filters: AlertFilters, options: AlertQueryOptions) -> PaginatedAlerts:
        """Recherche plein texte (titre OU description, insensible à la casse), bornée par les filtres."""
        term = (term or "").strip()
        conds = _conditions(filters)
        if term:
            conds.append(
                or_(
                    AlertModel.title.icontains(term, autoescape=True),
                    AlertModel.description.icontains(term, autoescape=True),
                )
            )
        return self._page(conds, options)

    def _page(self, conds: Sequence, options: AlertQueryOptions) -> PaginatedAlerts:
        where = and_(true(), *conds)
        total = self.s.scalar(select(func.count()).select_from(AlertModel).where(where)) or 0
        rows = self.s.scalars(
            select(AlertModel)
            .where(where)
            .order_by(*_order_by(options))
            .offset(options.offset)
            .limit(options.limit)
        ).all()
        return PaginatedAlerts(
            alerts=[_to_entity(r) for r in rows],
            pagination=Pagination.build(page=options.page, limit=options.limit, total_count=total),
        )

    # ------------------------------------------------------------------
    # Agrégats
    # ------------------------------------------------------------------
    def _count_by(self, column, enum_cls, filters: AlertFilters | None) -> dict[str, int]:
        rows = self.s.execute(
            select(column, func.count()).where(and_(true(), *_conditions(filters))).group_by(column)
        ).all()
        counts = {value: n for value, n in rows}
        # Toutes les valeurs de l'enum sont présentes, à 0 si absentes en base
        return {member.value: int(counts.get(member.value, 0)) for member in enum_cls}

    def count_by_status(self, filters: AlertFilters | None = None) -> dict[str, int]:
        return self._count_by(AlertModel.status, AlertStatus, filters)

    def count_by_category(self, filters: AlertFilters | None = None) -> dict[str, int]:
        return self._count_by(AlertModel.category, AlertCategory, filters)

    def count_by_priority(self, filters: AlertFilters | None = None) -> dict[str, int]:
        return self._count_by(AlertModel.priority, AlertPriority, filters)

    def get_stats(self, filters: AlertFilters, *, overdue_days: int, trend_months: int) -> AlertStats:
        now = utcnow()
        base = _conditions(filters)
        active_values = [s.value for s in ACTIVE_STATUSES]

        def _count(*extra) -> int:
            return int(self.s.scalar(
                select(func.count()).select_from(AlertModel).where(and_(true(), *base, *extra))
            ) or 0)

        total = _count()
        active_count = _count(AlertModel.status.in_(active_values))
        overdue_count = _count(
            AlertModel.status.in_(active_values),
            AlertModel.created_at <= days_ago(now, overdue_days),
        )

        resolved = self.s.execute(
            select(AlertModel.created_at, AlertModel.resolved_at).where(
                and_(true(), *base),
                AlertModel.status == AlertStatus.RESOLVED.value,
                AlertModel.resolved_at.is_not(None),
            )
        ).all()
        durations = [days_between_ceil(c, r) for c, r in resolved]
        average = round(sum(durations) / len(durations), 2) if durations else 0.0

        return AlertStats(
            total=total,
            by_status=self.count_by_status(filters),
            by_category=self.count_by_category(filters),
            by_priority=self.count_by_priority(filters),
            average_resolution_days=average,
            overdue_count=overdue_count,
            active_count=active_count,
            monthly_trend=self._monthly_trend(base, now=now, months=trend_months),
        )

    def _monthly_trend(self, base: Sequence, *, now, months: int) -> list[MonthlyTrendPoint]:
        """Série mensuelle (mois courant inclus), mois sans alerte compris à 0."""
        if months <= 0:
            return []
        start = months_ago(now, months - 1)
        rows = self.s.execute(
            select(AlertModel.created_at, AlertModel.status).where(
                and_(true(), *base), AlertModel.created_at >= start
            )
        ).all()

        created: Counter[str] = Counter()
        resolved: Counter[str] = Counter()
        for created_at, status in rows:
            key = month_key(as_utc(created_at))
            created[key] += 1
            if status == AlertStatus.RESOLVED.value:
                resolved[key] += 1

        points = []
        for i in range(months - 1, -1, -1):
            key = month_key(months_ago(now, i))
            points.append(MonthlyTrendPoint(month=key, count=created[key], resolved=resolved[key]))
        return points
