# server/tests/unit/test_alert_repository.py
import uuid
from datetime import timedelta

import pytest
from sqlalchemy import update

from smartrent.core.utils.datetime import month_key, utcnow
from smartrent.domain.alert import Alert
from smartrent.domain.enums import AlertCategory, AlertPriority, AlertStatus
from smartrent.domain.errors import ConflictError, NotFoundError
from smartrent.domain.repositories import AlertFilters, AlertQueryOptions
from smartrent.infrastructure.persistence.database.models.alert import AlertModel
from smartrent.infrastructure.persistence.repositories.alert_repository import AlertRepository

pytestmark = pytest.mark.unit


def _new(reporter_id, department_id, **kw) -> Alert:
    data = dict(
        title="Alerta",
        description="Descripción",
        category=AlertCategory.MAINTENANCE,
        priority=AlertPriority.MEDIUM,
        reporter_id=reporter_id,
        department_id=department_id,
    )
    data.update(kw)
    return Alert(**data)


def _backdate(s, alert_id, *, days: float, resolved_after_days: float | None = None):
    created = utcnow() - timedelta(days=days)
    values = {"created_at": created}
    if resolved_after_days is not None:
        values["resolved_at"] = created + timedelta(days=resolved_after_days)
    s.execute(update(AlertModel).where(AlertModel.id == alert_id).values(**values))
    s.flush()


def test_create_assigns_id_and_first_version(Session, tenant_id, department_id):
    with Session() as s:
        repo = AlertRepository(s)
        saved = repo.create(_new(tenant_id, department_id))
        s.commit()

        assert saved.id is not None
        assert saved.version == 1
        assert repo.exists(saved.id)
        again = repo.find_by_id(saved.id)
        assert again.title == "Alerta"
        assert again.created_at.tzinfo is not None


def test_update_persists_notes_and_bumps_version(Session, tenant_id, admin_id, department_id):
    with Session() as s:
        repo = AlertRepository(s)
        alert = repo.create(_new(tenant_id, department_id))
        alert.transition_to(AlertStatus.IN_PROGRESS)
        alert.add_note("En camino", admin_id)
        saved = repo.update(alert)
        s.commit()

        assert saved.version == 2
        assert saved.status is AlertStatus.IN_PROGRESS
        assert [n.text for n in repo.find_by_id(alert.id).notes] == ["En camino"]


def test_stale_update_raises_conflict(Session, tenant_id, department_id):
    with Session() as s:
        repo = AlertRepository(s)
        alert_id = repo.create(_new(tenant_id, department_id)).id

        first = repo.find_by_id(alert_id)
        second = repo.find_by_id(alert_id)

        first.transition_to(AlertStatus.IN_PROGRESS)
        repo.update(first)

        second.transition_to(AlertStatus.CANCELLED)
        with pytest.raises(ConflictError):
            repo.update(second)

        assert repo.find_by_id(alert_id).status is AlertStatus.IN_PROGRESS


def test_update_missing_alert_is_not_found(Session, tenant_id, department_id):
    with Session() as s:
        repo = AlertRepository(s)
        alert = repo.create(_new(tenant_id, department_id))
        assert repo.delete(alert.id) is True
        with pytest.raises(NotFoundError):
            repo.update(alert)
        assert repo.delete(alert.id) is False


def test_find_many_filters_and_pagination(Session, tenant_id, make_user, department_id):
    other = make_user()
    with Session() as s:
        repo = AlertRepository(s)
        for i in range(25):
            repo.create(_new(tenant_id, department_id, title=f"A{i}"))
        repo.create(_new(other, department_id))

        page = repo.find_many(
            AlertFilters(reporter_id=tenant_id),
            AlertQueryOptions(page=3, limit=10),
        )
        assert len(page.alerts) == 5
        assert page.pagination.total_count == 25
        assert page.pagination.total_pages == 3
        assert page.pagination.has_next is False
        assert page.pagination.has_previous is True


def test_status_and_active_filters(Session, tenant_id, department_id):
    with Session() as s:
        repo = AlertRepository(s)
        pending = repo.create(_new(tenant_id, department_id))
        done = repo.create(_new(tenant_id, department_id))
        done.transition_to(AlertStatus.CANCELLED)
        repo.update(done)

        only_closed = repo.find_many(AlertFilters(is_active=False), AlertQueryOptions())
        assert [a.id for a in only_closed.alerts] == [done.id]

        listed = repo.find_many(
            AlertFilters(status=[AlertStatus.PENDING, AlertStatus.IN_PROGRESS]), AlertQueryOptions()
        )
        assert [a.id for a in listed.alerts] == [pending.id]

        # is_active et status se combinent (ET)
        none = repo.find_many(
            AlertFilters(status=AlertStatus.CANCELLED, is_active=True), AlertQueryOptions()
        )
        assert none.pagination.total_count == 0


def test_sort_by_priority_uses_domain_order(Session, tenant_id, department_id):
    with Session() as s:
        repo = AlertRepository(s)
        for p in (AlertPriority.MEDIUM, AlertPriority.URGENT, AlertPriority.LOW, AlertPriority.HIGH):
            repo.create(_new(tenant_id, department_id, priority=p))

        desc = repo.find_many(AlertFilters(), AlertQueryOptions(sort_by="priority", sort_order="desc"))
        assert [a.priority for a in desc.alerts] == [
            AlertPriority.URGENT,
            AlertPriority.HIGH,
            AlertPriority.MEDIUM,
            AlertPriority.LOW,
        ]


def test_search_is_case_insensitive_and_scoped(Session, tenant_id, make_user, department_id):
    other = make_user()
    with Session() as s:
        repo = AlertRepository(s)
        mine = repo.create(_new(tenant_id, department_id, title="Fuga en cocina"))
        repo.create(_new(tenant_id, department_id, description="Ruido nocturno"))
        repo.create(_new(other, department_id, title="FUGA en baño"))

        found = repo.search_by_text("fuga", AlertFilters(reporter_id=tenant_id), AlertQueryOptions())
        assert [a.id for a in found.alerts] == [mine.id]

        by_description = repo.search_by_text("NOCTURNO", AlertFilters(), AlertQueryOptions())
        assert by_description.pagination.total_count == 1

        # les jokers SQL sont pris littéralement
        assert repo.search_by_text("%", AlertFilters(), AlertQueryOptions()).pagination.total_count == 0


def test_counts_are_zero_filled(Session, tenant_id, department_id):
    with Session() as s:
        repo = AlertRepository(s)
        repo.create(_new(tenant_id, department_id, category=AlertCategory.NOISE))

        by_cat = repo.count_by_category()
        assert set(by_cat) == {c.value for c in AlertCategory}
        assert by_cat["RUIDO"] == 1 and by_cat["LIMPIEZA"] == 0
        assert repo.count_by_status()["PENDIENTE"] == 1
        assert sum(repo.count_by_priority().values()) == 1


def test_stats_overdue_resolution_and_trend(Session, tenant_id, department_id):
    with Session() as s:
        repo = AlertRepository(s)

        old_open = repo.create(_new(tenant_id, department_id))
        _backdate(s, old_open.id, days=10)

        fresh_open = repo.create(_new(tenant_id, department_id))
        _backdate(s, fresh_open.id, days=6)

        for created_days_ago, resolve_after in ((20, 1.5), (15, 4)):
            a = repo.create(_new(tenant_id, department_id))
            a.transition_to(AlertStatus.IN_PROGRESS)
            a.transition_to(AlertStatus.RESOLVED)
            repo.update(a)
            _backdate(s, a.id, days=created_days_ago, resolved_after_days=resolve_after)

        stats = repo.get_stats(AlertFilters(), overdue_days=7, trend_months=12)

        assert stats.total == 4
        assert stats.active_count == 2
        assert stats.overdue_count == 1
        # ceil(1.5)=2, ceil(4)=4 → moyenne 3.0
        assert stats.average_resolution_days == 3.0
        assert stats.by_status["RESUELTO"] == 2

        assert len(stats.monthly_trend) == 12
        months = [p.month for p in stats.monthly_trend]
        assert months == sorted(months)
        assert months[-1] == month_key(utcnow())
        assert sum(p.count for p in stats.monthly_trend) == 4
        assert sum(p.resolved for p in stats.monthly_trend) == 2


def test_stats_on_empty_store(Session):
    with Session() as s:
        stats = AlertRepository(s).get_stats(AlertFilters(), overdue_days=7, trend_months=3)
        assert stats.total == 0
        assert stats.average_resolution_days == 0.0
        assert [p.count for p in stats.monthly_trend] == [0, 0, 0]


def test_stats_respect_department_filter(Session, tenant_id, make_department):
    d1, d2 = make_department("B-1"), make_department("B-2")
    with Session() as s:
        repo = AlertRepository(s)
        repo.create(_new(tenant_id, d1))
        old = repo.create(_new(tenant_id, d2))
        _backdate(s, old.id, days=30)

        stats = repo.get_stats(AlertFilters(department_id=d1), overdue_days=7, trend_months=12)
        assert stats.total == 1
        assert stats.overdue_count == 0


def test_unknown_status_is_rejected_by_the_table(Session, tenant_id, department_id):
    from sqlalchemy.exc import IntegrityError

    with Session() as s:
        s.add(
            AlertModel(
                id=uuid.uuid4(),
                title="t",
                description="d",
                category="RUIDO",
                priority="BAJA",
                status="ARCHIVADO",
                reporter_id=tenant_id,
                department_id=department_id,
                images=[],
                notes=[],
                version=1,
            )
        )
        with pytest.raises(IntegrityError):
            s.flush()
        s.rollback()
