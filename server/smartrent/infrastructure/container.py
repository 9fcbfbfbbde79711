from __future__ import annotations
"""server/smartrent/infrastructure/container.py
~~~~~~~~~~~~~~~~~~~~~~~~
Racine de composition.

Construit explicitement repositories et use-cases autour d'une Session
(une par requête) : aucun registre global, chaque dépendance est visible
dans la signature du constructeur qui la reçoit.
"""
from dataclasses import dataclass

from sqlalchemy.orm import Session

from smartrent.application.use_cases.alerts import (
    AddAlertNoteUseCase,
    AssignAlertUseCase,
    CreateAlertUseCase,
    DeleteAlertUseCase,
    GetAlertByIdUseCase,
    GetAlertStatsUseCase,
    GetAlertsUseCase,
    UpdateAlertPriorityUseCase,
    UpdateAlertStatusUseCase,
)
from smartrent.application.use_cases.departments import (
    CreateDepartmentUseCase,
    DeleteDepartmentUseCase,
    GetDepartmentByIdUseCase,
)
from smartrent.infrastructure.persistence.repositories.alert_repository import AlertRepository
from smartrent.infrastructure.persistence.repositories.department_repository import DepartmentRepository
from smartrent.infrastructure.persistence.repositories.user_repository import UserRepository


@dataclass(frozen=True)
class AlertUseCases:
    create: CreateAlertUseCase
    get_by_id: GetAlertByIdUseCase
    list: GetAlertsUseCase
    stats: GetAlertStatsUseCase
    update_status: UpdateAlertStatusUseCase
    add_note: AddAlertNoteUseCase
    assign: AssignAlertUseCase
    update_priority: UpdateAlertPriorityUseCase
    delete: DeleteAlertUseCase


@dataclass(frozen=True)
class DepartmentUseCases:
    create: CreateDepartmentUseCase
    get_by_id: GetDepartmentByIdUseCase
    delete: DeleteDepartmentUseCase


def build_alert_use_cases(session: Session) -> AlertUseCases:
    alerts = AlertRepository(session)
    departments = DepartmentRepository(session)
    users = UserRepository(session)
    return AlertUseCases(
        create=CreateAlertUseCase(alerts, departments, users),
        get_by_id=GetAlertByIdUseCase(alerts),
        list=GetAlertsUseCase(alerts),
        stats=GetAlertStatsUseCase(alerts),
        update_status=UpdateAlertStatusUseCase(alerts),
        add_note=AddAlertNoteUseCase(alerts),
        assign=AssignAlertUseCase(alerts, users),
        update_priority=UpdateAlertPriorityUseCase(alerts),
        delete=DeleteAlertUseCase(alerts),
    )


def build_department_use_cases(session: Session) -> DepartmentUseCases:
    departments = DepartmentRepository(session)
    return DepartmentUseCases(
        create=CreateDepartmentUseCase(departments),
        get_by_id=GetDepartmentByIdUseCase(departments),
        delete=DeleteDepartmentUseCase(departments),
    )
