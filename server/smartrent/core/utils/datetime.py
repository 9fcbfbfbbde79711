# coding: utf-8
# server/smartrent/core/utils/datetime.py
"""server/smartrent/core/utils/datetime.py
~~~~~~~~~~~~~~~~~~~~~~~~
Utilitaires pour la gestion des dates et heures.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

SECONDS_PER_DAY = 86_400


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(d: Optional[datetime]) -> Optional[datetime]:
    """Retourne d en timezone UTC 'aware' (tolère None).

    SQLite ne conserve pas le fuseau : les valeurs relues sont naïves et
    considérées comme UTC.
    """
    if d is None:
        return None
    if d.tzinfo is None:
        return d.replace(tzinfo=timezone.utc)
    return d.astimezone(timezone.utc)


def days_between_ceil(start: datetime, end: datetime) -> int:
    """Nombre de jours (arrondi supérieur) entre deux instants, sans signe."""
    delta = abs((as_utc(end) - as_utc(start)).total_seconds())
    return math.ceil(delta / SECONDS_PER_DAY)


def month_key(d: datetime) -> str:
    """Clé de regroupement mensuel « YYYY-MM »."""
    return f"{d.year:04d}-{d.month:02d}"


def months_ago(now: datetime, months: int) -> datetime:
    """Premier jour du mois situé `months` mois avant `now` (inclus dans la fenêtre)."""
    year, month = now.year, now.month - months
    while month <= 0:
        month += 12
        year -= 1
    return now.replace(year=year, month=month, day=1, hour=0, minute=0, second=0, microsecond=0)


def days_ago(now: datetime, days: int) -> datetime:
    return now - timedelta(days=days)
