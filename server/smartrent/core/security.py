from __future__ import annotations
"""server/smartrent/core/security.py
~~~~~~~~~~~~~~~~~~~~~~~~
Jetons JWT (python-jose).

L'émission des jetons (login/refresh) appartient au service d'authentification ;
ce module se limite à la vérification, plus `create_access_token` utilisé par
les tests et l'outillage.
"""
import time
from typing import Any, Optional

from jose import JWTError, jwt

from smartrent.core.config import settings

ACCESS_TTL_SECONDS = 15 * 60


def create_access_token(claims: dict[str, Any], *, expires_seconds: int = ACCESS_TTL_SECONDS) -> str:
    now = int(time.time())
    payload = {**claims, "iat": now, "exp": now + int(expires_seconds)}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict[str, Any]]:
    """Décode et vérifie (signature + exp). Retourne None si le jeton est invalide ou expiré."""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
