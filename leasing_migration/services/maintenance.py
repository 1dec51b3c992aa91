from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy import delete, func, select

from leasing_migration.db import models
from leasing_migration.db.session import session_scope

logger = logging.getLogger(__name__)


def reset_vehicles() -> int:
    """Delete every vehicle row and return how many were removed."""
    with session_scope() as session:
        count = session.execute(select(func.count()).select_from(models.Vehicle)).scalar_one()
        session.execute(delete(models.Vehicle))
    logger.warning("deleted %d vehicles", count)
    return count


def sample_vehicles(limit: int = 10) -> List[Dict[str, Any]]:
    with session_scope() as session:
        rows = session.execute(
            select(models.Vehicle.titolo, models.Vehicle.cambio, models.Vehicle.alimentazione)
            .order_by(models.Vehicle.id)
            .limit(limit)
        ).all()
    return [{"titolo": titolo, "cambio": cambio, "alimentazione": alimentazione} for titolo, cambio, alimentazione in rows]
