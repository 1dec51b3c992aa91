from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from leasing_migration.db import models
from leasing_migration.db.session import session_scope

DECIMAL_FIELDS = {
    "canone_mensile",
    "anticipo",
    "prezzo_giornaliero",
    "prezzo_settimanale",
    "prezzo_mensile_breve",
    "cauzione_richiesta",
    "costo_per_km",
}

MUTABLE_FIELDS = [
    "titolo",
    "marca",
    "modello",
    "versione",
    "categoria",
    "slug",
    "immagine_url",
    "alimentazione",
    "cambio",
    "canone_mensile",
    "anticipo",
    "durata_mesi",
    "km_annui",
    "noleggio_breve",
    "prezzo_giornaliero",
    "km_giornaliero",
    "prezzo_settimanale",
    "km_settimanale",
    "prezzo_mensile_breve",
    "km_mensile_breve",
    "cauzione_richiesta",
    "costo_per_km",
    "promo",
    "tempo_consegna",
]


def _as_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (TypeError, ValueError, ArithmeticError):
        return None


def upsert_vehicle(session: Session, record: Dict[str, Any]) -> Tuple[models.Vehicle, bool]:
    """Insert or fully replace the vehicle identified by ``record["sku"]``.

    Returns the persisted row and whether it was newly created.
    """
    sku = (record.get("sku") or "").strip()
    if not sku:
        raise ValueError("Vehicle record has no sku")

    vehicle = session.execute(select(models.Vehicle).where(models.Vehicle.sku == sku)).scalar_one_or_none()
    created = vehicle is None
    if created:
        vehicle = models.Vehicle(sku=sku)
        session.add(vehicle)

    for field in MUTABLE_FIELDS:
        value = record.get(field)
        if field in DECIMAL_FIELDS:
            value = _as_decimal(value)
        setattr(vehicle, field, value)
    vehicle.updated_at = datetime.now(timezone.utc)
    session.flush()
    return vehicle, created


def upsert_vehicles(records: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Upsert a batch in one transaction."""
    created = 0
    updated = 0
    with session_scope() as session:
        for record in records:
            _vehicle, was_created = upsert_vehicle(session, record)
            if was_created:
                created += 1
            else:
                updated += 1
    return {"created": created, "updated": updated}
