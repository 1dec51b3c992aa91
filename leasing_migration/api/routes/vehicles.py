from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from leasing_migration.db import models
from leasing_migration.db.session import get_session
from leasing_migration.services.catalog import CatalogFilters, filter_catalog

MAX_PAGE_SIZE = 200
DEFAULT_PAGE_SIZE = 50

router = APIRouter()


def _money(value) -> Optional[float]:
    return float(value) if value is not None else None


def serialize_vehicle(vehicle: models.Vehicle) -> Dict[str, Any]:
    return {
        "id": vehicle.id,
        "sku": vehicle.sku,
        "slug": vehicle.slug,
        "title": vehicle.titolo,
        "brand": vehicle.marca,
        "model": vehicle.modello,
        "version": vehicle.versione,
        "category": vehicle.categoria,
        "image_url": vehicle.immagine_url,
        "fuel": vehicle.alimentazione,
        "transmission": vehicle.cambio,
        "monthly_price": _money(vehicle.canone_mensile),
        "advance_payment": _money(vehicle.anticipo),
        "duration_months": vehicle.durata_mesi,
        "annual_km": vehicle.km_annui,
        "short_term": {
            "enabled": bool(vehicle.noleggio_breve),
            "daily_price": _money(vehicle.prezzo_giornaliero),
            "daily_km": vehicle.km_giornaliero,
            "weekly_price": _money(vehicle.prezzo_settimanale),
            "weekly_km": vehicle.km_settimanale,
            "monthly_price": _money(vehicle.prezzo_mensile_breve),
            "monthly_km": vehicle.km_mensile_breve,
            "deposit": _money(vehicle.cauzione_richiesta),
            "extra_km_cost": _money(vehicle.costo_per_km),
        },
        "promo": bool(vehicle.promo),
        "delivery_time": vehicle.tempo_consegna,
    }


@router.get("")
async def list_vehicles(
    brand: Optional[str] = None,
    category: Optional[str] = None,
    fuel: Optional[str] = None,
    transmission: Optional[str] = None,
    max_price: Optional[float] = None,
    promo: Optional[bool] = None,
    page: int = 1,
    size: int = DEFAULT_PAGE_SIZE,
    db: Session = Depends(get_session),
):
    if page < 1 or size < 1:
        raise HTTPException(status_code=400, detail="page and size must be >= 1")
    size = min(size, MAX_PAGE_SIZE)

    filters = CatalogFilters(
        brand=brand,
        category=category,
        fuel=fuel,
        transmission=transmission,
        max_price=max_price,
        promo=promo,
    )
    stmt = select(models.Vehicle).order_by(
        models.Vehicle.canone_mensile.asc().nulls_last(),
        models.Vehicle.id.asc(),
    )
    matched = filter_catalog(db.execute(stmt).scalars().all(), filters)
    window = matched[(page - 1) * size : page * size]

    return {
        "page": page,
        "size": size,
        "total": len(matched),
        "rows": [serialize_vehicle(vehicle) for vehicle in window],
        "applied_filters": filters.model_dump(),
    }


@router.get("/{slug}")
async def vehicle_detail(slug: str, db: Session = Depends(get_session)):
    vehicle = db.execute(
        select(models.Vehicle).where(models.Vehicle.slug == slug).order_by(models.Vehicle.id).limit(1)
    ).scalar_one_or_none()
    if vehicle is None:
        raise HTTPException(status_code=404, detail=f"Vehicle '{slug}' not found")
    return serialize_vehicle(vehicle)
