from __future__ import annotations

import re
from typing import Iterable, List, Optional

from pydantic import BaseModel

from leasing_migration.db import models

WHITESPACE_RE = re.compile(r"\s")


class CatalogFilters(BaseModel):
    brand: Optional[str] = None
    category: Optional[str] = None
    fuel: Optional[str] = None
    transmission: Optional[str] = None
    max_price: Optional[float] = None
    promo: Optional[bool] = None


def _squash(value: str) -> str:
    return WHITESPACE_RE.sub("", value.lower())


def _same(left: Optional[str], right: str) -> bool:
    return (left or "").lower() == right.lower()


def matches(vehicle: models.Vehicle, filters: CatalogFilters) -> bool:
    if filters.brand and not _same(vehicle.marca, filters.brand):
        return False

    # "SUV" should still match "Suv Compatti" and vice versa
    if filters.category and vehicle.categoria:
        wanted = _squash(filters.category)
        actual = _squash(vehicle.categoria)
        if wanted not in actual and actual not in wanted:
            return False

    if filters.fuel and not _same(vehicle.alimentazione, filters.fuel):
        return False
    if filters.transmission and not _same(vehicle.cambio, filters.transmission):
        return False
    if filters.max_price is not None and vehicle.canone_mensile is not None:
        if float(vehicle.canone_mensile) > filters.max_price:
            return False
    if filters.promo is not None and bool(vehicle.promo) != filters.promo:
        return False
    return True


def filter_catalog(vehicles: Iterable[models.Vehicle], filters: CatalogFilters) -> List[models.Vehicle]:
    return [vehicle for vehicle in vehicles if matches(vehicle, filters)]
