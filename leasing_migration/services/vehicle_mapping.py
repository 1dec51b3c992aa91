from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

DEFAULT_DURATION_MONTHS = 48
DEFAULT_ANNUAL_KM = 10000

FUEL_OVERRIDES = {
    # the export does not distinguish petrol and diesel hybrids
    "Ibrida": "Ibrida-Benzina",
}
DELIVERY_OVERRIDES = {
    "garanzia_mobilita": "Garanzia di Mobilità",
}

LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
LEADING_FLOAT_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
THOUSANDS_RE = re.compile(r"^[+-]?\d{1,3}(?:\.\d{3})+$")
SLUG_RE = re.compile(r"[^a-z0-9]+")
PUBLIC_ID_RE = re.compile(r"[^a-zA-Z0-9]")


def _text(row: Mapping[str, Any], key: str) -> str:
    value = row.get(key)
    if value is None:
        return ""
    return str(value)


def _optional(row: Mapping[str, Any], key: str) -> Optional[str]:
    return _text(row, key) or None


def parse_price(raw: Optional[str]) -> Optional[float]:
    """Parse an Italian formatted amount such as ``"1.234,56"``."""
    if not raw:
        return None
    text = raw.replace("€", "").replace(" ", "").strip()
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    elif THOUSANDS_RE.match(text):
        text = text.replace(".", "")
    match = LEADING_FLOAT_RE.match(text)
    if not match:
        return None
    return float(match.group(0))


def parse_int(raw: Optional[str], default: Optional[int] = None) -> Optional[int]:
    if not raw:
        return default
    match = LEADING_INT_RE.match(raw)
    if not match:
        return default
    value = int(match.group(1))
    return value or default


def parse_bool(raw: Optional[str]) -> bool:
    return raw == "true"


def slugify(title: str) -> str:
    return SLUG_RE.sub("-", title.lower()).strip("-")


def image_public_id(row: Mapping[str, Any]) -> str:
    sku = _text(row, "sku")
    if sku:
        return sku
    return PUBLIC_ID_RE.sub("_", _text(row, "Title"))


def map_vehicle_row(row: Mapping[str, Any], image_url: Optional[str] = None) -> Dict[str, Any]:
    """Translate one intermediate table row into the ``veicoli`` column set."""
    fuel = _optional(row, "combustibile")
    delivery = _optional(row, "tempo_consegna")

    return {
        "titolo": f"{_text(row, 'Brand')} {_text(row, 'modello')} {_text(row, 'versione')}",
        "marca": _optional(row, "Brand"),
        "modello": _optional(row, "modello"),
        "versione": _optional(row, "versione"),
        "categoria": _optional(row, "Category"),
        "slug": _text(row, "slug_id") or slugify(_text(row, "Title")),
        "sku": _optional(row, "sku"),
        "immagine_url": image_url or None,
        "alimentazione": FUEL_OVERRIDES.get(fuel, fuel) if fuel else None,
        "cambio": _optional(row, "cambio"),
        # long term
        "canone_mensile": parse_price(_text(row, "canone_mensile")),
        "anticipo": parse_price(_text(row, "anticipo")),
        "durata_mesi": parse_int(_text(row, "durata_mesi"), DEFAULT_DURATION_MONTHS),
        "km_annui": parse_int(_text(row, "km_annui"), DEFAULT_ANNUAL_KM),
        # short term
        "noleggio_breve": parse_bool(_text(row, "breve")),
        "prezzo_giornaliero": parse_price(_text(row, "prezzo_giornalero_breve")),
        "km_giornaliero": parse_int(_text(row, "km_giornalero_breve")),
        "prezzo_settimanale": parse_price(_text(row, "prezzo_settimanale_breve")),
        "km_settimanale": parse_int(_text(row, "km_settimanale_breve")),
        "prezzo_mensile_breve": parse_price(_text(row, "prezzo_mensile_breve")),
        "km_mensile_breve": parse_int(_text(row, "km_mensile_breve")),
        "cauzione_richiesta": parse_price(_text(row, "cauzione_breve")),
        "costo_per_km": parse_price(_text(row, "costo_chilometro_breve")),
        "promo": parse_bool(_text(row, "promo")),
        "tempo_consegna": DELIVERY_OVERRIDES.get(delivery, delivery) if delivery else None,
    }
