import pytest

from leasing_migration.services.vehicle_mapping import (
    image_public_id,
    map_vehicle_row,
    parse_bool,
    parse_int,
    parse_price,
    slugify,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1.234,56", 1234.56),
        ("389,00", 389.0),
        ("249.90", 249.9),
        ("€ 1.200", 1200.0),
        ("1.234.567", 1234567.0),
        ("12.500", 12500.0),
        ("500", 500.0),
        ("", None),
        (None, None),
        ("su richiesta", None),
    ],
)
def test_parse_price(raw, expected):
    assert parse_price(raw) == expected


def test_parse_int_defaults():
    assert parse_int("", 48) == 48
    assert parse_int(None, 10000) == 10000
    assert parse_int("36", 48) == 36
    assert parse_int("48 mesi", 0) == 48
    assert parse_int("abc", 48) == 48
    assert parse_int("0", 48) == 48
    assert parse_int("") is None


def test_parse_bool_is_literal():
    assert parse_bool("true") is True
    assert parse_bool("True") is False
    assert parse_bool("1") is False
    assert parse_bool(None) is False


def test_slugify():
    assert slugify("Toyota Yaris Cross Hybrid") == "toyota-yaris-cross-hybrid"
    assert slugify("  Jeep Avenger (bozza)!") == "jeep-avenger-bozza"


def test_image_public_id_prefers_sku():
    assert image_public_id({"sku": "YARIS-01", "Title": "Yaris"}) == "YARIS-01"
    assert image_public_id({"sku": "", "Title": "Fiat 500e (2024)"}) == "Fiat_500e__2024_"


def test_map_vehicle_row_long_term_fields():
    row = {
        "Title": "Toyota Yaris Cross Hybrid",
        "Brand": "TOYOTA",
        "Category": "SUV",
        "modello": "Yaris Cross",
        "versione": "Trend",
        "sku": "YARIS-01",
        "canone_mensile": "389,00",
        "anticipo": "3.500,00",
        "durata_mesi": "36",
        "combustibile": "Ibrida",
        "cambio": "Automatico",
        "promo": "true",
        "tempo_consegna": "garanzia_mobilita",
    }
    record = map_vehicle_row(row, "https://cdn.test/yaris.jpg")

    assert record["titolo"] == "TOYOTA Yaris Cross Trend"
    assert record["marca"] == "TOYOTA"
    assert record["categoria"] == "SUV"
    assert record["slug"] == "toyota-yaris-cross-hybrid"
    assert record["immagine_url"] == "https://cdn.test/yaris.jpg"
    assert record["alimentazione"] == "Ibrida-Benzina"
    assert record["canone_mensile"] == 389.0
    assert record["anticipo"] == 3500.0
    assert record["durata_mesi"] == 36
    assert record["km_annui"] == 10000
    assert record["promo"] is True
    assert record["noleggio_breve"] is False
    assert record["tempo_consegna"] == "Garanzia di Mobilità"
    assert record["prezzo_giornaliero"] is None
    assert record["km_giornaliero"] is None


def test_map_vehicle_row_short_term_fields_and_defaults():
    row = {
        "Title": "Fiat 500e",
        "slug_id": "fiat-500e-elettrica",
        "sku": "FIAT-500E",
        "combustibile": "Elettrica",
        "tempo_consegna": "30 giorni",
        "breve": "true",
        "prezzo_giornalero_breve": "45,00",
        "km_giornalero_breve": "100",
        "prezzo_settimanale_breve": "250,00",
        "km_settimanale_breve": "700",
        "prezzo_mensile_breve": "890,00",
        "km_mensile_breve": "2500",
        "cauzione_breve": "500",
        "costo_chilometro_breve": "0,15",
    }
    record = map_vehicle_row(row)

    assert record["slug"] == "fiat-500e-elettrica"
    assert record["titolo"] == "  "
    assert record["alimentazione"] == "Elettrica"
    assert record["tempo_consegna"] == "30 giorni"
    assert record["durata_mesi"] == 48
    assert record["km_annui"] == 10000
    assert record["canone_mensile"] is None
    assert record["noleggio_breve"] is True
    assert record["prezzo_giornaliero"] == 45.0
    assert record["km_giornaliero"] == 100
    assert record["prezzo_settimanale"] == 250.0
    assert record["km_settimanale"] == 700
    assert record["prezzo_mensile_breve"] == 890.0
    assert record["km_mensile_breve"] == 2500
    assert record["cauzione_richiesta"] == 500.0
    assert record["costo_per_km"] == 0.15
    assert record["immagine_url"] is None
