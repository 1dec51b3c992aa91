from sqlalchemy import delete, select

from leasing_migration import cli
from leasing_migration.core.settings import settings
from leasing_migration.db import models
from leasing_migration.db.session import session_scope


def _clear_vehicles() -> None:
    with session_scope() as session:
        session.execute(delete(models.Vehicle))


def test_parse_args_upload_defaults():
    args = cli.parse_args(["upload"])
    assert args.command == "upload"
    assert args.csv == "veicoli_migrazione.csv"
    assert args.image_store == "cloudinary"


def test_convert_then_upload_end_to_end(tmp_path, vehicle_document, media_document):
    _clear_vehicles()
    vehicles = tmp_path / "vehicles.xml"
    media = tmp_path / "media.xml"
    out = tmp_path / "veicoli.csv"
    vehicles.write_text(vehicle_document, encoding="utf-8")
    media.write_text(media_document, encoding="utf-8")

    assert cli.main(["convert", "--vehicles", str(vehicles), "--media", str(media), "--out", str(out)]) == 0
    # the draft without a sku fails, so the run is partial
    assert cli.main(["upload", "--csv", str(out), "--image-store", "none"]) == cli.EXIT_PARTIAL
    assert cli.main(["upload", "--csv", str(out), "--image-store", "none"]) == cli.EXIT_PARTIAL

    with session_scope() as session:
        skus = sorted(v.sku for v in session.execute(select(models.Vehicle)).scalars())
    assert skus == ["FIAT-500E", "YARIS-01"]


def test_missing_source_is_hard_failure(tmp_path):
    code = cli.main(["convert", "--vehicles", str(tmp_path / "a.xml"), "--media", str(tmp_path / "b.xml")])
    assert code == cli.EXIT_HARD_FAIL


def test_upload_without_cdn_credentials_is_hard_failure(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "cloudinary_api_secret", None)
    table = tmp_path / "veicoli.csv"
    table.write_text("Title,sku\nYaris,YARIS-01", encoding="utf-8")
    assert cli.main(["upload", "--csv", str(table)]) == cli.EXIT_HARD_FAIL


def test_reset_requires_confirmation():
    assert cli.main(["reset"]) == cli.EXIT_HARD_FAIL
    assert cli.main(["reset", "--yes"]) == cli.EXIT_SUCCESS


def test_inspect_prints_sample(capsys):
    _clear_vehicles()
    with session_scope() as session:
        session.add(models.Vehicle(sku="X", titolo="FIAT 500e", cambio="Automatico", alimentazione="Elettrica"))

    assert cli.main(["inspect", "--limit", "5"]) == 0
    out = capsys.readouterr().out
    assert 'Title: "FIAT 500e" | Cambio: "Automatico" | Alimentazione: "Elettrica"' in out
