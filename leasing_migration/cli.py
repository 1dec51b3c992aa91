"""Migrate the legacy WordPress vehicle export into the leasing catalog.

Usage:
  leasing-migrate convert --vehicles vehicles.xml --media media.xml --out veicoli_migrazione.csv
  leasing-migrate upload --csv veicoli_migrazione.csv
  leasing-migrate inspect --limit 10
  leasing-migrate reset --yes
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from leasing_migration.core.errors import MigrationError
from leasing_migration.core.logging import configure_logging
from leasing_migration.core.settings import settings
from leasing_migration.services.convert import convert_exports
from leasing_migration.services.image_store import CloudinaryImageStore, ImageStore, LocalImageStore
from leasing_migration.services.maintenance import reset_vehicles, sample_vehicles
from leasing_migration.services.upload_pipeline import load_table, run_upload

EXIT_SUCCESS = 0
EXIT_PARTIAL = 1
EXIT_HARD_FAIL = 2

logger = logging.getLogger("leasing_migration.cli")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    commands = parser.add_subparsers(dest="command", required=True)

    convert = commands.add_parser("convert", help="XML exports -> intermediate CSV")
    convert.add_argument("--vehicles", default="vehicoli_sistema_antiguo.xml")
    convert.add_argument("--media", default="media_dsas_antiguo.xml")
    convert.add_argument("--out", default="veicoli_migrazione.csv")
    convert.add_argument("--post-type", default=None)

    upload = commands.add_parser("upload", help="intermediate CSV -> database")
    upload.add_argument("--csv", default="veicoli_migrazione.csv")
    upload.add_argument("--image-store", default="cloudinary", choices=["cloudinary", "local", "none"])
    upload.add_argument("--local-root", default=None)
    upload.add_argument("--folder", default=None)

    reset = commands.add_parser("reset", help="delete every vehicle")
    reset.add_argument("--yes", action="store_true", help="confirm the deletion")

    inspect = commands.add_parser("inspect", help="print a sample of stored vehicles")
    inspect.add_argument("--limit", type=int, default=10)
    return parser.parse_args(argv)


def build_image_store(kind: str, local_root: Optional[str] = None) -> Optional[ImageStore]:
    if kind == "none":
        return None
    if kind == "local":
        return LocalImageStore(root=local_root)
    settings.require_cloudinary()
    return CloudinaryImageStore()


def run_convert(args: argparse.Namespace) -> int:
    summary = convert_exports(args.vehicles, args.media, args.out, post_type=args.post_type)
    logger.info(
        "conversion complete attachments=%d vehicle_items=%d kept=%d images=%d columns=%d",
        summary.attachments,
        summary.vehicle_items,
        summary.vehicles_kept,
        summary.images_resolved,
        len(summary.columns),
    )
    return EXIT_SUCCESS


async def _upload(args: argparse.Namespace) -> int:
    rows = load_table(args.csv)
    logger.info("loaded %d vehicles from %s", len(rows), args.csv)
    image_store = build_image_store(args.image_store, args.local_root)
    try:
        summary = await run_upload(rows, image_store, folder=args.folder)
    finally:
        if image_store is not None:
            await image_store.aclose()
    logger.info("success=%d failed=%d", summary.succeeded, summary.failed)
    return EXIT_PARTIAL if summary.failed else EXIT_SUCCESS


def run_reset(args: argparse.Namespace) -> int:
    if not args.yes:
        logger.error("refusing to delete vehicles without --yes")
        return EXIT_HARD_FAIL
    reset_vehicles()
    return EXIT_SUCCESS


def run_inspect(args: argparse.Namespace) -> int:
    for row in sample_vehicles(args.limit):
        print(f'Title: "{row["titolo"]}" | Cambio: "{row["cambio"]}" | Alimentazione: "{row["alimentazione"]}"')
    return EXIT_SUCCESS


def run_command(args: argparse.Namespace) -> int:
    if args.command == "convert":
        return run_convert(args)
    if args.command == "upload":
        return asyncio.run(_upload(args))
    if args.command == "reset":
        return run_reset(args)
    if args.command == "inspect":
        return run_inspect(args)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.log_level)
    try:
        return run_command(args)
    except MigrationError as exc:
        logger.error("%s: %s", exc.error_code, exc)
        return EXIT_HARD_FAIL
    except Exception:
        logger.exception("unexpected failure")
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
