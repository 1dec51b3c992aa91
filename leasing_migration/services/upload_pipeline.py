from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx
from sqlalchemy.exc import SQLAlchemyError

from leasing_migration.core.errors import SourceReadError
from leasing_migration.core.settings import settings
from leasing_migration.db.session import session_scope
from leasing_migration.services.csv_table import parse_table
from leasing_migration.services.image_store import ImageStore, ImageStoreError
from leasing_migration.services.ingest import upsert_vehicle
from leasing_migration.services.vehicle_mapping import image_public_id, map_vehicle_row

logger = logging.getLogger(__name__)

IMAGE_URL_FIELD = "Image URL"


@dataclass
class UploadSummary:
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    created: int = 0
    updated: int = 0
    images_relocated: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "processed": self.processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "created": self.created,
            "updated": self.updated,
            "images_relocated": self.images_relocated,
            "errors": self.errors,
        }


def load_table(path: str | Path) -> List[Dict[str, str]]:
    source = Path(path)
    try:
        content = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"Unable to read table {source}: {exc}") from exc
    return parse_table(content)


async def relocate_image(
    row: Mapping[str, str],
    image_store: Optional[ImageStore],
    *,
    legacy_host: str,
    folder: str,
) -> tuple[Optional[str], bool]:
    """Return the image URL to persist and whether it was re-hosted.

    Only URLs on the legacy host are moved; a failed move keeps the original.
    """
    image_url = row.get(IMAGE_URL_FIELD) or None
    if not image_url or image_store is None or legacy_host not in image_url:
        return image_url, False

    public_id = image_public_id(row)
    try:
        new_url = await image_store.relocate(image_url, public_id, folder)
    except (ImageStoreError, httpx.HTTPError, OSError) as exc:
        logger.warning("image relocation failed for %s: %s", image_url, exc)
        return image_url, False
    logger.info("relocated %s -> %s", image_url, new_url)
    return new_url, True


async def run_upload(
    rows: Sequence[Mapping[str, str]],
    image_store: Optional[ImageStore] = None,
    *,
    legacy_host: Optional[str] = None,
    folder: Optional[str] = None,
) -> UploadSummary:
    """Relocate, map and upsert every row in order, one transaction per row.

    A failing row is logged and counted; the run always reaches the end.
    """
    host = legacy_host or settings.legacy_image_host
    target_folder = folder or settings.cdn_folder
    summary = UploadSummary()

    for position, row in enumerate(rows, start=1):
        summary.processed += 1
        title = row.get("Title") or ""
        logger.info("processing %d/%d: %s", position, len(rows), title)

        image_url, relocated = await relocate_image(row, image_store, legacy_host=host, folder=target_folder)
        if relocated:
            summary.images_relocated += 1

        record = map_vehicle_row(row, image_url)
        try:
            with session_scope() as session:
                vehicle, created = upsert_vehicle(session, record)
                vehicle_id = vehicle.id
        except (SQLAlchemyError, ValueError) as exc:
            summary.failed += 1
            summary.errors.append({"row": position, "sku": record.get("sku"), "title": title, "error": str(exc)})
            logger.error("upsert failed for row %d (%s): %s", position, record.get("sku"), exc)
            continue

        summary.succeeded += 1
        if created:
            summary.created += 1
        else:
            summary.updated += 1
        logger.info("saved %s (id=%s)", record["sku"], vehicle_id)

    logger.info(
        "upload complete processed=%d succeeded=%d failed=%d",
        summary.processed,
        summary.succeeded,
        summary.failed,
    )
    return summary
