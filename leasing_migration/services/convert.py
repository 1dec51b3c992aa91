from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from leasing_migration.core.errors import SourceReadError
from leasing_migration.parsers._export_common import extract_items
from leasing_migration.parsers.media_export import build_media_index
from leasing_migration.parsers.vehicle_export import normalize_vehicles
from leasing_migration.services.csv_table import PRIORITY_COLUMNS, resolve_column_order, serialize, write_table

logger = logging.getLogger(__name__)


@dataclass
class ConversionSummary:
    media_items: int
    attachments: int
    vehicle_items: int
    vehicles_kept: int
    images_resolved: int
    columns: List[str]
    output_path: Path


def read_export(path: str | Path) -> str:
    source = Path(path)
    try:
        return source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"Unable to read export {source}: {exc}") from exc


def convert_exports(
    vehicles_path: str | Path,
    media_path: str | Path,
    output_path: str | Path,
    post_type: Optional[str] = None,
) -> ConversionSummary:
    """Turn the vehicle and media XML exports into the intermediate table.

    Both inputs are read before anything is written; the table is written in
    one piece once every record has been normalized.
    """
    logger.info("reading media export %s", media_path)
    media_document = read_export(media_path)
    logger.info("reading vehicle export %s", vehicles_path)
    vehicle_document = read_export(vehicles_path)

    media_index = build_media_index(media_document)
    export = normalize_vehicles(vehicle_document, media_index, post_type=post_type)

    content = serialize(export.records, export.columns)
    written = write_table(output_path, content)
    logger.info("wrote %d vehicles to %s", len(export.records), written)

    return ConversionSummary(
        media_items=sum(1 for _ in extract_items(media_document)),
        attachments=len(media_index),
        vehicle_items=export.items_scanned,
        vehicles_kept=len(export.records),
        images_resolved=export.images_resolved,
        columns=resolve_column_order(export.columns, PRIORITY_COLUMNS),
        output_path=written,
    )
