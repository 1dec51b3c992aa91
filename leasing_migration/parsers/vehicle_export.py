from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from leasing_migration.core.settings import settings

from ._export_common import decode_block, extract_items

logger = logging.getLogger(__name__)

BASE_COLUMNS = ("Title", "Link", "Brand", "Category", "PostType")
THUMBNAIL_FIELD = "_thumbnail_id"
IMAGE_URL_FIELD = "Image URL"

VehicleRecord = Dict[str, Optional[str]]


class ColumnSet:
    """Insertion-ordered set of column names discovered while decoding."""

    def __init__(self, initial: Iterable[str] = ()):
        self._names: Dict[str, None] = {}
        for name in initial:
            self.add(name)

    def add(self, name: str) -> None:
        self._names.setdefault(name, None)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"ColumnSet({list(self._names)!r})"

    def ordered(self, priority: Sequence[str] = ()) -> List[str]:
        """Column names with ``priority`` hoisted to the front.

        Names are moved to the front in reverse declared order, so the present
        priority names end up leading in their declared order.
        """
        names = list(self._names)
        for name in reversed(priority):
            if name in self._names:
                names.remove(name)
                names.insert(0, name)
        return names


@dataclass
class NormalizedExport:
    records: List[VehicleRecord]
    columns: ColumnSet
    items_scanned: int = 0
    images_resolved: int = 0
    dropped_post_types: Dict[str, int] = field(default_factory=dict)


def _assemble_record(block: str, columns: ColumnSet) -> VehicleRecord:
    item = decode_block(block)
    record: VehicleRecord = {
        "PostId": item.post_id,
        "Title": item.title,
        "Link": item.link,
        "Brand": item.brand,
        "Category": item.category,
        "PostType": item.post_type,
        "AttachmentUrl": item.attachment_url,
    }
    for key, value in item.meta.items():
        record[key] = value
        columns.add(key)
    return record


def normalize_vehicles(
    document: str,
    media_index: Mapping[str, str],
    post_type: Optional[str] = None,
) -> NormalizedExport:
    """Decode every vehicle record and resolve its lead image.

    Only records whose post type equals ``post_type`` are returned, but the
    metadata keys of every record still become columns.
    """
    target = post_type or settings.vehicle_post_type
    columns = ColumnSet(BASE_COLUMNS)
    assembled: List[VehicleRecord] = []

    for block in extract_items(document):
        assembled.append(_assemble_record(block, columns))

    export = NormalizedExport(records=[], columns=columns, items_scanned=len(assembled))
    for record in assembled:
        record_type = record.get("PostType") or ""
        if record_type != target:
            export.dropped_post_types[record_type] = export.dropped_post_types.get(record_type, 0) + 1
            continue
        thumbnail_id = record.get(THUMBNAIL_FIELD)
        if thumbnail_id and thumbnail_id in media_index:
            record[IMAGE_URL_FIELD] = media_index[thumbnail_id]
            columns.add(IMAGE_URL_FIELD)
            export.images_resolved += 1
        export.records.append(record)

    logger.info(
        "vehicle export scanned items=%d kept=%d images_resolved=%d",
        export.items_scanned,
        len(export.records),
        export.images_resolved,
    )
    if export.dropped_post_types:
        logger.debug("dropped post types %s", export.dropped_post_types)
    return export
