from __future__ import annotations

import logging
from typing import Dict

from ._export_common import decode_attachment_url, decode_post_id, decode_post_type, extract_items

logger = logging.getLogger(__name__)

ATTACHMENT_POST_TYPE = "attachment"


def build_media_index(document: str, attachment_type: str = ATTACHMENT_POST_TYPE) -> Dict[str, str]:
    """Map attachment post ids to their public URL.

    Non-attachment records and attachments missing an id or URL are skipped.
    A repeated id keeps the URL of its last record.
    """
    index: Dict[str, str] = {}
    scanned = 0
    mapped = 0

    for block in extract_items(document):
        scanned += 1
        if decode_post_type(block) != attachment_type:
            continue
        post_id = decode_post_id(block)
        url = decode_attachment_url(block)
        if post_id and url:
            index[post_id] = url
            mapped += 1

    logger.info("media export scanned items=%d attachments=%d", scanned, mapped)
    if index:
        sample_id = next(iter(index))
        logger.debug("sample media entry %s -> %s", sample_id, index[sample_id])
    return index
