"""Shared helpers for scraping records out of the legacy WordPress XML exports.

The exports are not reliably well-formed, so nothing here builds a tree. Each
record is cut out by its ``<item>`` markers and every field is recovered by its
own pattern; a pattern that does not match yields an empty value and leaves the
other fields untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

ITEM_START = "<item>"
ITEM_END = "</item>"

TITLE_RE = re.compile(r"<title><!\[CDATA\[(.*?)\]\]></title>")
LINK_RE = re.compile(r"<link>(.*?)</link>")
BRAND_RE = re.compile(r'<category domain="marca".*?><!\[CDATA\[(.*?)\]\]></category>')
CATEGORY_RE = re.compile(r'<category domain="categoria".*?><!\[CDATA\[(.*?)\]\]></category>')
POST_TYPE_RE = re.compile(r"<wp:post_type><!\[CDATA\[(.*?)\]\]></wp:post_type>")
POST_ID_RE = re.compile(r"<wp:post_id>(\d+)</wp:post_id>")
ATTACHMENT_URL_RE = re.compile(r"<wp:attachment_url><!\[CDATA\[(.*?)\]\]></wp:attachment_url>")
META_RE = re.compile(
    r"<wp:meta_key><!\[CDATA\[(.*?)\]\]></wp:meta_key>\s*<wp:meta_value><!\[CDATA\[(.*?)\]\]></wp:meta_value>",
    re.DOTALL,
)


@dataclass(frozen=True)
class DecodedItem:
    post_id: Optional[str]
    title: str
    link: str
    brand: str
    category: str
    post_type: str
    attachment_url: Optional[str]
    meta: Dict[str, str] = field(default_factory=dict)


def extract_items(document: str, start: str = ITEM_START, end: str = ITEM_END) -> Iterator[str]:
    """Yield the body of every record between ``start`` and ``end``.

    Text before the first start marker is ignored. A trailing piece with no end
    marker is a truncated record and is dropped.
    """
    pieces = document.split(start)[1:]
    if pieces and end not in pieces[-1]:
        pieces.pop()
    for piece in pieces:
        yield piece.split(end, 1)[0]


def _first(pattern: re.Pattern[str], block: str) -> Optional[str]:
    match = pattern.search(block)
    if not match:
        return None
    return match.group(1)


def decode_post_type(block: str) -> str:
    return _first(POST_TYPE_RE, block) or ""


def decode_post_id(block: str) -> Optional[str]:
    return _first(POST_ID_RE, block)


def decode_attachment_url(block: str) -> Optional[str]:
    return _first(ATTACHMENT_URL_RE, block)


def iter_meta_pairs(block: str) -> Iterator[Tuple[str, str]]:
    for match in META_RE.finditer(block):
        yield match.group(1), match.group(2)


def decode_meta(block: str) -> Dict[str, str]:
    # repeated keys: the last occurrence wins
    meta: Dict[str, str] = {}
    for key, value in iter_meta_pairs(block):
        meta[key] = value
    return meta


def decode_block(block: str) -> DecodedItem:
    return DecodedItem(
        post_id=decode_post_id(block),
        title=_first(TITLE_RE, block) or "",
        link=_first(LINK_RE, block) or "",
        brand=_first(BRAND_RE, block) or "",
        category=_first(CATEGORY_RE, block) or "",
        post_type=decode_post_type(block),
        attachment_url=decode_attachment_url(block),
        meta=decode_meta(block),
    )
