"""Parsing of DMAP-encoded "now playing" metadata sent by AirPlay clients."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_HEADER = struct.Struct(">4si")

_STRING_TAGS = {
    "asaa": "Album artist",
    "asal": "Album",
    "asar": "Artist",
    "ascm": "Comment",
    "ascn": "Content description",
    "ascp": "Composer",
    "asct": "Category",
    "assa": "Sort Artist",
    "assc": "Sort Composer",
    "assl": "Sort Album artist",
    "assn": "Sort Name",
    "asss": "Sort Series",
    "assu": "Sort Album",
    "asdt": "Description",
    "asfm": "Format",
    "asgn": "Genre",
    "asky": "Keywords",
    "aslc": "Long Content Description",
    "minm": "Title",
}


class DmapError(ValueError):
    """Raised when DMAP metadata is malformed."""


@dataclass(frozen=True)
class DmapItem:
    """One tagged DMAP item and its raw payload."""

    tag: str
    data: bytes


def parse_dmap_header(data: bytes) -> tuple[str, int]:
    """Parse an 8-byte DMAP header into ``(tag, length)``.

    The tag must be four ASCII letters and the signed big-endian length must
    not be negative.
    """
    if len(data) < _HEADER.size:
        raise DmapError(f"DMAP header needs {_HEADER.size} bytes, got {len(data)}")
    raw_tag, length = _HEADER.unpack_from(data)
    tag = raw_tag.decode("latin-1")
    if not (raw_tag.isascii() and raw_tag.isalpha()):
        raise DmapError(f"invalid DMAP tag [{tag}], datalen {length}")
    if length < 0:
        raise DmapError(f"invalid DMAP length {length} for tag [{tag}]")
    return tag, length


def parse_metadata(buffer: bytes) -> list[DmapItem]:
    """Split a DMAP ``mlit`` listing item into its contained items."""
    if len(buffer) < _HEADER.size:
        raise DmapError(f"received invalid metadata, length {len(buffer)} < 8")
    tag, datalen = parse_dmap_header(buffer)
    body = memoryview(buffer)[_HEADER.size:]
    if tag != "mlit" or datalen != len(body):
        raise DmapError(
            f"received metadata with tag {tag}, but is not a DMAP listingitem, "
            f"or datalen = {datalen} != buflen {len(body)}"
        )
    items = []
    pos = 0
    while len(body) - pos >= _HEADER.size:
        tag, datalen = parse_dmap_header(body[pos:pos + _HEADER.size])
        pos += _HEADER.size
        if datalen > len(body) - pos:
            raise DmapError(
                f"DMAP item [{tag}] claims {datalen} bytes, only {len(body) - pos} remain"
            )
        items.append(DmapItem(tag, bytes(body[pos:pos + datalen])))
        pos += datalen
    if pos != len(body):
        logger.error("%d bytes of metadata were not processed", len(body) - pos)
    return items


def tag_label(tag: str) -> str | None:
    """Return the display label of a string-valued tag, or None if unknown."""
    return _STRING_TAGS.get(tag)


def format_item(item: DmapItem, debug: bool) -> str | None:
    """Return the text line describing ``item``.

    String items become ``"Label: value"``; other items become a hex dump
    when ``debug`` is set and an empty string otherwise.  Items without data
    give None.
    """
    if not item.data:
        return None
    label = tag_label(item.tag)
    if label is not None:
        text = item.data.split(b"\0", 1)[0].decode("utf-8", errors="replace")
        return f"{label}: {text}"
    if not debug:
        return ""
    parts = []
    for index, byte in enumerate(item.data):
        if index and index % 16 == 0:
            parts.append("\n")
        parts.append(f"{byte:02x} ")
    return "".join(parts)