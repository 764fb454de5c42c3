"""Rewriting of HLS playlists received from an AirPlay client."""

from __future__ import annotations

import re

_EXTM3U = "#EXTM3U\n"
_CONDENSED = "#YT-EXT-CONDENSED-URL"
_EXTINF = "#EXTINF:"
_M3U8 = "m3u8"
_FLOAT_PREFIX = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _quoted_attribute(text: str, name: str, start: int) -> tuple[str, int]:
    """Find ``name="value"`` at or after ``start``; return value and closing-quote index."""
    pos = text.find(name + "=", start)
    if pos < 0:
        raise ValueError(f"condensed playlist has no {name} attribute")
    open_quote = text.find('"', pos)
    if open_quote < 0:
        raise ValueError(f"condensed playlist attribute {name} is not quoted")
    close_quote = text.find('"', open_quote + 1)
    if close_quote < 0:
        raise ValueError(f"condensed playlist attribute {name} is not terminated")
    return text[open_quote + 1:close_quote], close_quote


def adjust_yt_condensed_playlist(media_playlist: str) -> str:
    """Expand a ``#YT-EXT-CONDENSED-URL`` media playlist into the standard form.

    In each chunk entry the PREFIX is replaced by BASE-URI and the
    ``/``-separated values after it are interleaved with the PARAMS names.
    Playlists without the condensed header are returned unchanged.
    """
    header = media_playlist.find(_EXTM3U)
    if header < 0:
        raise ValueError("media playlist has no #EXTM3U header")
    body = header + len(_EXTM3U)
    if not media_playlist.startswith(_CONDENSED, body):
        return media_playlist

    base_uri, pos = _quoted_attribute(media_playlist, "BASE-URI", body)
    params_text, pos = _quoted_attribute(media_playlist, "PARAMS", pos)
    prefix, pos = _quoted_attribute(media_playlist, "PREFIX", pos)
    params = params_text.split(",") if params_text else []

    chunk = media_playlist.find(_EXTINF)
    if chunk < 0:
        return media_playlist
    out = [media_playlist[:chunk]]
    old = chunk
    while chunk >= 0:
        start = media_playlist.find(prefix, chunk)
        if start < 0:
            raise ValueError(f"chunk entry without uri prefix {prefix!r}")
        out.append(media_playlist[old:start])
        out.append(base_uri)
        old = start + len(prefix)
        chunk = media_playlist.find(_EXTINF, old)
        for index, param in enumerate(params):
            last = index == len(params) - 1
            end = media_playlist.find("#EXT" if last else "/", old)
            if end < 0:
                raise ValueError("chunk entry has fewer values than PARAMS names")
            out.append(f"/{param}/{media_playlist[old:end]}")
            old = end if last else end + 1
    out.append(media_playlist[old:])
    return "".join(out)


def adjust_master_playlist(data: str, uri_prefix: str, uri_local_prefix: str) -> str:
    """Replace every ``uri_prefix`` in a master playlist by ``uri_local_prefix``."""
    if not uri_prefix:
        raise ValueError("uri prefix must not be empty")
    return data.replace(uri_prefix, uri_local_prefix)


def create_media_uri_table(url_prefix: str, master_playlist: str) -> list[str]:
    """List the media playlist URIs (``<prefix>...m3u8``) in a master playlist.

    Returns an empty list if the prefix does not occur; raises ``ValueError``
    if an occurrence is not followed by ``m3u8``.
    """
    if not url_prefix:
        raise ValueError("url prefix must not be empty")
    uris = []
    pos = master_playlist.find(url_prefix)
    while pos >= 0:
        end = master_playlist.find(_M3U8, pos)
        if end < 0:
            raise ValueError("master playlist entry does not end in m3u8")
        end += len(_M3U8)
        uris.append(master_playlist[pos:end])
        pos = master_playlist.find(url_prefix, end + 1)
    return uris


def playlist_duration(media_playlist: str) -> tuple[int, float]:
    """Return the number of ``#EXTINF`` chunks and their total duration in seconds."""
    count = 0
    total = 0.0
    pos = media_playlist.find(_EXTINF)
    while pos >= 0:
        pos += len(_EXTINF)
        match = _FLOAT_PREFIX.match(media_playlist, pos)
        if match is not None:
            total += float(match.group())
            pos = match.end()
        count += 1
        pos = media_playlist.find(_EXTINF, pos)
    return count, total