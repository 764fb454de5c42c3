"""Property lists exchanged with AirPlay clients on the HTTP channel."""

from __future__ import annotations

import plistlib
import re
import struct
from dataclasses import dataclass, field
from typing import Any

GLOBAL_MODEL = "AppleTV3,2"
GLOBAL_VERSION = "220.68"
AIRPLAY_VV = 2
OS_BUILD_VERSION = "12B435"
PROTOCOL_VERSION = "1.0"

# Video, photo, FairPlay video, video volume, HLS, slideshow, bit 6 and audio.
SERVER_INFO_FEATURES = 0x27F

KNOWN_PROPERTIES = ("reverseEndTime", "forwardEndTime", "actionAtItemEnd")

ACTION_UNHANDLED_URL_RESPONSE = "unhandledURLResponse"
ACTION_PLAYLIST_INSERT = "playlistInsert"
ACTION_PLAYLIST_REMOVE = "playlistRemove"
ACTION_UNKNOWN = "unknown"

_MASTER_PLAYLIST = "/master.m3u8"
_FLOAT_PREFIX = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_PLIST_ERRORS = (ValueError, struct.error, IndexError, KeyError, OverflowError, TypeError)


@dataclass(frozen=True)
class TimeRange:
    """A span of media time in seconds."""

    start: float
    duration: float


@dataclass
class PlaybackInfo:
    """State of the media player reported to the client.

    When no time ranges are given, the loaded range runs from the current
    position to the end and the seekable range from 0 to the position.
    """

    duration: float
    position: float
    rate: float
    ready_to_play: bool = True
    playback_buffer_empty: bool = False
    playback_buffer_full: bool = True
    playback_likely_to_keep_up: bool = True
    loaded_time_ranges: list[TimeRange] | None = None
    seekable_time_ranges: list[TimeRange] | None = None

    def __post_init__(self) -> None:
        if self.loaded_time_ranges is None:
            self.loaded_time_ranges = [
                TimeRange(self.position, self.duration - self.position)
            ]
        if self.seekable_time_ranges is None:
            self.seekable_time_ranges = [TimeRange(0.0, self.position)]


@dataclass(frozen=True)
class ActionRequest:
    """The contents of a ``POST /action`` request.

    ``action`` is one of the ``ACTION_*`` names.  For an
    ``unhandledURLResponse`` the FCUP response fields are filled in.
    """

    action: str
    url: str | None = None
    data: bytes | None = None
    status_code: int | None = None
    request_id: int | None = None


@dataclass(frozen=True)
class PlayRequest:
    """The contents of a ``POST /play`` request."""

    uuid: str
    content_location: str
    start_position_seconds: float = 0.0
    uri_prefix: str = field(default="")


def _dumps(value: dict[str, Any]) -> bytes:
    return plistlib.dumps(value, fmt=plistlib.FMT_XML, sort_keys=False)


def _time_ranges(ranges: list[TimeRange]) -> list[dict[str, float]]:
    return [
        {"duration": float(item.duration), "start": float(item.start)} for item in ranges
    ]


def create_playback_info_plist(info: PlaybackInfo) -> bytes:
    """Return the XML plist answering ``GET /playback-info``."""
    root = {
        "duration": float(info.duration),
        "position": float(info.position),
        "rate": float(info.rate),
        "readyToPlay": int(info.ready_to_play),
        "playbackBufferEmpty": int(info.playback_buffer_empty),
        "playbackBufferFull": int(info.playback_buffer_full),
        "playbackLikelyToKeepUp": int(info.playback_likely_to_keep_up),
        "loadedTimeRanges": _time_ranges(info.loaded_time_ranges or []),
        "seekableTimeRanges": _time_ranges(info.seekable_time_ranges or []),
    }
    return _dumps(root)


def create_server_info_plist(hw_addr: bytes) -> bytes:
    """Return the XML plist answering ``GET /server-info`` for a hardware address."""
    address = ":".join(f"{octet:02x}" for octet in hw_addr)
    root = {
        "features": SERVER_INFO_FEATURES,
        "macAddress": address,
        "model": GLOBAL_MODEL,
        "osBuildVersion": OS_BUILD_VERSION,
        "protovers": PROTOCOL_VERSION,
        "srcvers": GLOBAL_VERSION,
        "vv": AIRPLAY_VV,
        "deviceid": address,
    }
    return _dumps(root)


def create_set_property_response(prop: str) -> bytes | None:
    """Return the plist answering ``PUT /setProperty?<prop>``.

    Known properties get an ``errorCode`` 0 reply; unknown ones get None,
    meaning an empty response.
    """
    if prop in KNOWN_PROPERTIES:
        return _dumps({"errorCode": 0})
    return None


def parse_query_float(url: str) -> float:
    """Return the number after ``=`` in the query of ``url``, or 0.0 if there is none."""
    _, question, query = url.partition("?")
    if not question:
        return 0.0
    _, equals, value = query.partition("=")
    if not equals:
        return 0.0
    match = _FLOAT_PREFIX.match(value)
    return float(match.group()) if match else 0.0


def _load_binary_dict(data: bytes) -> dict[str, Any]:
    if not data:
        raise ValueError("request carries no plist")
    try:
        root = plistlib.loads(data, fmt=plistlib.FMT_BINARY)
    except _PLIST_ERRORS as exc:
        raise ValueError(f"invalid binary plist: {exc}") from exc
    if not isinstance(root, dict):
        raise ValueError("plist root is not a dictionary")
    return root


def _optional_int(params: dict[str, Any], key: str) -> int | None:
    value = params.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def parse_action_request(data: bytes) -> ActionRequest:
    """Parse the binary plist body of a ``POST /action`` request.

    Raises ``ValueError`` if the body is not a valid action plist.
    """
    root = _load_binary_dict(data)
    action_type = root.get("type")
    if not isinstance(action_type, str):
        raise ValueError("action plist has no string 'type'")
    for action in (ACTION_UNHANDLED_URL_RESPONSE, ACTION_PLAYLIST_INSERT, ACTION_PLAYLIST_REMOVE):
        if action in action_type:
            break
    else:
        return ActionRequest(ACTION_UNKNOWN)
    if action != ACTION_UNHANDLED_URL_RESPONSE:
        return ActionRequest(action)

    params = root.get("params")
    if not isinstance(params, dict):
        raise ValueError("action plist has no 'params' dictionary")
    url = params.get("FCUP_Response_URL")
    if not isinstance(url, str):
        raise ValueError("action plist has no string FCUP_Response_URL")
    body = params.get("FCUP_Response_Data")
    if not isinstance(body, bytes):
        raise ValueError("action plist has no FCUP_Response_Data")
    return ActionRequest(
        action,
        url=url,
        data=body,
        status_code=_optional_int(params, "FCUP_Response_StatusCode"),
        request_id=_optional_int(params, "FCUP_Response_RequestID"),
    )


def parse_play_request(data: bytes) -> PlayRequest:
    """Parse the binary plist body of a ``POST /play`` request.

    Raises ``ValueError`` if the uuid or a master-playlist
    ``Content-Location`` is missing.
    """
    root = _load_binary_dict(data)
    uuid = root.get("uuid")
    if not isinstance(uuid, str):
        raise ValueError("play request has no uuid")
    location = root.get("Content-Location")
    if not isinstance(location, str):
        raise ValueError("play request has no Content-Location")
    index = location.find(_MASTER_PLAYLIST)
    if index < 0:
        raise ValueError(f"Content-Location {location!r} is not a master playlist")
    start = root.get("Start-Position-Seconds")
    start_seconds = float(start) if isinstance(start, (int, float)) else 0.0
    return PlayRequest(uuid, location, start_seconds, location[:index])