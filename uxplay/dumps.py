"""Dumping of received audio and video frames to files."""

from __future__ import annotations

import logging
from typing import BinaryIO

logger = logging.getLogger(__name__)

AUDIO_ALAC = 0x20
AUDIO_AAC = 0x80
AUDIO_OTHER = 0x10

NAL_MARK = b"\x00\x00\x00\x01"
_NAL_TYPE_SPS = 0x07

_AUDIO_SUFFIXES = {AUDIO_ALAC: "alac", AUDIO_AAC: "aac"}


def audio_type_for_ct(ct: int) -> int:
    """Map an AirPlay compression type to the dump format code."""
    if ct == 2:
        return AUDIO_ALAC
    if ct == 8:
        return AUDIO_AAC
    return AUDIO_OTHER


def _open(path: str, what: str) -> BinaryIO | None:
    try:
        return open(path, "wb")
    except OSError:
        logger.error("could not open file %s for dumping %s", path, what)
        return None


class AudioDumper:
    """Writes audio packets to ``<basename>.<n>.<fmt>`` files.

    A new file is started whenever the audio format changes.  With a
    non-zero ``limit`` at most that many packets go to each file.
    """

    def __init__(self, basename: str = "audiodump", limit: int = 0) -> None:
        self.basename = basename
        self.limit = limit
        self.paths: list[str] = []
        self._file: BinaryIO | None = None
        self._file_count = 0
        self._dump_count = 0
        self._audio_type = 0
        self._previous_type = 0

    def set_format(self, ct: int) -> None:
        """Record the stream's compression type, closing a file of another format."""
        audio_type = audio_type_for_ct(ct)
        if self._file is not None and audio_type != self._audio_type:
            self.close()
        self._audio_type = audio_type

    def write(self, data: bytes) -> None:
        """Write one audio packet."""
        if self._file is None and self._audio_type != self._previous_type:
            self._previous_type = self._audio_type
            self._file_count += 1
            self._dump_count = 0
            suffix = _AUDIO_SUFFIXES.get(self._audio_type, "aud")
            path = f"{self.basename}.{self._file_count}.{suffix}"
            self._file = _open(path, "audio frames")
            if self._file is not None:
                self.paths.append(path)
        if self._file is None:
            return
        self._file.write(data)
        if self.limit:
            self._dump_count += 1
            if self._dump_count == self.limit:
                self.close()

    def close(self) -> None:
        """Close the current dump file, if any."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> AudioDumper:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class VideoDumper:
    """Writes h264 NAL units to ``<basename>.h264`` or numbered files.

    With a non-zero ``limit`` a new file ``<basename>.<n>.h264`` starts at
    every SPS NAL unit and at most ``limit`` units go to each file.
    """

    def __init__(self, basename: str = "videodump", limit: int = 0) -> None:
        self.basename = basename
        self.limit = limit
        self.paths: list[str] = []
        self._file: BinaryIO | None = None
        self._file_count = 0
        self._dump_count = 0

    def write(self, data: bytes) -> None:
        """Write one frame of NAL units."""
        is_sps = len(data) > 4 and (data[4] & 0x1F) == _NAL_TYPE_SPS
        if is_sps and self._file is not None and self.limit:
            self.close()
            self._dump_count = 0
        if self._file is None:
            path = self.basename
            if self.limit:
                self._file_count += 1
                path += f".{self._file_count}"
            path += ".h264"
            self._file = _open(path, "h264 frames")
            if self._file is not None:
                self.paths.append(path)
        if self._file is None:
            return
        if self.limit == 0:
            self._file.write(data)
        elif self._dump_count < self.limit:
            self._dump_count += 1
            self._file.write(data)

    def close(self) -> None:
        """Terminate the current file with a NAL start code and close it."""
        if self._file is not None:
            self._file.write(NAL_MARK)
            self._file.close()
            self._file = None

    def __enter__(self) -> VideoDumper:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()