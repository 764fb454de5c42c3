"""Per-connection policies: client admission, pairing register, clock sync."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_U64 = 1 << 64
_PK_LENGTH = 44  # a 32-byte public key in base64

_BASE_FEATURES = 0x5A7FFEE6
_BIT_VIDEO = 0
_BIT_HLS = 4
_BIT_LEGACY_PAIRING = 27
_BIT_SCREEN_MULTI_CODEC = 42


@dataclass
class ClientPolicy:
    """Decides which client devices may connect."""

    restrict: bool = False
    allowed: list[str] = field(default_factory=list)
    blocked: list[str] = field(default_factory=list)

    def admit(self, device_id: str) -> bool:
        """Return True if the client with ``device_id`` may connect."""
        if self.restrict:
            admitted = device_id in self.allowed
            if not admitted:
                logger.info(
                    "client connections have been restricted to those with listed deviceID,\n"
                    'use "-allow %s" to allow this client to connect.',
                    device_id,
                )
        else:
            admitted = True
        if device_id in self.blocked:
            logger.info("*** attempt to connect by blocked client (clientID %s): DENIED", device_id)
            return False
        return admitted


@dataclass
class PairingRegister:
    """Public keys of clients that completed pin pairing."""

    enabled: bool = False
    path: str = ""
    keys: list[str] = field(default_factory=list)

    def register(self, device_id: str, client_pk: str, client_name: str) -> None:
        """Remember a newly paired client and append it to the register file."""
        if not self.enabled:
            return
        logger.info(
            "registered new client: %s DeviceID = %s PK = \n%s", client_name, device_id, client_pk
        )
        self.keys.append(client_pk)
        if self.path:
            try:
                with open(self.path, "a", encoding="utf-8") as file:
                    file.write(f"{client_pk},{device_id},{client_name}\n")
            except OSError:
                logger.error("could not append to pairing register %s", self.path)

    def check(self, client_pk: str) -> bool:
        """Return True if a returning client's key is registered (always when disabled)."""
        if not self.enabled:
            return True
        if client_pk in self.keys:
            logger.debug("registration found: PK=%s", client_pk)
            return True
        logger.error("returning client's pairing registration not found: PK=%s", client_pk)
        return False

    def load(self) -> int:
        """Read previously registered keys from the register file; return how many."""
        if not self.path:
            return 0
        try:
            with open(self.path, encoding="utf-8") as file:
                loaded = [line.rstrip("\n")[:_PK_LENGTH] for line in file]
        except OSError:
            return 0
        self.keys.extend(loaded)
        if loaded:
            logger.info("Register %s lists %d pin-registered clients", self.path, len(loaded))
        return len(loaded)


@dataclass
class ClockSync:
    """Maps client NTP timestamps onto the local clock, with codec delays."""

    audio_delay_alac: int = 0
    audio_delay_aac: int = 0
    remote_clock_offset: int = 0

    def adjust(self, ntp_time_local: int, ntp_time_remote: int, ct: int | None = None) -> int:
        """Return the remote timestamp translated to local time.

        The offset is fixed by the first packet after a reset.  ``ct`` is the
        audio compression type (2 ALAC, 4 or 8 AAC); None for video.
        """
        if not self.remote_clock_offset:
            self.remote_clock_offset = (ntp_time_local - ntp_time_remote) % _U64
        adjusted = ntp_time_remote + self.remote_clock_offset
        if ct == 2 and self.audio_delay_alac:
            adjusted += self.audio_delay_alac
        elif ct in (4, 8) and self.audio_delay_aac:
            adjusted += self.audio_delay_aac
        return adjusted % _U64

    def reset(self) -> None:
        """Forget the clock offset so the next packet sets it again."""
        self.remote_clock_offset = 0


def export_dacp(path: str, active_remote: str, dacp_id: str) -> bool:
    """Write the client's DACP id and Active-Remote token to ``path``.

    Returns True if the file was written; an empty ``path`` writes nothing.
    """
    if not path:
        return False
    try:
        with open(path, "w", encoding="utf-8") as file:
            file.write(f"{dacp_id}\n{active_remote}\n")
    except OSError:
        logger.error('failed to open DACP export file "%s"', path)
        return False
    return True


def _with_bit(value: int, bit: int, on: bool) -> int:
    return value | (1 << bit) if on else value & ~(1 << bit)


def feature_flags(hls_support: bool, h265_support: bool, legacy_pairing: bool) -> int:
    """Return the 64-bit AirPlay "features" value advertised over DNS-SD."""
    features = _BASE_FEATURES
    features = _with_bit(features, _BIT_VIDEO, hls_support)
    features = _with_bit(features, _BIT_HLS, hls_support)
    features = _with_bit(features, _BIT_SCREEN_MULTI_CODEC, h265_support)
    features = _with_bit(features, _BIT_LEGACY_PAIRING, legacy_pairing)
    return features