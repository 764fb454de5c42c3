"""Volume conversion and progress reporting for AirPlay audio streams."""

from __future__ import annotations

import logging
import math

logger = logging.getLogger(__name__)

_MUTE = -144.0
_AIRPLAY_MIN_DB = -30.0
_AIRPLAY_MAX_DB = 0.0
_SAMPLE_RATE = 44100


def _slider_fraction(volume: float) -> float:
    """Map an AirPlay volume in dB to the slider position in [0, 1]."""
    if volume == _MUTE:
        return 0.0
    if volume < _AIRPLAY_MIN_DB:
        logger.error(" invalid AirPlay volume %f", volume)
        return 0.0
    if volume > _AIRPLAY_MAX_DB:
        logger.error(" invalid AirPlay volume %f", volume)
        return 1.0
    if volume == _AIRPLAY_MIN_DB:
        return 0.0
    if volume == _AIRPLAY_MAX_DB:
        return 1.0
    return min((-_AIRPLAY_MIN_DB + volume) / -_AIRPLAY_MIN_DB, 1.0)


def airplay_volume_to_gain(
    volume: float, db_low: float = -30.0, db_high: float = 0.0, taper: bool = False
) -> float:
    """Convert an AirPlay volume (dB in -30..0, or -144 for mute) to a linear gain.

    The AirPlay range is rescaled onto ``db_low..db_high``.  With ``taper``
    each halving of the slider length lowers the volume by 10 dB, but never
    below the flat rescaling.
    """
    frac = _slider_fraction(volume)
    if frac == 0.0:
        return 0.0
    db_flat = db_low + (db_high - db_low) * frac
    if taper:
        db = max(db_high + 10.0 * math.log2(frac), db_flat)
    else:
        db = db_flat
    return 10.0 ** (0.05 * db)


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= (1 << 31) else value


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _trunc_mod(a: int, b: int) -> int:
    return a - b * _trunc_div(a, b)


def _min_sec(seconds: int) -> str:
    minutes = _trunc_div(seconds, 60)
    secs = _trunc_mod(seconds, 60)
    sign = "-" if secs < 0 else ""
    return f"{minutes}:{sign}{abs(secs):02d}"


def format_progress(start: int, curr: int, end: int) -> str:
    """Describe playback progress from RTP timestamps at 44100 Hz."""
    duration = _trunc_div(_to_int32(end - start), _SAMPLE_RATE)
    position = _trunc_div(_to_int32(curr - start), _SAMPLE_RATE)
    remain = duration - position
    return (
        f"audio progress (min:sec): {_min_sec(position)}; "
        f"remaining: {_min_sec(remain)}; track length {_min_sec(duration)}"
    )