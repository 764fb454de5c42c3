import re

import pytest

from uxplay.volume import airplay_volume_to_gain, format_progress


def test_full_volume_with_default_range_is_unity():
    assert airplay_volume_to_gain(0.0) == 1.0


@pytest.mark.parametrize("volume", [-144.0, -30.0, -50.0])
def test_mute_and_minimum_give_zero(volume):
    assert airplay_volume_to_gain(volume) == 0.0


def test_volume_above_zero_is_clamped_to_full():
    assert airplay_volume_to_gain(5.0, -20.0, 3.0) == airplay_volume_to_gain(0.0, -20.0, 3.0)


def test_gain_increases_with_volume():
    volumes = [-29.0, -25.0, -20.0, -15.0, -10.0, -5.0, -1.0, 0.0]
    gains = [airplay_volume_to_gain(v) for v in volumes]
    assert gains == sorted(gains)
    assert len(set(gains)) == len(gains)


@pytest.mark.parametrize("volume", [-29.0, -20.0, -15.0, -7.5, -1.0])
def test_taper_never_quieter_than_flat(volume):
    flat = airplay_volume_to_gain(volume, -30.0, 0.0, False)
    tapered = airplay_volume_to_gain(volume, -30.0, 0.0, True)
    assert tapered >= flat


def test_taper_and_flat_agree_at_full_volume():
    assert airplay_volume_to_gain(0.0, -40.0, -2.0, True) == pytest.approx(
        airplay_volume_to_gain(0.0, -40.0, -2.0, False)
    )


def test_higher_db_high_raises_gain():
    assert airplay_volume_to_gain(-10.0, -30.0, 6.0) > airplay_volume_to_gain(-10.0, -30.0, 0.0)


def test_progress_at_start_of_track():
    text = format_progress(0, 0, 44100 * 125)
    assert text == "audio progress (min:sec): 0:00; remaining: 2:05; track length 2:05"


def test_progress_fields_are_consistent():
    start = 1000
    text = format_progress(start, start + 44100 * 70, start + 44100 * 200)
    match = re.fullmatch(
        r"audio progress \(min:sec\): (\d+):(\d\d); remaining: (\d+):(\d\d); "
        r"track length (\d+):(\d\d)",
        text,
    )
    assert match
    pos, rem, dur = (
        int(match.group(i)) * 60 + int(match.group(i + 1)) for i in (1, 3, 5)
    )
    assert pos == 70
    assert dur == 200
    assert pos + rem == dur


def test_progress_handles_timestamp_wraparound():
    start = 0xFFFFFFFF - 44100 * 5
    end = (start + 44100 * 60) & 0xFFFFFFFF
    text = format_progress(start, start, end)
    assert text.endswith("track length 1:00")