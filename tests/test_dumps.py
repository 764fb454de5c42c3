from pathlib import Path

import pytest

from uxplay.dumps import AudioDumper, VideoDumper, audio_type_for_ct

SPS = b"\x00\x00\x00\x01\x67\xaa\xbb"
SLICE = b"\x00\x00\x00\x01\x41\xcc\xdd"


@pytest.mark.parametrize("ct,expected", [(2, 0x20), (8, 0x80), (4, 0x10), (0, 0x10)])
def test_audio_type_for_ct(ct, expected):
    assert audio_type_for_ct(ct) == expected


def test_audio_nothing_written_before_format(tmp_path):
    base = tmp_path / "audiodump"
    with AudioDumper(str(base)) as dumper:
        dumper.write(b"abc")
    assert dumper.paths == []
    assert list(tmp_path.iterdir()) == []


def test_audio_files_named_by_format(tmp_path):
    base = str(tmp_path / "audiodump")
    with AudioDumper(base) as dumper:
        dumper.set_format(2)
        dumper.write(b"one")
        dumper.write(b"two")
        dumper.set_format(8)
        dumper.write(b"three")
        dumper.set_format(4)
        dumper.write(b"four")
    assert dumper.paths == [base + ".1.alac", base + ".2.aac", base + ".3.aud"]
    assert Path(base + ".1.alac").read_bytes() == b"onetwo"
    assert Path(base + ".2.aac").read_bytes() == b"three"
    assert Path(base + ".3.aud").read_bytes() == b"four"


def test_audio_same_format_keeps_file(tmp_path):
    base = str(tmp_path / "a")
    with AudioDumper(base) as dumper:
        dumper.set_format(2)
        dumper.write(b"x")
        dumper.set_format(2)
        dumper.write(b"y")
    assert dumper.paths == [base + ".1.alac"]
    assert Path(base + ".1.alac").read_bytes() == b"xy"


def test_audio_limit_stops_writing(tmp_path):
    base = str(tmp_path / "a")
    with AudioDumper(base, limit=2) as dumper:
        dumper.set_format(8)
        for chunk in (b"1", b"2", b"3", b"4"):
            dumper.write(chunk)
    assert dumper.paths == [base + ".1.aac"]
    assert Path(base + ".1.aac").read_bytes() == b"12"


def test_audio_open_failure_is_not_fatal(tmp_path):
    base = str(tmp_path / "missing" / "a")
    dumper = AudioDumper(base)
    dumper.set_format(2)
    dumper.write(b"data")
    dumper.close()
    assert dumper.paths == []


def test_video_unlimited_single_file(tmp_path):
    base = str(tmp_path / "videodump")
    with VideoDumper(base) as dumper:
        dumper.write(SPS)
        dumper.write(SLICE)
        dumper.write(SPS)
    assert dumper.paths == [base + ".h264"]
    assert Path(base + ".h264").read_bytes() == SPS + SLICE + SPS + b"\x00\x00\x00\x01"


def test_video_limit_splits_at_sps(tmp_path):
    base = str(tmp_path / "v")
    with VideoDumper(base, limit=2) as dumper:
        dumper.write(SPS)
        dumper.write(SLICE)
        dumper.write(SLICE)
        dumper.write(SPS)
        dumper.write(SLICE)
    assert dumper.paths == [base + ".1.h264", base + ".2.h264"]
    mark = b"\x00\x00\x00\x01"
    assert Path(base + ".1.h264").read_bytes() == SPS + SLICE + mark
    assert Path(base + ".2.h264").read_bytes() == SPS + SLICE + mark


def test_video_close_twice_is_harmless(tmp_path):
    base = str(tmp_path / "v")
    dumper = VideoDumper(base)
    dumper.write(SLICE)
    dumper.close()
    dumper.close()
    assert Path(base + ".h264").read_bytes() == SLICE + b"\x00\x00\x00\x01"


def test_video_short_frame_does_not_fail(tmp_path):
    base = str(tmp_path / "v")
    with VideoDumper(base, limit=1) as dumper:
        dumper.write(b"\x00\x01")
    assert Path(base + ".1.h264").read_bytes() == b"\x00\x01\x00\x00\x00\x01"