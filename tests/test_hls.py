import pytest

from uxplay.hls import (
    adjust_master_playlist,
    adjust_yt_condensed_playlist,
    create_media_uri_table,
    playlist_duration,
)

CONDENSED = (
    "#EXTM3U\n"
    '#YT-EXT-CONDENSED-URL:BASE-URI="https://example.com/base",PARAMS="itag,sq",PREFIX="P"\n'
    "#EXT-X-TARGETDURATION:5\n"
    "#EXTINF:5.0,\n"
    "P1/10\n"
    "#EXTINF:4.5,\n"
    "P1/11\n"
    "#EXT-X-ENDLIST\n"
)

PLAIN = (
    "#EXTM3U\n"
    "#EXT-X-TARGETDURATION:5\n"
    "#EXTINF:5.0,\n"
    "https://example.com/seg1.ts\n"
    "#EXTINF:4.5,\n"
    "https://example.com/seg2.ts\n"
    "#EXT-X-ENDLIST\n"
)


def test_condensed_playlist_is_expanded():
    expected = (
        "#EXTM3U\n"
        '#YT-EXT-CONDENSED-URL:BASE-URI="https://example.com/base",PARAMS="itag,sq",PREFIX="P"\n'
        "#EXT-X-TARGETDURATION:5\n"
        "#EXTINF:5.0,\n"
        "https://example.com/base/itag/1/sq/10\n"
        "#EXTINF:4.5,\n"
        "https://example.com/base/itag/1/sq/11\n"
        "#EXT-X-ENDLIST\n"
    )
    assert adjust_yt_condensed_playlist(CONDENSED) == expected


def test_expansion_keeps_chunk_count():
    expanded = adjust_yt_condensed_playlist(CONDENSED)
    assert expanded.count("#EXTINF:") == CONDENSED.count("#EXTINF:")
    assert expanded.endswith("#EXT-X-ENDLIST\n")


def test_plain_playlist_unchanged():
    assert adjust_yt_condensed_playlist(PLAIN) == PLAIN


def test_missing_header_raises():
    with pytest.raises(ValueError):
        adjust_yt_condensed_playlist("#EXTINF:5.0,\nseg.ts\n")


def test_missing_slice_values_raises():
    broken = CONDENSED.replace("P1/10\n", "P110\n").replace("P1/11\n", "P111\n")
    with pytest.raises(ValueError):
        adjust_yt_condensed_playlist(broken.replace("#EXT-X-ENDLIST\n", ""))


def test_master_playlist_prefix_replaced():
    master = (
        "#EXTM3U\n"
        "#EXT-X-STREAM-INF:BANDWIDTH=1\n"
        "https://example.com/hls/a/index.m3u8\n"
        "#EXT-X-STREAM-INF:BANDWIDTH=2\n"
        "https://example.com/hls/b/index.m3u8\n"
    )
    local = "http://localhost:7100"
    adjusted = adjust_master_playlist(master, "https://example.com/hls", local)
    assert adjusted.count(local) == 2
    assert "https://example.com/hls" not in adjusted
    assert adjust_master_playlist(adjusted, local, "https://example.com/hls") == master


def test_master_playlist_without_prefix_unchanged():
    assert adjust_master_playlist(PLAIN, "mlhls://x", "http://localhost:1") == PLAIN


def test_master_playlist_empty_prefix_raises():
    with pytest.raises(ValueError):
        adjust_master_playlist(PLAIN, "", "http://localhost:1")


def test_media_uri_table():
    first = "mlhls://localhost/itag/1/media.m3u8"
    second = "mlhls://localhost/itag/2/media.m3u8"
    master = f"#EXTM3U\n#EXT-X-STREAM-INF:A=1\n{first}\n#EXT-X-STREAM-INF:A=2\n{second}\n"
    assert create_media_uri_table("mlhls://localhost", master) == [first, second]


def test_media_uri_table_no_prefix():
    assert create_media_uri_table("mlhls://localhost", PLAIN) == []


def test_media_uri_table_missing_m3u8_raises():
    with pytest.raises(ValueError):
        create_media_uri_table("mlhls://", "#EXTM3U\nmlhls://localhost/x.ts\n")


def test_playlist_duration():
    count, total = playlist_duration(PLAIN)
    assert count == 2
    assert total == pytest.approx(9.5)


def test_playlist_duration_empty():
    assert playlist_duration("#EXTM3U\n") == (0, 0.0)


def test_playlist_duration_same_for_condensed_and_expanded():
    assert playlist_duration(adjust_yt_condensed_playlist(CONDENSED)) == playlist_duration(
        CONDENSED
    )