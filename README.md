# uxplay

Pure-Python building blocks for an AirPlay mirroring and audio-streaming
server. The package covers the parts of such a server that need neither a
media framework nor a network stack of their own:

- locating and reading a startup options file,
- client admission, pin-pairing registers and clock-offset bookkeeping,
- DMAP ("Now Playing") metadata decoding,
- AirPlay volume to linear gain conversion and progress reports,
- raw audio and H.264 stream dumping,
- the ASCII-art pin display shown while a client pairs,
- HLS playlist rewriting for the AirPlay video path,
- the property lists exchanged on the AirPlay HTTP channel.

It uses only the standard library and supports Python 3.10 and later.

## Modules

| Module | What it does |
| --- | --- |
| `uxplay.config_file` | `find_config_file(environ)`, `split_config_line(line)`, `read_config_options(path)` |
| `uxplay.session` | `ClientPolicy`, `PairingRegister`, `ClockSync`, `export_dacp`, `feature_flags` |
| `uxplay.dmap` | `parse_metadata(buffer)` returns `DmapItem`s; `parse_dmap_header`, `tag_label` and `format_item` |
| `uxplay.volume` | `airplay_volume_to_gain(volume, db_low, db_high, taper)` and `format_progress(start, curr, end)` |
| `uxplay.dumps` | `AudioDumper` and `VideoDumper` write received frames to files; `audio_type_for_ct(ct)` |
| `uxplay.pin` | `create_pin_display(pin, margin, gap)` draws a pin in large ASCII digits |
| `uxplay.hls` | master and media playlist rewriting, URI tables and duration summing |
| `uxplay.plists` | playback-info, server-info and set-property responses; `/action` and `/play` request parsing |

## Options files

`find_config_file` returns the first of these that exists, or None:

1. the file named by `$UXPLAYRC`,
2. `~/.uxplayrc`,
3. `~/.config/uxplayrc`.

The home directory is taken from `$XDG_CONFIG_HOMEDIR`, then `$HOME`, then
the password database. In the file each line holds one option without its
leading `-`; lines starting with `#` are ignored, and single or double
quotes group words into one item. `read_config_options` turns the file into
a list of command-line arguments:

```python
import os
from uxplay.config_file import find_config_file, read_config_options

path = find_config_file(os.environ)
args = read_config_options(path) if path else []
# a line `n "Living Room"` gives ["-n", "Living Room"]
```

## Client sessions

```python
from uxplay.session import ClientPolicy, ClockSync, PairingRegister

policy = ClientPolicy(restrict=True, allowed=["AA:BB:CC:00:00:01"])
policy.admit("AA:BB:CC:00:00:01")      # True; blocked ids are always refused

register = PairingRegister(enabled=True, path="pairing.register")
register.load()                        # reads keys from earlier runs
register.check(client_pk)

clock = ClockSync(audio_delay_aac=100_000_000)
local_time = clock.adjust(ntp_local, ntp_remote, ct=8)
```

`feature_flags(hls_support, h265_support, legacy_pairing)` gives the 64-bit
"features" value to advertise, and `export_dacp(path, active_remote,
dacp_id)` writes a client's DACP id and Active-Remote token to a file.

## Metadata

```python
from uxplay.dmap import DmapError, format_item, parse_metadata

try:
    for item in parse_metadata(buffer):
        line = format_item(item, debug=False)
        if line:
            print(line)
except DmapError as exc:
    print(f"bad metadata: {exc}")
```

Text tags such as `minm` (title), `asar` (artist) and `asal` (album) are
decoded as UTF-8; other tags are shown as a hex dump only with `debug=True`.

## Volume

AirPlay reports volume in decibels from -30 to 0, with -144 meaning mute.
`airplay_volume_to_gain` rescales that range onto `[db_low, db_high]` and
returns a linear gain; mute gives `0.0`. With `taper=True` each halving of
the slider lowers the level by 10 dB, never below the flat rescaling.

```python
from uxplay.volume import airplay_volume_to_gain, format_progress

gain = airplay_volume_to_gain(-15.0, -30.0, 0.0, False)
print(format_progress(0, 44100 * 75, 44100 * 200))
```

## Stream dumps

```python
from uxplay.dumps import AudioDumper, VideoDumper

with AudioDumper("audiodump", limit=100) as audio:
    audio.set_format(8)        # AAC: files are audiodump.1.aac, ...
    audio.write(packet)

with VideoDumper("videodump") as video:
    video.write(nal_units)     # videodump.h264, closed with a NAL start code
```

## Pin display

```python
from uxplay.pin import create_pin_display

print(create_pin_display("1234", 10, 3))
```

## HLS playlists

```python
from uxplay.hls import (
    adjust_master_playlist,
    adjust_yt_condensed_playlist,
    create_media_uri_table,
    playlist_duration,
)

local_master = adjust_master_playlist(master, remote_prefix, "http://localhost:7000")
uris = create_media_uri_table(remote_prefix, master)
expanded = adjust_yt_condensed_playlist(media_playlist)
chunks, seconds = playlist_duration(media_playlist)
```

Media playlists carrying the `#YT-EXT-CONDENSED-URL` header are expanded to
the standard form; others are returned unchanged.

## Property lists

`uxplay.plists` builds the XML plists the server sends
(`create_playback_info_plist`, `create_server_info_plist`,
`create_set_property_response`) and parses the binary plists a client posts
(`parse_action_request`, `parse_play_request`), raising `ValueError` for
malformed bodies. `parse_query_float(url)` reads values such as
`/scrub?position=12.5`.

## What the package does not do

There is no command to run and no server: the package does not advertise
over DNS-SD, accept RAOP or HTTP connections, decrypt streams or render
audio and video. It also has no parser for the server's command-line
options; `read_config_options` only returns the arguments an options file
holds. These pieces are meant to be used by a program that supplies the
networking and media playback.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.