"""Building blocks for an AirPlay server: metadata, playlists, plists, volume, dumps and sessions."""

__version__ = "1.71"