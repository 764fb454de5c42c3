[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "uxplay"
version = "1.71"
description = "Building blocks for an AirPlay mirroring and audio-streaming server: DMAP metadata, HLS playlists, property lists, volume mapping, stream dumps and client session policies."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "airplay",
    "mirroring",
    "raop",
    "dmap",
    "hls",
    "m3u8",
    "plist",
    "streaming",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video :: Display",
    "Topic :: Multimedia :: Sound/Audio",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["uxplay"]

[tool.hatch.build.targets.sdist]
include = ["uxplay", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
