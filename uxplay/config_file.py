"""Locating and reading the startup options file."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping

try:
    import pwd
except ImportError:  # not available on Windows
    pwd = None  # type: ignore[assignment]

_QUOTES = "'\""


def _get_homedir(environ: Mapping[str, str]) -> str | None:
    homedir = environ.get("XDG_CONFIG_HOMEDIR") or environ.get("HOME")
    if homedir is None and pwd is not None:
        try:
            homedir = pwd.getpwuid(os.getuid()).pw_dir
        except KeyError:
            homedir = None
    return homedir


def find_config_file(environ: Mapping[str, str] | None = None) -> str | None:
    """Return the path of the options file, or None if there is none.

    Looks at ``$UXPLAYRC``, then ``~/.uxplayrc``, then ``~/.config/uxplayrc``.
    """
    env = os.environ if environ is None else environ
    candidates = []
    explicit = env.get("UXPLAYRC")
    if explicit:
        candidates.append(explicit)
    homedir = _get_homedir(env)
    if homedir:
        candidates.append(homedir + "/.uxplayrc")
        candidates.append(homedir + "/.config/uxplayrc")
    return next((path for path in candidates if os.path.exists(path)), None)


def split_config_line(line: str) -> list[str]:
    """Split one options-file line into items.

    Items are separated by spaces; an item may be quoted with ``'`` or ``"``.
    A quote ends a quoted item only when it is not preceded by a backslash
    and is followed by a space or the end of the line.  Lines starting with
    ``#`` give no items.
    """
    if line.startswith("#"):
        return []
    items: list[str] = []
    current: list[str] | None = None
    endchar = " "
    in_quotes = False
    for index, ch in enumerate(line):
        if current is None:
            if ch == " ":
                continue
            if ch in _QUOTES:
                endchar, in_quotes, current = ch, True, []
            else:
                endchar, in_quotes, current = " ", False, [ch]
            continue
        if ch == endchar:
            escaped = index > 0 and line[index - 1] == "\\"
            inner = index + 1 < len(line) and line[index + 1] != " "
            if not (in_quotes and (escaped or inner)):
                items.append("".join(current))
                current = None
                continue
        current.append(ch)
    if current is not None:
        items.append("".join(current))
    return [item for item in items if item]


def read_config_options(path: str) -> list[str]:
    """Read the options file into command-line arguments.

    The first item of each line is an option name and gets a leading ``-``.
    A file that cannot be opened gives no options.
    """
    options: list[str] = []
    try:
        with open(path, encoding="utf-8") as file:
            print(f"UxPlay: reading configuration from  {path}")
            for line in file:
                items = split_config_line(line.rstrip("\n"))
                if items:
                    options.append("-" + items[0])
                    options.extend(items[1:])
    except OSError:
        print(f"UxPlay: failed to open configuration file at {path}", file=sys.stderr)
        return []
    return options