"""The derivative path grammar.

    <dir>/<stem>-<W>x<H>(-<option>(<args>)?)*.<ext>

``W``/``H`` are decimal integers or ``_`` (unspecified). The stem is matched
greedily, so the rightmost ``-WxH`` block is the suffix and hyphenated file
names such as ``my-photo-300x200.jpg`` keep their hyphens.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

from croppy.errors.exceptions import InvalidInput

logger = logging.getLogger(__name__)

EXTENSIONS = ("jpg", "jpeg", "png", "gif")

PATTERN = (
    r"(.+)-(\d+|_)x(\d+|_)((?:-[0-9a-zA-Z(),\-._]+)*)\.("
    + "|".join(EXTENSIONS)
    + r")"
)

_PATH_RX = re.compile(PATTERN, re.IGNORECASE)
_OPTION_RX = re.compile(r"(\w+)(?:\(([\w,.]*)\))?")
_NAME_RX = re.compile(r"[A-Za-z][0-9A-Za-z_]*")
# no "-" in arguments, so the rightmost -WxH block is always the real suffix
_ARG_RX = re.compile(r"[0-9A-Za-z_.]+")

PLACEHOLDER = "_"

CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
}


class PathMatch(NamedTuple):
    """Raw pieces of a path that matched the grammar."""

    stem: str
    width: str
    height: str
    options: str
    extension: str

    @property
    def source(self) -> str:
        return f"{self.stem}.{self.extension}"


def match_path(path: str) -> PathMatch | None:
    """Split ``path`` into grammar pieces, or None when it does not match."""
    m = _PATH_RX.fullmatch(path)
    if m is None:
        return None
    return PathMatch(*m.groups())


def decode_dimension(token: str) -> int | None:
    """``_`` and ``0`` both mean "unspecified"."""
    if token == PLACEHOLDER:
        return None
    value = int(token)
    return value or None


def encode_dimension(value: float | None) -> str:
    """Round half up to an int; absent or zero becomes ``_``."""
    if not value:
        return PLACEHOLDER
    if value < 0:
        raise InvalidInput(f"Dimensions must be positive, got {value}")
    rounded = int(value + 0.5)
    if rounded < 1:
        raise InvalidInput(f"Dimension {value} rounds to zero")
    return str(rounded)


def split_options(params: str) -> list[str]:
    """Split ``-a-b(1,2)-c`` on hyphens that sit outside parentheses."""
    segments: list[str] = []
    depth = 0
    current: list[str] = []
    for char in params:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        if char == "-" and depth == 0:
            if current:
                segments.append("".join(current))
            current = []
            continue
        current.append(char)
    if current:
        segments.append("".join(current))
    return segments


def parse_options(params: str) -> dict[str, list[str]]:
    """Options suffix to an ordered ``{name: [args]}`` mapping.

    Malformed segments are skipped, the way hand-written URLs are tolerated.
    """
    options: dict[str, list[str]] = {}
    for segment in split_options(params):
        m = _OPTION_RX.fullmatch(segment)
        if m is None:
            logger.debug("Skipping malformed option segment %r", segment)
            continue
        name, args = m.group(1), m.group(2)
        options[name] = [a for a in args.split(",") if a] if args else []
    return options


def normalize_options(options: Any) -> dict[str, list[str]]:
    """Accept the friendly option shapes callers use and return the canonical one.

    ``{"resize": None}``, ``{"resize": True}``, ``["resize"]`` and
    ``{"resize": []}`` are all bare options; ``{"quadrant": "T"}`` and
    ``{"trim": [0, 0, 10, 10]}`` carry arguments. ``False`` drops the option.
    """
    if not options:
        return {}

    items: Iterable[tuple[str, Any]]
    if isinstance(options, Mapping):
        items = options.items()
    elif isinstance(options, str):
        items = [(options, None)]
    else:
        items = [(o, None) if isinstance(o, str) else tuple(o) for o in options]

    result: dict[str, list[str]] = {}
    for name, value in items:
        if not isinstance(name, str) or not _NAME_RX.fullmatch(name):
            raise InvalidInput(f"Invalid option name: {name!r}")
        if value is False:
            continue
        if value is None or value is True:
            args: list[str] = []
        elif isinstance(value, (list, tuple)):
            args = [_format_arg(v) for v in value]
        else:
            args = [_format_arg(value)]
        for arg in args:
            if not _ARG_RX.fullmatch(arg):
                raise InvalidInput(f"Invalid argument {arg!r} for option {name!r}")
        result[name] = args
    return result


def format_options(options: Mapping[str, list[str]]) -> str:
    """Inverse of :func:`parse_options`."""
    parts = []
    for name, args in options.items():
        parts.append(f"-{name}({','.join(args)})" if args else f"-{name}")
    return "".join(parts)


def _format_arg(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def content_type_for(path: str) -> str | None:
    """Closed extension lookup; None for anything the grammar would not accept."""
    ext = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    return CONTENT_TYPES.get(ext)
