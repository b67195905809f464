"""Reading and writing the ``Host`` blocks of an SSH client config.

Only the directives listed in :class:`sshdeck.profile.ProfileField` are
understood. Anything else (comments, ``Match`` blocks, ``Include``, unknown
options) is dropped when the file is written back.
"""

import base64
import binascii
import logging
import os
import re
from typing import Iterable, List, Optional

from .profile import Profile, ProfileField

logger = logging.getLogger(__name__)

HOST_PATTERN = re.compile(r"^Host\s+(.*)$")
INDENT = "    "


def _match_keyword(line: str, keyword: str) -> Optional[str]:
    """Return the value after *keyword* or ``None`` if the line is not that directive."""
    if not line.startswith(keyword):
        return None
    rest = line[len(keyword):]
    if rest and not rest[0].isspace():
        return None
    return rest.strip()


def encode_password(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def decode_password(value: str) -> str:
    """Reverse :func:`encode_password`, keeping hand-written plain values as-is."""
    try:
        return base64.b64decode(value.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return value


def parse(text: str) -> List[Profile]:
    """Parse config text into profiles, in file order.

    Lines before the first ``Host`` and lines that match no known directive are
    ignored; this function does not raise on malformed input.
    """
    profiles: List[Profile] = []
    name: Optional[str] = None
    values = {}

    def flush():
        if name is not None:
            profiles.append(Profile(name=name, **values))

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        host_match = HOST_PATTERN.match(line)
        if host_match:
            flush()
            name = host_match.group(1).strip()
            values = {}
            continue

        if name is None:
            continue

        for field in ProfileField.optional():
            value = _match_keyword(line, field.keyword)
            if value is None:
                continue
            if value:
                if field is ProfileField.PASSWORD:
                    value = decode_password(value)
                values[field.attribute] = value
            break

    flush()
    return profiles


def serialize(profiles: Iterable[Profile]) -> str:
    """Render profiles back to config text; unset fields are omitted."""
    lines: List[str] = []
    for profile in profiles:
        lines.append(f"Host {profile.name}")
        for field in ProfileField.optional():
            value = profile.get(field)
            if value is None:
                continue
            if field is ProfileField.PASSWORD:
                value = encode_password(value)
            lines.append(f"{INDENT}{field.keyword} {value}")
        lines.append("")
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def read_profiles(path: str) -> List[Profile]:
    """Load profiles from *path*. ``OSError`` is left to the caller."""
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    profiles = parse(text)
    logger.debug("Parsed %d host(s) from %s", len(profiles), path)
    return profiles


def write_profiles(path: str, profiles: Iterable[Profile]) -> None:
    """Overwrite *path* with the serialized profiles."""
    text = serialize(profiles)
    parent_dir = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(parent_dir):
        os.makedirs(parent_dir, mode=0o700, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    try:
        os.chmod(path, 0o600)
    except OSError as exc:
        logger.debug("Unable to set permissions on %s: %s", path, exc)


__all__ = [
    "decode_password",
    "encode_password",
    "parse",
    "read_profiles",
    "serialize",
    "write_profiles",
]
