"""TypeID-style identifiers.

An identifier is ``<prefix>_<suffix>`` where the suffix is the 26 character
Crockford base32 encoding of a 128-bit UUIDv7-layout value. The leading 48
bits are a millisecond timestamp, so identifiers of one kind sort by
creation time.
"""

import re
import secrets
import time

PREFIX_USER = "user"
PREFIX_SESSION = "sess"
PREFIX_OAUTH_ACCOUNT = "oauth"

_ALPHABET = "0123456789abcdefghjkmnpqrstvwxyz"
_SUFFIX_LENGTH = 26
_TYPEID_PATTERN = re.compile(
    r"^(?P<prefix>[a-z](?:[a-z_]{0,61}[a-z])?)_(?P<suffix>[0-7][0-9a-hjkmnp-tv-z]{25})$"
)


def _uuid7_int(timestamp_ms: int) -> int:
    rand_a = secrets.randbits(12)
    rand_b = secrets.randbits(62)
    return (
        (timestamp_ms & 0xFFFF_FFFF_FFFF) << 80
        | 0x7 << 76
        | rand_a << 64
        | 0b10 << 62
        | rand_b
    )


def _encode(value: int) -> str:
    chars = []
    for position in range(_SUFFIX_LENGTH - 1, -1, -1):
        chars.append(_ALPHABET[(value >> (5 * position)) & 0x1F])
    return "".join(chars)


def new_typeid(prefix: str, timestamp_ms: int | None = None) -> str:
    """Generate a new identifier with the given prefix."""
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return f"{prefix}_{_encode(_uuid7_int(timestamp_ms))}"


def new_user_id() -> str:
    return new_typeid(PREFIX_USER)


def new_session_id() -> str:
    return new_typeid(PREFIX_SESSION)


def new_oauth_account_id() -> str:
    return new_typeid(PREFIX_OAUTH_ACCOUNT)


def is_valid_typeid(value: str, prefix: str | None = None) -> bool:
    """Check the identifier format, optionally requiring a specific prefix."""
    match = _TYPEID_PATTERN.match(value or "")
    if match is None:
        return False
    return prefix is None or match.group("prefix") == prefix
