"""Headers: response header container with canonical key normalization.

Invariants:
    - set()/set_all() store keys in canonical form ("x-custom" -> "X-Custom")
    - set_non_canonical() stores the key verbatim
    - Last write wins per stored key; no other ordering guarantee

Design Decisions:
    - dict subclass: headers are read like any mapping when rendered by the transport
    - Keys containing characters that are not header token characters are left
      unchanged rather than rejected (matches common HTTP server behaviour)
"""

from collections.abc import Mapping
from typing import Any

_TOKEN_CHARS = frozenset(
    "!#$%&'*+-.^_`|~"
    "0123456789"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
)


def canonical_header_key(key: str) -> str:
    """Return the canonical form of a header key.

    The first letter and any letter following a hyphen are upper-cased; the
    rest are lower-cased. A key holding a non-token character is returned as is.
    """
    if not key or any(c not in _TOKEN_CHARS for c in key):
        return key
    chars = []
    upper = True
    for c in key:
        chars.append(c.upper() if upper else c.lower())
        upper = c == "-"
    return "".join(chars)


class Headers(dict[str, Any]):
    """Additional response headers keyed by (normally canonical) header name."""

    def set(self, key: str, value: Any) -> None:
        self[canonical_header_key(key)] = value

    def set_all(self, headers: Mapping[str, Any]) -> None:
        for key, value in headers.items():
            self.set(key, value)

    def set_non_canonical(self, key: str, value: Any) -> None:
        self[key] = value
