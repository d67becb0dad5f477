"""Headers: tests for canonical and verbatim header key insertion.

Tests cover:
    - canonical_header_key upper-cases word starts, lower-cases the rest
    - Keys with non-token characters are left unchanged
    - set() is idempotent across key spellings; last write wins
    - set_non_canonical() stores keys verbatim
"""

import pytest

from endware.core.headers import Headers, canonical_header_key


@pytest.mark.parametrize("key, expected", [
    ("x-custom", "X-Custom"),
    ("X-CUSTOM", "X-Custom"),
    ("content-type", "Content-Type"),
    ("etag", "Etag"),
    ("x-request-id", "X-Request-Id"),
    ("", ""),
    ("x custom", "x custom"),
    ("x:custom", "x:custom"),
])
def test_canonical_header_key(key, expected):
    assert canonical_header_key(key) == expected


def test_set_canonicalizes_and_last_write_wins():
    headers = Headers()
    headers.set("x-custom", "first")
    headers.set("X-Custom", "second")
    assert headers == {"X-Custom": "second"}


def test_set_all_canonicalizes_every_key():
    headers = Headers()
    headers.set_all({"x-a": 1, "X-B": 2})
    assert headers == {"X-A": 1, "X-B": 2}


def test_set_non_canonical_stores_key_verbatim():
    headers = Headers()
    headers.set_non_canonical("x-lower", "v")
    headers.set("x-lower", "w")
    assert headers == {"x-lower": "v", "X-Lower": "w"}


def test_set_non_canonical_with_canonical_key_replaces_canonical_entry():
    headers = Headers()
    headers.set("x-custom", "a")
    headers.set_non_canonical("X-Custom", "b")
    assert headers == {"X-Custom": "b"}
