"""Assertion helpers for tests that build or parse URLs.

Each assertion produces a clear error message on failure::

    from routeurl.testing import assert_url_parts

    assert_url_parts(string_to_url(link), host="shop.example.com", path="/cart")
"""

from collections.abc import Mapping
from typing import Any

from routeurl.query import string_to_query
from routeurl.url import RouteUrl


def assert_url_parts(route: RouteUrl, **expected: Any) -> None:
    """Assert each named ``RouteUrl`` field equals the expected value.

    Reports every mismatching field at once.
    """
    unknown = sorted(set(expected) - set(RouteUrl.__dataclass_fields__))
    assert not unknown, f"RouteUrl has no field(s): {', '.join(unknown)}"
    mismatches = [
        f"  {name}: expected {value!r}, got {getattr(route, name)!r}"
        for name, value in expected.items()
        if getattr(route, name) != value
    ]
    assert not mismatches, (
        f"RouteUrl {route.url!r} does not match:\n" + "\n".join(mismatches)
    )


def assert_query_equal(url: str | RouteUrl, expected: Mapping[str, str]) -> None:
    """Assert the query of *url* decodes to exactly *expected* (order ignored)."""
    actual = dict(url.query) if isinstance(url, RouteUrl) else string_to_query(url)
    assert actual == dict(expected), (
        f"Query mismatch for {str(url)!r}:\n"
        f"  expected: {dict(expected)!r}\n"
        f"  actual:   {actual!r}"
    )
