"""Ambient "current location" used to resolve relative URLs.

Provides:
- ``Location``: an immutable ``(protocol, host)`` pair.
- ``LocationProvider``: any zero-argument callable returning a ``Location``.
- ``location_var``: the current location for this task/thread.
- ``use_location()``: set the current location for a block.

A relative, host-less string passed to ``string_to_url`` is resolved
against whichever location ``resolve_location`` picks: an explicit
argument first, then the context variable, then the configured default.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    threads. No locks needed.
"""

import logging
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from routeurl.errors import ConfigurationError

logger = logging.getLogger("routeurl.location")

_DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443, "ws": 80, "wss": 443}


@dataclass(frozen=True, slots=True)
class Location:
    """The host environment's notion of the current origin.

    ``protocol`` has no ``://``; ``host`` may carry a port.
    """

    protocol: str = "https"
    host: str = "localhost"

    def __post_init__(self) -> None:
        if not self.protocol or "://" in self.protocol:
            msg = f"Location protocol must be a bare scheme, got {self.protocol!r}"
            raise ConfigurationError(msg)
        if "://" in self.host or "/" in self.host:
            msg = f"Location host must not contain a scheme or path, got {self.host!r}"
            raise ConfigurationError(msg)

    @property
    def origin(self) -> str:
        """``protocol://host``."""
        return f"{self.protocol}://{self.host}"

    @classmethod
    def from_scope(cls, scope: MutableMapping[str, Any]) -> "Location":
        """Build a location from an ASGI HTTP scope.

        Uses the ``Host`` header when present, otherwise the ``server``
        tuple. Default ports for the scheme are not rendered.
        """
        scheme = scope.get("scheme", "http")
        for name, value in scope.get("headers", ()):
            if name.lower() == b"host":
                return cls(protocol=scheme, host=value.decode("latin-1"))

        server = scope.get("server")
        if not server:
            return cls(protocol=scheme)
        host, port = server
        if port is None or _DEFAULT_PORTS.get(scheme) == port:
            return cls(protocol=scheme, host=host)
        return cls(protocol=scheme, host=f"{host}:{port}")


@runtime_checkable
class LocationProvider(Protocol):
    """Anything that can report the current location on demand."""

    def __call__(self) -> Location: ...


# -- Ambient location --

location_var: ContextVar[Location] = ContextVar("routeurl_location")
"""The current location. Unset until ``use_location`` or ``location_var.set``."""


def get_location(default: Location | None = None) -> Location:
    """Return the current location.

    Falls back to *default* when none is set. Raises ``LookupError`` if
    neither is available.
    """
    if default is None:
        return location_var.get()
    return location_var.get(default)


@contextmanager
def use_location(location: Location) -> Iterator[Location]:
    """Make *location* the current location for the duration of the block.

    Usage::

        with use_location(Location(host="app.example.com")):
            route = string_to_url("/dashboard")
    """
    token = location_var.set(location)
    logger.debug("Ambient location set to %s", location.origin)
    try:
        yield location
    finally:
        location_var.reset(token)


def resolve_location(
    location: Location | LocationProvider | None,
    default: Location,
) -> Location:
    """Pick the location used to resolve a relative URL.

    Explicit *location* (a ``Location`` or a provider) wins, then the
    context variable, then *default*.
    """
    if isinstance(location, Location):
        return location
    if location is not None:
        return location()
    return location_var.get(default)
