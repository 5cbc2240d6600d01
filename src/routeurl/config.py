"""Codec and parser configuration.

UrlConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass, field

from routeurl.errors import ConfigurationError
from routeurl.location import Location


@dataclass(frozen=True, slots=True)
class UrlConfig:
    """Configuration shared by the query codec and the URL parser.

    All fields have sensible defaults. Override what you need::

        config = UrlConfig(omit_absent_values=False, strict_decoding=False)
    """

    # Query rendering
    # True: None and False are left out of rendered query strings.
    # False: every value is rendered, None as "null" and False as "false".
    omit_absent_values: bool = True

    # Decoding — raise MalformedQueryError on bad percent sequences
    strict_decoding: bool = True

    # Relative URL resolution
    fallback_protocol: str | None = "https"  # None => the location's own protocol
    default_location: Location = field(default_factory=Location)
    # True: "https://a.b" has host "a.b" and path "/".
    # False: a host needs a "/" after it, so "a.b" becomes the path.
    bare_host: bool = False

    def __post_init__(self) -> None:
        if self.fallback_protocol is not None and (
            not self.fallback_protocol or "://" in self.fallback_protocol
        ):
            msg = (
                "fallback_protocol must be a bare scheme or None, "
                f"got {self.fallback_protocol!r}"
            )
            raise ConfigurationError(msg)


DEFAULT_CONFIG = UrlConfig()
