"""routeurl exception hierarchy.

Shared across the codec, parser, and location modules so every module
raises and callers catch the same types.
"""


class RouteUrlError(Exception):
    """Base for all routeurl-specific errors."""


class ConfigurationError(RouteUrlError):
    """Raised when a ``UrlConfig`` or ``Location`` is given invalid values.

    Raised eagerly from ``__post_init__`` so a bad config never reaches
    the parser.
    """


class MalformedQueryError(RouteUrlError, ValueError):
    """A query value holds an invalid percent-encoded sequence.

    Raised while decoding, either for a ``%`` that is not followed by two
    hex digits or for escapes that do not form valid UTF-8. Never caught
    inside routeurl.
    """

    def __init__(self, value: str, detail: str = "") -> None:
        self.value = value
        self.detail = detail or "invalid percent-encoding"
        super().__init__(value, self.detail)

    def __str__(self) -> str:
        return f"{self.detail}: {self.value!r}"
