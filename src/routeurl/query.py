"""Query string codec.

Converts between raw query strings and flat string-keyed mappings, and
renders arbitrary values into the canonical text that gets
percent-encoded. ``StringQuery`` is the immutable mapping a parsed URL
exposes as ``RouteUrl.query``.
"""

import json
import re
import traceback
from collections.abc import Iterator, Mapping
from urllib.parse import quote, unquote

from routeurl._internal.types import Query, StringQueryDict
from routeurl.config import DEFAULT_CONFIG, UrlConfig
from routeurl.errors import MalformedQueryError

# Besides alphanumerics and "-._~", which quote() never escapes
_SAFE = "!*'()"

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


# -- Value stringification --


def any_to_str(value: object) -> str:
    """Render *value* as the text that gets percent-encoded into a query.

    ==================  ==========================
    input               result
    ==================  ==========================
    ``"abc"``           ``abc``
    ``None``            ``null``
    ``True``            ``true``
    ``0``               ``0``
    ``float("nan")``    ``NaN``
    ``{"a": 444}``      ``{"a":444}``
    ``[44, "kkk"]``     ``[44,"kkk"]``
    ``ValueError("w")`` ``ValueError: w``
    ==================  ==========================

    Exceptions that were raised render as their full traceback. Never
    raises.
    """
    match value:
        case str():
            return value
        case BaseException():
            return _exception_to_str(value)
        case dict() | list() | tuple():
            return _json_to_str(value)
        case bool() | None | float():
            return json.dumps(value)
        case _:
            return _safe_str(value)


def _exception_to_str(exc: BaseException) -> str:
    if exc.__traceback__ is not None:
        return "".join(traceback.format_exception(exc)).rstrip("\n")
    message = _safe_str(exc)
    if message:
        return f"{type(exc).__name__}: {message}"
    return type(exc).__name__


def _json_to_str(value: object) -> str:
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_safe_str)
    except (TypeError, ValueError, RecursionError):
        # Circular references, non-string keys, very deep nesting
        return _safe_str(value)


def _safe_str(value: object) -> str:
    try:
        return str(value)
    except Exception:
        # A broken __str__ or a repr too deep to build
        return object.__repr__(value)


# -- Percent-encoding --


def encode_component(text: str) -> str:
    """Percent-encode *text* as UTF-8, keeping only unreserved characters."""
    return quote(text, safe=_SAFE)


def decode_component(text: str, *, strict: bool = True) -> str:
    """Decode percent-escapes in *text*.

    With *strict*, raises ``MalformedQueryError`` for a ``%`` not followed
    by two hex digits or for escapes that are not valid UTF-8. Otherwise
    malformed escapes are left as-is and bad bytes are replaced.
    """
    if not strict:
        return unquote(text, errors="replace")
    if _BAD_ESCAPE.search(text):
        raise MalformedQueryError(text, "incomplete percent-escape")
    try:
        return unquote(text, errors="strict")
    except UnicodeDecodeError as exc:
        raise MalformedQueryError(text, "percent-escapes are not valid UTF-8") from exc


# -- Codec --


def iter_query_items(query: Query, *, omit_absent: bool = True) -> Iterator[tuple[str, str]]:
    """Yield ``(key, text)`` for every entry a rendered query would contain.

    Empty keys are always skipped. With *omit_absent*, ``None`` and
    ``False`` values are skipped too.
    """
    for key, value in query.items():
        if not key:
            continue
        if omit_absent and (value is None or value is False):
            continue
        yield key, any_to_str(value)


def parse_search(
    search: str,
    *,
    strict: bool = True,
    keep_blank_keys: bool = False,
) -> StringQueryDict:
    """Parse a bare ``a=1&b=2`` string. Later duplicates win.

    Empty segments are skipped. A segment like ``=x`` is dropped unless
    *keep_blank_keys* is set, in which case it is stored under ``""``.
    """
    query: StringQueryDict = {}
    for segment in search.split("&"):
        if not segment:
            continue
        key, _, value = segment.partition("=")
        if key or keep_blank_keys:
            query[key] = decode_component(value, strict=strict)
    return query


def string_to_query(raw: str, *, config: UrlConfig | None = None) -> StringQueryDict:
    """Parse the query portion of *raw* into a mapping.

    Takes the text after the first ``?`` (the whole string when there is
    no ``?``) and drops any ``#fragment``. Keys split from values on the
    first ``=``; a segment without ``=`` maps to ``""``.
    """
    cfg = config or DEFAULT_CONFIG
    if not raw:
        return {}
    before, sep, after = raw.partition("?")
    query_str = after if sep else before
    query_str = query_str.partition("#")[0]
    return parse_search(query_str, strict=cfg.strict_decoding)


def query_to_string(
    query: Query,
    prefix: str = "?",
    *,
    config: UrlConfig | None = None,
) -> str:
    """Render *query* as ``prefix + "k=v&..."``.

    Returns ``""`` when nothing is rendered, so ``prefix=""`` is safe for
    embedding. Keys are emitted as given; values go through
    ``any_to_str`` and are percent-encoded.
    """
    cfg = config or DEFAULT_CONFIG
    segments = [
        f"{key}={encode_component(text)}"
        for key, text in iter_query_items(query, omit_absent=cfg.omit_absent_values)
    ]
    if not segments:
        return ""
    return prefix + "&".join(segments)


class StringQuery(Mapping[str, str]):
    """Immutable parsed query parameters.

    Attributes:
        _data: Field name -> decoded value.

    Compares equal to any mapping with the same items, including a
    plain ``dict``.
    """

    _data: StringQueryDict

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        object.__setattr__(self, "_data", dict(data or {}))

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self._data.items())
        return f"StringQuery({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the value for *key*, or *default* if missing."""
        return self._data.get(key, default)

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return value as int, or *default* if missing or not numeric."""
        value = self._data.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def get_bool(self, key: str, default: bool | None = None) -> bool | None:
        """Return value as bool (``true``/``1``/``yes``/``on`` → True)."""
        value = self._data.get(key)
        if value is None:
            return default
        return value.lower() in ("true", "1", "yes", "on")

    def to_dict(self) -> StringQueryDict:
        """Return a mutable copy."""
        return dict(self._data)
