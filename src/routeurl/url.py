"""URL parser and serializer.

``string_to_url`` decomposes a URL string into a ``RouteUrl`` by scanning
for each delimiter in turn (``?``, ``#``, ``://``, first ``/``) rather
than delegating to a URL-parsing library. ``url_to_string`` rebuilds a
URL string from a ``RouteUrl`` without re-parsing it.

Only the common ``scheme://host[:port]/path?query#hash`` shapes are
handled. A string with no host is resolved against the ambient location
(see ``routeurl.location``).
"""

import logging
from dataclasses import dataclass

from routeurl._internal.types import Query
from routeurl.config import DEFAULT_CONFIG, UrlConfig
from routeurl.location import Location, LocationProvider, resolve_location
from routeurl.query import StringQuery, iter_query_items, parse_search, query_to_string

logger = logging.getLogger("routeurl.url")

_DEFAULT_PROTOCOL = "https"


@dataclass(frozen=True, slots=True)
class RouteUrl:
    """A decomposed URL. Immutable snapshot produced by ``string_to_url``.

    ``url == domain + path + ("?" + search) + ("#" + hash)``, the last two
    only when non-empty. To change the query, pass an overlay to
    ``url_to_string`` instead of editing fields.
    """

    url: str  # 'https://xxx.yy:zz/aa/bb?mm=11&n=22#tt'
    domain: str  # 'https://xxx.yy:zz'
    query: StringQuery  # {'mm': '11', 'n': '22'}
    protocol: str  # 'https', no '://'
    host: str  # 'xxx.yy:zz', no scheme, keeps the port
    path: str  # '/aa/bb', always starts with '/'
    search: str  # 'mm=11&n=22', no '?'
    hash: str  # 'tt', no '#'

    def __str__(self) -> str:
        return self.url


# -- Delimiter scans --


def _split_query(url_str: str) -> tuple[str, str]:
    """Split at the first ``?`` into (pre-query, post-query)."""
    idx = url_str.find("?")
    if idx < 0:
        return url_str, ""
    return url_str[:idx], url_str[idx + 1 :]


def _split_hash(post_query: str) -> tuple[str, str]:
    """Split at the first ``#`` into (search, hash)."""
    idx = post_query.find("#")
    if idx < 0:
        return post_query, ""
    return post_query[:idx], post_query[idx + 1 :]


def _split_protocol(pre_query: str) -> tuple[str, str, bool]:
    """Split at ``://`` into (protocol, remainder, found).

    An empty scheme (``://host``) defaults to https. Without ``://`` the
    protocol is left empty and the whole string is the remainder.
    """
    idx = pre_query.find("://")
    if idx < 0:
        return "", pre_query, False
    return pre_query[:idx] or _DEFAULT_PROTOCOL, pre_query[idx + 3 :], True


def _split_host(remainder: str, *, bare_host: bool = False) -> tuple[str, str]:
    """Split *remainder* into (host, path).

    A host is recognised only when a ``.`` appears before the first
    ``/``. Otherwise the whole remainder is the path, including when
    there is no ``/`` at all. With *bare_host*, a dotted remainder with
    no ``/`` is all host instead.
    """
    seen_dot = False
    for i, ch in enumerate(remainder):
        if ch == ".":
            seen_dot = True
        elif ch == "/":
            if seen_dot:
                return remainder[:i], remainder[i:]
            return "", remainder
    if seen_dot and bare_host:
        return remainder, ""
    return "", remainder


def _join(domain: str, path: str, search: str, hash_: str) -> str:
    url = domain + path
    if search:
        url += "?" + search
    if hash_:
        url += "#" + hash_
    return url


# -- Public API --


def string_to_url(
    url_str: str,
    query: Query | None = None,
    *,
    location: Location | LocationProvider | None = None,
    config: UrlConfig | None = None,
) -> RouteUrl:
    """Decompose *url_str* into a ``RouteUrl``.

    If *query* is given it is merged over the parsed query (its values
    win) and ``search`` is re-rendered from the result.

    Strings without both a protocol and a host fall back to the ambient
    location: *location* if given, else the current ``location_var``,
    else ``config.default_location``.

    Raises ``MalformedQueryError`` if a query value has invalid
    percent-encoding and ``config.strict_decoding`` is on.

    Examples::

        >>> string_to_url("https://a.b:1/p?x=1#f").host
        'a.b:1'
        >>> string_to_url("https://a.b/p", {"z": 3}).url
        'https://a.b/p?z=3'
    """
    cfg = config or DEFAULT_CONFIG

    pre_query, post_query = _split_query(url_str)
    search, hash_ = _split_hash(post_query)

    parsed: dict[str, str] = {}
    if search:
        parsed = parse_search(search, strict=cfg.strict_decoding, keep_blank_keys=True)
    if query is not None:
        merged = {**parsed, **query}
        parsed = dict(iter_query_items(merged, omit_absent=cfg.omit_absent_values))
        search = query_to_string(parsed, "", config=cfg)

    protocol, remainder, after_scheme = _split_protocol(pre_query)
    host, path = _split_host(remainder, bare_host=after_scheme and cfg.bare_host)
    if not path.startswith("/"):
        path = "/" + path

    if protocol and host:
        domain = f"{protocol}://{host}"
    else:
        ambient = resolve_location(location, cfg.default_location)
        protocol = cfg.fallback_protocol or ambient.protocol
        host = ambient.host
        domain = f"{protocol}://{host}"
        logger.debug("Resolved %r against ambient location %s", url_str, domain)

    return RouteUrl(
        url=_join(domain, path, search, hash_),
        domain=domain,
        query=StringQuery(parsed),
        protocol=protocol,
        host=host,
        path=path,
        search=search,
        hash=hash_,
    )


def url_to_string(
    url: RouteUrl,
    query: Query | None = None,
    *,
    config: UrlConfig | None = None,
) -> str:
    """Rebuild a URL string from *url*, optionally overlaying *query*.

    Trusts ``url.domain`` and ``url.path``; the query string is rendered
    from ``url.query`` (merged with *query*, whose values win).
    """
    cfg = config or DEFAULT_CONFIG
    merged: Query = url.query if query is None else {**url.query, **query}
    result = url.domain + url.path + query_to_string(merged, config=cfg)
    if url.hash:
        result += "#" + url.hash
    return result
