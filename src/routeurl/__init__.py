"""routeurl — decompose URL strings into their parts and put them back together.

Parses the common ``scheme://host[:port]/path?query#hash`` shapes by
scanning for each delimiter, with a companion query-string codec.

Basic usage::

    from routeurl import string_to_url, url_to_string

    route = string_to_url("https://shop.example.com/cart?page=2#top")
    route.host       # 'shop.example.com'
    route.query      # StringQuery({'page': '2'})

    url_to_string(route, {"page": 3})
    # 'https://shop.example.com/cart?page=3#top'

Relative strings resolve against the ambient location::

    from routeurl import Location, use_location

    with use_location(Location(host="app.example.com")):
        string_to_url("/login").url  # 'https://app.example.com/login'
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "ConfigurationError",
    "Location",
    "LocationProvider",
    "MalformedQueryError",
    "RouteUrl",
    "RouteUrlError",
    "StringQuery",
    "UrlConfig",
    "any_to_str",
    "get_location",
    "query_to_string",
    "string_to_query",
    "string_to_url",
    "url_to_string",
    "use_location",
]

# Public name -> defining submodule
_LAZY_IMPORTS: dict[str, str] = {
    "ConfigurationError": "routeurl.errors",
    "MalformedQueryError": "routeurl.errors",
    "RouteUrlError": "routeurl.errors",
    "Location": "routeurl.location",
    "LocationProvider": "routeurl.location",
    "get_location": "routeurl.location",
    "use_location": "routeurl.location",
    "UrlConfig": "routeurl.config",
    "StringQuery": "routeurl.query",
    "any_to_str": "routeurl.query",
    "query_to_string": "routeurl.query",
    "string_to_query": "routeurl.query",
    "RouteUrl": "routeurl.url",
    "string_to_url": "routeurl.url",
    "url_to_string": "routeurl.url",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import routeurl`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_name), name)
