"""
URL composition for skylinks and Handshake domains.

Skylink URLs come in two shapes:

- path-based: ``https://siasky.net/<base64 skylink>/<path>``
- subdomain-based: ``https://<base32 skylink>.siasky.net/<path>``

Handshake URLs are either ``https://siasky.net/hns/<domain>`` or
``https://<domain>.hns.siasky.net``.
"""

from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Mapping, Optional
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from .skylink import ParseMode, convert_skylink_to_base32, parse_skylink, trim_uri_prefix
from .types import (
    DEFAULT_HNS_ENDPOINT,
    DEFAULT_HNS_SUBDOMAIN,
    DEFAULT_HNSRES_ENDPOINT,
    DEFAULT_SKYLINK_ENDPOINT,
    URI_HANDSHAKE_PREFIX,
    URI_HANDSHAKE_RESOLVER_PREFIX,
    InvalidArgumentError,
    NotAnIdentifierError,
)


# Punctuation left unescaped in path components, on top of quote()'s defaults.
_PATH_SEGMENT_SAFE = "!*'()"


def _check_query(query: Any) -> None:
    if not isinstance(query, Mapping):
        raise InvalidArgumentError(f"query has to be a mapping, {type(query).__name__} provided")


@dataclass
class SkylinkUrlOptions:
    """Options for composing a skylink URL."""

    endpoint_path: str = DEFAULT_SKYLINK_ENDPOINT
    """Relative URL path of the portal endpoint."""

    path: str = ""
    """Unix-style path appended after the skylink. Each component is URL-encoded."""

    query: Mapping[str, Any] = field(default_factory=dict)
    """Query parameters merged into the URL."""

    subdomain: bool = False
    """Put the skylink in a base32 subdomain instead of the path."""

    download: bool = False
    """Force a download by adding ``attachment=true``."""

    def __post_init__(self) -> None:
        if not isinstance(self.path, str):
            raise InvalidArgumentError(
                f"path has to be a string, {type(self.path).__name__} provided"
            )
        _check_query(self.query)


@dataclass
class HnsUrlOptions:
    """Options for composing a Handshake domain URL."""

    endpoint_path: str = DEFAULT_HNS_ENDPOINT
    query: Mapping[str, Any] = field(default_factory=dict)
    subdomain: bool = False
    download: bool = False
    hns_subdomain: str = DEFAULT_HNS_SUBDOMAIN

    def __post_init__(self) -> None:
        _check_query(self.query)


@dataclass
class HnsresUrlOptions:
    """Options for composing a Handshake resolver URL. The resolver takes no query."""

    endpoint_path: str = DEFAULT_HNSRES_ENDPOINT


def make_url(*args: str) -> str:
    """Join URL parts with exactly one slash between non-empty parts."""
    return reduce(_join_url, args, "")


def _join_url(acc: str, cur: str) -> str:
    if not cur:
        return acc
    if not acc:
        return cur
    return acc.rstrip("/") + "/" + cur.lstrip("/")


def add_subdomain(url: str, subdomain: str) -> str:
    """Prepend a label to the hostname of url. A bare trailing slash is dropped."""
    parsed = urlsplit(url)
    userinfo, at, hostport = parsed.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{subdomain}.{hostport}"
    result = urlunsplit(parsed._replace(netloc=netloc))
    if result.endswith("/"):
        result = result[:-1]
    return result


def add_url_query(url: str, query: Mapping[str, Any]) -> str:
    """
    Merge query into url's query string.

    Repeated keys already in the URL are kept in order. A key given in query
    replaces every existing occurrence with a single pair at the position of
    the first one. New keys are appended.
    """
    parsed = urlsplit(url)
    pairs: list[tuple[str, Any]] = []
    replaced = set()
    for key, value in parse_qsl(parsed.query, keep_blank_values=True):
        if key not in query:
            pairs.append((key, value))
        elif key not in replaced:
            pairs.append((key, query[key]))
            replaced.add(key)
    pairs.extend((key, value) for key, value in query.items() if key not in replaced)

    encoded = urlencode(
        [(key, _query_value(value)) for key, value in pairs],
        quote_via=quote,
    )
    return urlunsplit(parsed._replace(query=encoded))


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_path(path: str) -> str:
    """
    URL-encode each component of a Unix-style path separately.

    Whole-string encoding would leave characters such as ``?`` alone. Those
    are legal in filenames and must not be treated as URL separators.
    """
    return "/".join(quote(element, safe=_PATH_SEGMENT_SAFE) for element in path.split("/"))


def get_skylink_url(
    portal_url: str,
    skylink_str: str,
    options: Optional[SkylinkUrlOptions] = None,
) -> str:
    """
    Compose the full portal URL for a skylink.

    Args:
        portal_url: Portal base URL, e.g. ``https://siasky.net``.
        skylink_str: Skylink in any recognized wrapping, optionally with a path.
        options: URL options (default: path-based, endpoint ``/``).

    Returns:
        The composed URL.

    Raises:
        NotAnIdentifierError: If no skylink can be extracted from skylink_str.
    """
    options = options or SkylinkUrlOptions()
    query = dict(options.query)
    if options.download:
        query["attachment"] = True

    path = encode_path(options.path) if options.path else ""

    if options.subdomain:
        skylink = parse_skylink(skylink_str)
        if skylink is None:
            raise NotAnIdentifierError(skylink_str)
        skylink_path = parse_skylink(skylink_str, ParseMode.ONLY_PATH) or ""
        url = add_subdomain(portal_url, convert_skylink_to_base32(skylink))
        url = make_url(url, skylink_path, path)
    else:
        skylink = parse_skylink(skylink_str, ParseMode.INCLUDE_PATH)
        if skylink is None:
            raise NotAnIdentifierError(skylink_str)
        url = make_url(portal_url, options.endpoint_path, skylink, path)

    return add_url_query(url, query)


def get_hns_url(
    portal_url: str,
    domain: str,
    options: Optional[HnsUrlOptions] = None,
) -> str:
    """
    Compose the portal URL for a Handshake domain.

    Raises:
        InvalidArgumentError: If domain is not a string.
        NotAnIdentifierError: If domain is empty once the ``hns:`` prefix is removed.
    """
    options = options or HnsUrlOptions()
    query = dict(options.query)
    if options.download:
        query["attachment"] = True

    domain = _trim_domain(domain, URI_HANDSHAKE_PREFIX)
    if options.subdomain:
        url = add_subdomain(add_subdomain(portal_url, options.hns_subdomain), domain)
    else:
        url = make_url(portal_url, options.endpoint_path, domain)

    return add_url_query(url, query)


def get_hnsres_url(
    portal_url: str,
    domain: str,
    options: Optional[HnsresUrlOptions] = None,
) -> str:
    """Compose the portal URL that resolves a Handshake domain to a skylink."""
    options = options or HnsresUrlOptions()
    domain = _trim_domain(domain, URI_HANDSHAKE_RESOLVER_PREFIX)
    return make_url(portal_url, options.endpoint_path, domain)


def _trim_domain(domain: str, prefix: str) -> str:
    if not isinstance(domain, str):
        raise InvalidArgumentError(f"Domain has to be a string, {type(domain).__name__} provided")
    trimmed = trim_uri_prefix(domain, prefix)
    if not trimmed:
        raise NotAnIdentifierError(domain)
    return trimmed
