"""
Skylink parsing and encoding.

A skylink is a 34-byte content identifier. Its canonical textual form is
46 characters of unpadded base64url. When it has to appear as a DNS label
(subdomain access) it is encoded as 55 characters of lowercase, unpadded
base32 using the RFC 4648 "extended hex" alphabet.

Skylinks arrive in many wrappings:

- bare: ``XABvi7JtJbQSMAcDwnUnmp2FKDPjg8_tTTFP4BwMSxVdEg``
- URI-prefixed: ``sia:XAB...`` or ``sia://XAB...``
- in a URL path: ``https://siasky.net/XAB.../foo/bar?x=1#y``
- as a subdomain: ``https://bg06v2tidkir84hg0s1s4t97jaeoaa1jse1svrad657u070c9calq4g.siasky.net``
"""

import base64
import binascii
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from urllib.parse import urlsplit

from .types import (
    BASE32_SKYLINK_LENGTH,
    BASE64_SKYLINK_LENGTH,
    URI_SKYNET_PREFIX,
    InvalidArgumentError,
)


SKYLINK_MATCHER = f"([a-zA-Z0-9_-]{{{BASE64_SKYLINK_LENGTH}}})"
SKYLINK_MATCHER_SUBDOMAIN = f"([a-z0-9_-]{{{BASE32_SKYLINK_LENGTH}}})"

SKYLINK_DIRECT_REGEX = re.compile(f"^{SKYLINK_MATCHER}$")
SKYLINK_PATHNAME_REGEX = re.compile(f"^/?{SKYLINK_MATCHER}((/.*)?)$")
SKYLINK_SUBDOMAIN_REGEX = re.compile(f"^{SKYLINK_MATCHER_SUBDOMAIN}(\\..*)?$")

SKYLINK_DIRECT_MATCH_POSITION = 1
SKYLINK_PATH_MATCH_POSITION = 2

_BASE64URL_ALPHABET_REGEX = re.compile(r"[A-Za-z0-9_-]*")
_BASE32HEX_ALPHABET_REGEX = re.compile(r"[0-9a-vA-V]*")

# urlsplit silently drops tabs and newlines, so they are rejected up front.
_CONTROL_CHARACTERS_REGEX = re.compile(r"[\x00-\x1f\x7f]")


class ParseMode(Enum):
    """What parse_skylink extracts from its input."""
    DEFAULT = "default"
    """Only the skylink."""
    ONLY_PATH = "only_path"
    """Only the path after the skylink, e.g. ``/foo/bar``."""
    INCLUDE_PATH = "include_path"
    """The skylink followed by its path."""
    FROM_SUBDOMAIN = "from_subdomain"
    """The base32 skylink from the leftmost hostname label of a URL."""
    FROM_SUBDOMAIN_PATH = "from_subdomain_path"
    """The URL path of a base32 subdomain URL."""


@dataclass(frozen=True)
class ParseOptions:
    """
    Flag-style parse options, validated on construction.

    Attributes:
        only_path: Parse out just the path, e.g. ``/foo/bar``.
        include_path: Include the path after the skylink.
        from_subdomain: Parse the skylink as a base32 subdomain in a URL.
    """

    only_path: bool = False
    include_path: bool = False
    from_subdomain: bool = False

    def __post_init__(self) -> None:
        if self.include_path and self.only_path:
            raise InvalidArgumentError("The include_path and only_path options cannot both be set")
        if self.include_path and self.from_subdomain:
            raise InvalidArgumentError(
                "The include_path and from_subdomain options cannot both be set"
            )

    @property
    def mode(self) -> ParseMode:
        """The ParseMode equivalent to this flag combination."""
        if self.from_subdomain:
            return ParseMode.FROM_SUBDOMAIN_PATH if self.only_path else ParseMode.FROM_SUBDOMAIN
        if self.only_path:
            return ParseMode.ONLY_PATH
        if self.include_path:
            return ParseMode.INCLUDE_PATH
        return ParseMode.DEFAULT


def parse_skylink(
    skylink_str: str,
    mode: Union[ParseMode, ParseOptions] = ParseMode.DEFAULT,
) -> Optional[str]:
    """
    Parse the given string for a base64 skylink, or a base32 one in subdomain modes.

    Args:
        skylink_str: Plain skylink, skylink with URI prefix, or URL with the
            skylink as the first path element (or as the subdomain).
        mode: A ParseMode, or ParseOptions flags.

    Returns:
        The requested part of the input, ``""`` if a skylink was found but
        the requested path is empty, or ``None`` if no skylink was found.

    Raises:
        InvalidArgumentError: If the input is not a string or the mode is not
            a ParseMode/ParseOptions.
    """
    if not isinstance(skylink_str, str):
        raise InvalidArgumentError(
            f"Skylink has to be a string, {type(skylink_str).__name__} provided"
        )
    if isinstance(mode, ParseOptions):
        mode = mode.mode
    if not isinstance(mode, ParseMode):
        raise InvalidArgumentError(f"Unknown parse mode: {mode!r}")

    if _CONTROL_CHARACTERS_REGEX.search(skylink_str):
        return None

    if mode in (ParseMode.FROM_SUBDOMAIN, ParseMode.FROM_SUBDOMAIN_PATH):
        return _parse_skylink_base32(skylink_str, mode)

    # sia:XAB... and sia://XAB...
    skylink_str = trim_uri_prefix(skylink_str, URI_SKYNET_PREFIX)

    match_direct = SKYLINK_DIRECT_REGEX.fullmatch(skylink_str)
    if match_direct:
        if mode == ParseMode.ONLY_PATH:
            return ""
        return match_direct.group(SKYLINK_DIRECT_MATCH_POSITION)

    # https://siasky.net/XAB.../foo/bar
    try:
        parsed = urlsplit(skylink_str)
    except ValueError:
        return None
    skylink_and_path = _trim_suffix(parsed.path, "/")
    match_pathname = SKYLINK_PATHNAME_REGEX.fullmatch(skylink_and_path)
    if not match_pathname:
        return None

    path = match_pathname.group(SKYLINK_PATH_MATCH_POSITION)
    if path == "/":
        path = ""

    if mode == ParseMode.INCLUDE_PATH:
        return trim_forward_slash(skylink_and_path)
    if mode == ParseMode.ONLY_PATH:
        return path
    return match_pathname.group(SKYLINK_DIRECT_MATCH_POSITION)


def _parse_skylink_base32(skylink_str: str, mode: ParseMode) -> Optional[str]:
    try:
        parsed = urlsplit(skylink_str)
    except ValueError:
        return None

    hostname = parsed.hostname
    if not hostname:
        return None

    match_hostname = SKYLINK_SUBDOMAIN_REGEX.fullmatch(hostname)
    if not match_hostname:
        return None

    if mode == ParseMode.FROM_SUBDOMAIN_PATH:
        return parsed.path
    return match_hostname.group(SKYLINK_DIRECT_MATCH_POSITION)


def convert_skylink_to_base32(skylink: str) -> str:
    """
    Convert a base64url skylink to its lowercase, unpadded base32hex form.

    Raises:
        InvalidArgumentError: If the input is not valid base64url.
    """
    if not isinstance(skylink, str):
        raise InvalidArgumentError(f"Skylink has to be a string, {type(skylink).__name__} provided")
    if not _BASE64URL_ALPHABET_REGEX.fullmatch(skylink):
        raise InvalidArgumentError(f"Skylink is not valid base64url: '{skylink}'")

    padded = skylink + "=" * (-len(skylink) % 4)
    try:
        decoded = base64.b64decode(padded, altchars=b"-_", validate=True)
    except binascii.Error as e:
        raise InvalidArgumentError(f"Skylink is not valid base64url: '{skylink}'") from e

    # Unused trailing bits must be zero, otherwise two texts share one skylink.
    if base64.urlsafe_b64encode(decoded).decode("ascii").rstrip("=") != skylink:
        raise InvalidArgumentError(f"Skylink is not canonical base64url: '{skylink}'")

    return base64.b32hexencode(decoded).decode("ascii").rstrip("=").lower()


def convert_skylink_to_base64(skylink: str) -> str:
    """
    Convert a base32hex skylink (as used in subdomains) back to base64url.

    Raises:
        InvalidArgumentError: If the input is not valid base32hex.
    """
    if not isinstance(skylink, str):
        raise InvalidArgumentError(f"Skylink has to be a string, {type(skylink).__name__} provided")
    if not _BASE32HEX_ALPHABET_REGEX.fullmatch(skylink):
        raise InvalidArgumentError(f"Skylink is not valid base32: '{skylink}'")

    padded = skylink.upper() + "=" * (-len(skylink) % 8)
    try:
        decoded = base64.b32hexdecode(padded)
    except binascii.Error as e:
        raise InvalidArgumentError(f"Skylink is not valid base32: '{skylink}'") from e

    if base64.b32hexencode(decoded).decode("ascii").rstrip("=") != skylink.upper():
        raise InvalidArgumentError(f"Skylink is not canonical base32: '{skylink}'")

    return base64.urlsafe_b64encode(decoded).decode("ascii").rstrip("=")


def trim_uri_prefix(value: str, prefix: str) -> str:
    """Strip ``prefix//`` or ``prefix`` from the front of value, once."""
    long_prefix = f"{prefix}//"
    if value.startswith(long_prefix):
        return value[len(long_prefix):]
    if value.startswith(prefix):
        return value[len(prefix):]
    return value


def trim_forward_slash(value: str) -> str:
    """Strip all leading and trailing slashes."""
    return _trim_prefix(_trim_suffix(value, "/"), "/")


def _trim_prefix(value: str, prefix: str) -> str:
    while value.startswith(prefix):
        value = value[len(prefix):]
    return value


def _trim_suffix(value: str, suffix: str) -> str:
    while value.endswith(suffix):
        value = value[:-len(suffix)]
    return value
