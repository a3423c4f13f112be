"""Tests for skylink parsing and encoding."""

import pytest

from skydb.skylink import (
    ParseMode,
    ParseOptions,
    parse_skylink,
    convert_skylink_to_base32,
    convert_skylink_to_base64,
    trim_uri_prefix,
    trim_forward_slash,
)
from skydb.types import InvalidArgumentError
from .test_vectors import PORTAL_URL, SKYLINK, SKYLINK_BASE32, make_skylink


class TestParseSkylink:
    """Tests for parsing skylinks in their different wrappings."""

    @pytest.mark.parametrize(
        "value",
        [
            SKYLINK,
            f"sia:{SKYLINK}",
            f"sia://{SKYLINK}",
            f"{PORTAL_URL}/{SKYLINK}",
            f"{PORTAL_URL}/{SKYLINK}/",
            f"{PORTAL_URL}/{SKYLINK}/foo/bar",
            f"{PORTAL_URL}/{SKYLINK}/foo/bar?download=true#section",
            f"{SKYLINK}?foo=bar",
            f"{SKYLINK}#fragment",
            f"{SKYLINK}/foo/bar",
        ],
    )
    def test_default_mode(self, value: str) -> None:
        """Every supported wrapping yields the bare skylink."""
        assert parse_skylink(value) == SKYLINK

    @pytest.mark.parametrize(
        "value",
        [
            f"sia://{SKYLINK}/foo/bar",
            f"sia:{SKYLINK}/foo/bar",
            f"{SKYLINK}/foo/bar",
            f"{PORTAL_URL}/{SKYLINK}/foo/bar",
            f"{PORTAL_URL}/{SKYLINK}/foo/bar/",
            f"{PORTAL_URL}/{SKYLINK}/foo/bar?a=b#c",
        ],
    )
    def test_include_path(self, value: str) -> None:
        """Equivalent inputs yield the same skylink and path."""
        assert parse_skylink(value, ParseMode.INCLUDE_PATH) == f"{SKYLINK}/foo/bar"

    def test_include_path_without_path(self) -> None:
        assert parse_skylink(SKYLINK, ParseMode.INCLUDE_PATH) == SKYLINK
        assert parse_skylink(f"{PORTAL_URL}/{SKYLINK}/", ParseMode.INCLUDE_PATH) == SKYLINK

    def test_only_path(self) -> None:
        """Only the path after the skylink is returned."""
        assert parse_skylink(f"{PORTAL_URL}/{SKYLINK}/foo/bar", ParseMode.ONLY_PATH) == "/foo/bar"
        assert parse_skylink(f"sia://{SKYLINK}/foo?x=1", ParseMode.ONLY_PATH) == "/foo"

    def test_only_path_empty(self) -> None:
        """A skylink without a path gives an empty string, not None."""
        assert parse_skylink(SKYLINK, ParseMode.ONLY_PATH) == ""
        assert parse_skylink(f"{PORTAL_URL}/{SKYLINK}", ParseMode.ONLY_PATH) == ""
        assert parse_skylink(f"{PORTAL_URL}/{SKYLINK}/", ParseMode.ONLY_PATH) == ""

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "foo",
            "sia:foo",
            f"{PORTAL_URL}/foo/{SKYLINK}",
            f"{PORTAL_URL}/{SKYLINK}x",
            SKYLINK[:-1],
            PORTAL_URL,
        ],
    )
    def test_not_found(self, value: str) -> None:
        """Inputs without a skylink yield None in every path mode."""
        assert parse_skylink(value) is None
        assert parse_skylink(value, ParseMode.INCLUDE_PATH) is None
        assert parse_skylink(value, ParseMode.ONLY_PATH) is None

    @pytest.mark.parametrize("suffix", ["\n", "\r\n", "\t"])
    @pytest.mark.parametrize(
        "value",
        [SKYLINK, f"sia:{SKYLINK}", f"{PORTAL_URL}/{SKYLINK}", f"{PORTAL_URL}/{SKYLINK}/foo"],
    )
    def test_trailing_control_characters(self, value: str, suffix: str) -> None:
        """Whitespace control characters are not silently stripped."""
        assert parse_skylink(value + suffix) is None
        assert parse_skylink(value + suffix, ParseMode.INCLUDE_PATH) is None
        assert parse_skylink(value + suffix, ParseMode.ONLY_PATH) is None

    def test_embedded_newline(self) -> None:
        assert parse_skylink(f"{PORTAL_URL}/{SKYLINK[:10]}\n{SKYLINK[10:]}") is None

    def test_non_string_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError, match="has to be a string"):
            parse_skylink(123)  # type: ignore[arg-type]

        with pytest.raises(InvalidArgumentError, match="has to be a string"):
            parse_skylink(None)  # type: ignore[arg-type]

    def test_unknown_mode_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError, match="Unknown parse mode"):
            parse_skylink(SKYLINK, "include_path")  # type: ignore[arg-type]


class TestParseSubdomain:
    """Tests for parsing base32 skylinks from subdomains."""

    def test_from_subdomain(self) -> None:
        url = f"https://{SKYLINK_BASE32}.siasky.net"
        assert parse_skylink(url, ParseMode.FROM_SUBDOMAIN) == SKYLINK_BASE32

    def test_from_subdomain_with_path(self) -> None:
        url = f"https://{SKYLINK_BASE32}.siasky.net/foo/bar?x=1"
        assert parse_skylink(url, ParseMode.FROM_SUBDOMAIN) == SKYLINK_BASE32
        assert parse_skylink(url, ParseMode.FROM_SUBDOMAIN_PATH) == "/foo/bar"

    def test_from_subdomain_path_empty(self) -> None:
        url = f"https://{SKYLINK_BASE32}.siasky.net"
        assert parse_skylink(url, ParseMode.FROM_SUBDOMAIN_PATH) == ""

    @pytest.mark.parametrize(
        "value",
        [
            PORTAL_URL,
            f"{PORTAL_URL}/{SKYLINK}",
            SKYLINK_BASE32,
            f"https://{SKYLINK_BASE32}x.siasky.net",
            f"https://www.{SKYLINK_BASE32}.siasky.net",
        ],
    )
    def test_from_subdomain_not_found(self, value: str) -> None:
        assert parse_skylink(value, ParseMode.FROM_SUBDOMAIN) is None

    def test_from_subdomain_trailing_newline(self) -> None:
        url = f"https://{SKYLINK_BASE32}.siasky.net\n"
        assert parse_skylink(url, ParseMode.FROM_SUBDOMAIN) is None
        assert parse_skylink(url, ParseMode.FROM_SUBDOMAIN_PATH) is None

    def test_from_subdomain_options(self) -> None:
        url = f"https://{SKYLINK_BASE32}.siasky.net/foo"
        assert parse_skylink(url, ParseOptions(from_subdomain=True)) == SKYLINK_BASE32
        assert parse_skylink(url, ParseOptions(from_subdomain=True, only_path=True)) == "/foo"


class TestParseOptions:
    """Tests for flag-style parse options."""

    def test_modes(self) -> None:
        assert ParseOptions().mode == ParseMode.DEFAULT
        assert ParseOptions(only_path=True).mode == ParseMode.ONLY_PATH
        assert ParseOptions(include_path=True).mode == ParseMode.INCLUDE_PATH
        assert ParseOptions(from_subdomain=True).mode == ParseMode.FROM_SUBDOMAIN
        assert ParseOptions(from_subdomain=True, only_path=True).mode == ParseMode.FROM_SUBDOMAIN_PATH

    def test_include_path_and_only_path(self) -> None:
        with pytest.raises(InvalidArgumentError, match="include_path and only_path"):
            ParseOptions(include_path=True, only_path=True)

    def test_include_path_and_from_subdomain(self) -> None:
        with pytest.raises(InvalidArgumentError, match="include_path and from_subdomain"):
            ParseOptions(include_path=True, from_subdomain=True)

    def test_options_match_modes(self) -> None:
        value = f"sia://{SKYLINK}/foo/bar"
        assert parse_skylink(value, ParseOptions(include_path=True)) == f"{SKYLINK}/foo/bar"
        assert parse_skylink(value, ParseOptions(only_path=True)) == "/foo/bar"
        assert parse_skylink(value, ParseOptions()) == SKYLINK


class TestConvertSkylink:
    """Tests for base64/base32 conversion."""

    def test_to_base32(self) -> None:
        result = convert_skylink_to_base32(SKYLINK)
        assert result == SKYLINK_BASE32
        assert len(result) == 55

    def test_to_base64(self) -> None:
        result = convert_skylink_to_base64(SKYLINK_BASE32)
        assert result == SKYLINK
        assert len(result) == 46

    def test_to_base64_accepts_uppercase(self) -> None:
        assert convert_skylink_to_base64(SKYLINK_BASE32.upper()) == SKYLINK

    @pytest.mark.parametrize("fill", [0, 7, 128, 250])
    def test_conversion_is_invertible(self, fill: int) -> None:
        skylink = make_skylink(fill)
        base32 = convert_skylink_to_base32(skylink)
        assert base32 == base32.lower()
        assert "=" not in base32
        assert convert_skylink_to_base64(base32) == skylink

    @pytest.mark.parametrize(
        "value",
        [
            "not base64!",
            SKYLINK[:-1],
            SKYLINK.replace("_", "/"),
            SKYLINK + "==",
            SKYLINK[:-1] + "h",
        ],
    )
    def test_to_base32_rejects_invalid(self, value: str) -> None:
        with pytest.raises(InvalidArgumentError):
            convert_skylink_to_base32(value)

    def test_to_base32_rejects_non_canonical(self) -> None:
        """A last character with non-zero unused bits is not the same skylink."""
        with pytest.raises(InvalidArgumentError, match="not canonical"):
            convert_skylink_to_base32(SKYLINK[:-1] + "h")

    @pytest.mark.parametrize(
        "value",
        ["wxyz", SKYLINK_BASE32[:-1] + "!", "a", SKYLINK_BASE32[:-1] + "h"],
    )
    def test_to_base64_rejects_invalid(self, value: str) -> None:
        with pytest.raises(InvalidArgumentError):
            convert_skylink_to_base64(value)


class TestTrimHelpers:
    """Tests for prefix and slash trimming."""

    def test_trim_uri_prefix(self) -> None:
        assert trim_uri_prefix("sia://abc", "sia:") == "abc"
        assert trim_uri_prefix("sia:abc", "sia:") == "abc"
        assert trim_uri_prefix("abc", "sia:") == "abc"
        assert trim_uri_prefix("hns://doesn", "hns:") == "doesn"

    def test_trim_uri_prefix_only_once(self) -> None:
        assert trim_uri_prefix("sia:sia:abc", "sia:") == "sia:abc"

    def test_trim_forward_slash(self) -> None:
        assert trim_forward_slash("//foo/bar//") == "foo/bar"
        assert trim_forward_slash("/") == ""
