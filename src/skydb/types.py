"""Type definitions and constants for SkyDB."""

from typing import Optional


# Portal constants
DEFAULT_PORTAL_URL = "https://siasky.net"

# URI prefixes
URI_SKYNET_PREFIX = "sia:"
URI_HANDSHAKE_PREFIX = "hns:"
URI_HANDSHAKE_RESOLVER_PREFIX = "hnsres:"

# Identifier constants
SKYLINK_SIZE = 34
BASE64_SKYLINK_LENGTH = 46
BASE32_SKYLINK_LENGTH = 55

# Endpoint defaults
DEFAULT_SKYLINK_ENDPOINT = "/"
DEFAULT_HNS_ENDPOINT = "/hns"
DEFAULT_HNSRES_ENDPOINT = "/hnsres"
DEFAULT_HNS_SUBDOMAIN = "hns"

# Key derivation constants
PBKDF2_ITERATIONS = 1000
SEED_SIZE = 32

# Hash constants
TWEAK_SIZE = 32

# Signature constants
SIGNATURE_SIZE = 64
PUBLIC_KEY_SIZE = 32


# Exception types
class SkyDBError(Exception):
    """Base exception for SkyDB errors."""
    pass


class InvalidArgumentError(SkyDBError, ValueError):
    """Malformed argument or illegal option combination."""
    pass


class NotAnIdentifierError(InvalidArgumentError):
    """No skylink or domain could be extracted from the input."""

    def __init__(self, input: str) -> None:
        self.input = input
        super().__init__(f"Could not get skylink out of input '{input}'")


class EntryNotFoundError(SkyDBError):
    """No registry entry exists for the owner and tweak."""

    def __init__(self, public_key: str, tweak: bytes) -> None:
        self.public_key = public_key
        self.tweak = tweak
        super().__init__(f"Registry entry not found for {public_key} (tweak {tweak.hex()})")


class ConflictError(SkyDBError):
    """Submitted revision was not greater than the stored revision."""

    def __init__(self, revision: int, current_revision: Optional[int] = None) -> None:
        self.revision = revision
        self.current_revision = current_revision
        super().__init__(
            f"Revision conflict: submitted {revision}, stored {current_revision}"
        )


class TransportError(SkyDBError):
    """A registry or storage backend failed."""
    pass


class VerificationFailedError(SkyDBError):
    """Registry entry does not verify against the owner's key or the requested tweak."""
    pass


class InvalidSignatureError(SkyDBError):
    """Invalid signature or key format."""
    pass
