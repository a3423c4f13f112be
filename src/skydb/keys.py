"""Key derivation and management for SkyDB users."""

from typing import Tuple

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from cryptography.hazmat.primitives.hashes import SHA1
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .types import PBKDF2_ITERATIONS, PUBLIC_KEY_SIZE, SEED_SIZE, InvalidSignatureError


def derive_seed(username: str, password: str) -> bytes:
    """
    Derive a 32-byte seed from a username and password using PBKDF2-HMAC-SHA1.

    The username is the salt, so the same credentials always produce the
    same seed.

    Args:
        username: The user's name, ideally an email address since it should be unique.
        password: The user's password.

    Returns:
        32-byte seed
    """
    kdf = PBKDF2HMAC(
        algorithm=SHA1(),
        length=SEED_SIZE,
        salt=username.encode("utf-8"),
        iterations=PBKDF2_ITERATIONS,
    )
    return kdf.derive(password.encode("utf-8"))


def derive_keys_from_seed(seed: bytes) -> Tuple[Ed25519PrivateKey, Ed25519PublicKey]:
    """
    Create the Ed25519 key pair whose private key is the given 32-byte seed.

    Args:
        seed: 32-byte seed (e.g., from derive_seed)

    Returns:
        Tuple of (private_key, public_key)
    """
    if len(seed) != SEED_SIZE:
        raise ValueError(f"Seed must be {SEED_SIZE} bytes, got {len(seed)}")

    private_key = Ed25519PrivateKey.from_private_bytes(seed)
    public_key = private_key.public_key()

    return private_key, public_key


def public_key_to_bytes(public_key: Ed25519PublicKey) -> bytes:
    """Convert Ed25519 public key to raw bytes."""
    return public_key.public_bytes_raw()


def public_key_from_bytes(data: bytes) -> Ed25519PublicKey:
    """Create Ed25519 public key from raw bytes."""
    if len(data) != PUBLIC_KEY_SIZE:
        raise InvalidSignatureError(
            f"Ed25519 public key must be {PUBLIC_KEY_SIZE} bytes, got {len(data)}"
        )
    return Ed25519PublicKey.from_public_bytes(data)


def public_key_from_hex(public_key_hex: str) -> Ed25519PublicKey:
    """Create Ed25519 public key from a hex user id."""
    try:
        data = bytes.fromhex(public_key_hex)
    except ValueError as e:
        raise InvalidSignatureError(f"Invalid public key hex: {public_key_hex!r}") from e
    return public_key_from_bytes(data)
