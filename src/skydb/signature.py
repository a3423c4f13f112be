"""
Signing and verification of registry entries.

A registry entry is signed by its owner's Ed25519 key over the BLAKE2b
digest of ``(tweak, data, revision)``. Consumers must verify the signature
against the owner's public key before trusting the entry's data or revision.
"""

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from .crypto import entry_digest
from .keys import public_key_from_bytes, public_key_from_hex
from .models import RegistryEntry, SignedRegistryEntry
from .types import SIGNATURE_SIZE, InvalidSignatureError, VerificationFailedError


def sign_digest(digest: bytes, signing_key: Ed25519PrivateKey) -> bytes:
    """Sign a message digest. Ed25519 signatures are deterministic."""
    return signing_key.sign(digest)


def sign_entry(entry: RegistryEntry, signing_key: Ed25519PrivateKey) -> bytes:
    """
    Sign a registry entry with an Ed25519 signing key.

    Args:
        entry: The entry to sign
        signing_key: The owner's Ed25519 signing key

    Returns:
        The Ed25519 signature (64 bytes)
    """
    return sign_digest(entry_digest(entry), signing_key)


def verify_entry(
    entry: RegistryEntry,
    verifying_key: Ed25519PublicKey,
    signature: bytes,
) -> bool:
    """
    Verify that a registry entry was signed by an Ed25519 key.

    Returns:
        True if the signature is valid, False otherwise

    Raises:
        InvalidSignatureError: If the signature length is invalid
    """
    if len(signature) != SIGNATURE_SIZE:
        raise InvalidSignatureError(
            f"Signature must be {SIGNATURE_SIZE} bytes, got {len(signature)}"
        )

    try:
        verifying_key.verify(signature, entry_digest(entry))
        return True
    except InvalidSignature:
        return False


def verify_entry_bytes(
    entry: RegistryEntry,
    ed25519_public_key: bytes,
    signature: bytes,
) -> bool:
    """
    Verify a registry entry using raw Ed25519 public key bytes.

    Raises:
        InvalidSignatureError: If any key or signature lengths are invalid
    """
    return verify_entry(entry, public_key_from_bytes(ed25519_public_key), signature)


def ensure_verified(signed: SignedRegistryEntry, public_key_hex: str) -> RegistryEntry:
    """
    Return the entry of signed if its signature verifies against the owner.

    Raises:
        VerificationFailedError: If the signature does not verify, or the
            owner key is malformed.
    """
    try:
        verifying_key = public_key_from_hex(public_key_hex)
        valid = verify_entry(signed.entry, verifying_key, signed.signature)
    except InvalidSignatureError as e:
        raise VerificationFailedError(f"Cannot verify entry for {public_key_hex}: {e}") from e

    if not valid:
        raise VerificationFailedError(
            f"Registry entry signature does not verify for {public_key_hex}"
        )
    return signed.entry
