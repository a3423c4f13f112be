"""
User identity for SkyDB.

A User holds an Ed25519 key pair derived deterministically from a username
and password, so the same credentials recover the same identity anywhere.
The private key never leaves the instance.
"""

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

from .keys import derive_keys_from_seed, derive_seed, public_key_to_bytes
from .models import RegistryEntry, SignedRegistryEntry
from .signature import sign_digest, sign_entry


class User:
    """
    An identity that can sign registry entries.

    Attributes:
        id: Hex encoding of the Ed25519 public key.
    """

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._private_key = private_key
        self._public_key = private_key.public_key()
        self.id = public_key_to_bytes(self._public_key).hex()

    @classmethod
    def new(cls, username: str, password: str) -> "User":
        """
        Derive a User from a username and password.

        The username should be the user's email address, as it ideally is unique.
        """
        private_key, _ = derive_keys_from_seed(derive_seed(username, password))
        return cls(private_key)

    @property
    def public_key(self) -> Ed25519PublicKey:
        return self._public_key

    @property
    def public_key_bytes(self) -> bytes:
        """The Ed25519 public key (32 bytes)."""
        return public_key_to_bytes(self._public_key)

    def sign(self, digest: bytes) -> str:
        """Sign a message digest and return the signature as hex."""
        return sign_digest(digest, self._private_key).hex()

    def sign_entry(self, entry: RegistryEntry) -> SignedRegistryEntry:
        """Sign a registry entry's digest."""
        return SignedRegistryEntry(entry=entry, signature=sign_entry(entry, self._private_key))

    def __repr__(self) -> str:
        return f"User(id={self.id!r})"


def derive_user(username: str, password: str) -> User:
    """Derive a User from a username and password."""
    return User.new(username, password)
