"""
Registry interfaces.

The registry maps ``(owner public key, tweak)`` to the latest signed entry.
It is expected to reject any update whose revision is not strictly greater
than the stored one, which turns a lost-update race into a ConflictError.
Implementations can talk to any portal.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from .models import SignedRegistryEntry
from .signature import ensure_verified
from .types import ConflictError

logger = logging.getLogger(__name__)


class RegistryClient(ABC):
    """Abstract base class for a registry backend."""

    @abstractmethod
    async def lookup(self, public_key: str, tweak: bytes) -> Optional[SignedRegistryEntry]:
        """
        Get the current signed entry for an owner and tweak.

        Args:
            public_key: Hex-encoded Ed25519 public key of the owner.
            tweak: 32-byte lookup key.

        Returns:
            The stored entry, or None if there is none.

        Raises:
            TransportError: If the backend fails.
        """
        pass

    @abstractmethod
    async def update(self, public_key: str, signed: SignedRegistryEntry) -> None:
        """
        Store a signed entry for an owner.

        Raises:
            ConflictError: If the revision is not greater than the stored one.
            VerificationFailedError: If the signature does not verify.
            TransportError: If the backend fails.
        """
        pass


class InMemoryRegistry(RegistryClient):
    """
    In-memory implementation of RegistryClient (for testing).

    Enforces the same rules a portal does: valid owner signature and strictly
    increasing revisions.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, bytes], SignedRegistryEntry] = {}

    async def lookup(self, public_key: str, tweak: bytes) -> Optional[SignedRegistryEntry]:
        """Get the current signed entry for an owner and tweak."""
        return self._entries.get((public_key, bytes(tweak)))

    async def update(self, public_key: str, signed: SignedRegistryEntry) -> None:
        """Store a signed entry after checking its signature and revision."""
        entry = ensure_verified(signed, public_key)

        key = (public_key, bytes(entry.tweak))
        existing = self._entries.get(key)
        if existing is not None and entry.revision <= existing.entry.revision:
            logger.warning(
                "Rejecting revision %d for %s, stored revision is %d",
                entry.revision, public_key, existing.entry.revision,
            )
            raise ConflictError(entry.revision, existing.entry.revision)

        self._entries[key] = signed
        logger.debug("Stored revision %d for %s", entry.revision, public_key)

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()
