"""
SkyDB client for mutable files on Skynet.

The SkyDBClient publishes mutable pointers to immutable content: a file is
uploaded to get a skylink, and a signed, versioned registry entry under a
tweak derived from the FileID points at that skylink.
"""

import asyncio
import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, TypeVar, Union

from .crypto import derive_tweak
from .models import FileID, RegistryEntry, RetryConfig
from .registry import RegistryClient
from .signature import ensure_verified
from .storage import StorageClient
from .types import (
    DEFAULT_PORTAL_URL,
    ConflictError,
    EntryNotFoundError,
    InvalidArgumentError,
    VerificationFailedError,
)
from .urls import (
    HnsresUrlOptions,
    HnsUrlOptions,
    SkylinkUrlOptions,
    get_hns_url,
    get_hnsres_url,
    get_skylink_url,
)
from .user import User

logger = logging.getLogger(__name__)

_Options = TypeVar("_Options", SkylinkUrlOptions, HnsUrlOptions, HnsresUrlOptions)


def _override(options: _Options, overrides: dict[str, Any]) -> _Options:
    if not overrides:
        return options
    try:
        return dataclasses.replace(options, **overrides)
    except TypeError as e:
        raise InvalidArgumentError(
            f"Unknown {type(options).__name__} field in {sorted(overrides)}"
        ) from e


@dataclass
class PortalConfig:
    """
    Configuration for the portal a client talks to.

    The option fields are the client-level defaults for URL composition.
    Keyword overrides passed to a client URL method replace single fields
    of these defaults for that call only.
    """

    portal_url: str
    """Portal base URL."""

    skylink_options: SkylinkUrlOptions = field(default_factory=SkylinkUrlOptions)
    """Default options for skylink URLs."""

    hns_options: HnsUrlOptions = field(default_factory=HnsUrlOptions)
    """Default options for Handshake domain URLs."""

    hnsres_options: HnsresUrlOptions = field(default_factory=HnsresUrlOptions)
    """Default options for Handshake resolver URLs."""

    @classmethod
    def default(cls) -> "PortalConfig":
        """Creates configuration for the public siasky.net portal."""
        return cls(portal_url=DEFAULT_PORTAL_URL)

    @classmethod
    def local(cls) -> "PortalConfig":
        """Creates configuration for a portal running on localhost."""
        return cls(portal_url="http://localhost:9980")

    def with_skylink_options(self, **changes) -> "PortalConfig":
        """Sets default skylink URL options."""
        return dataclasses.replace(
            self, skylink_options=_override(self.skylink_options, changes)
        )

    def with_hns_options(self, **changes) -> "PortalConfig":
        """Sets default Handshake URL options."""
        return dataclasses.replace(self, hns_options=_override(self.hns_options, changes))


class SkyDBClient:
    """
    High-level client for SkyDB files.

    Example usage:
        ```python
        client = SkyDBClient(registry=my_registry, storage=my_storage)
        user = User.new("alice@example.com", "password")
        file_id = new_file_id("my-app", FileType.PUBLIC_UNENCRYPTED, "notes.txt")

        await client.set_file(user, file_id, b"hello")
        data = await client.get_file(user, file_id)
        ```
    """

    def __init__(
        self,
        registry: RegistryClient,
        storage: StorageClient,
        config: Optional[PortalConfig] = None,
        retry_config: Optional[RetryConfig] = None,
    ) -> None:
        """
        Initialize the SkyDB client.

        Args:
            registry: RegistryClient for entry lookups and updates.
            storage: StorageClient for uploads and downloads.
            config: Portal configuration (default: siasky.net).
            retry_config: Retry policy for set_file_with_retry.
        """
        self.registry = registry
        self.storage = storage
        self.config = config or PortalConfig.default()
        self.retry_config = retry_config or RetryConfig()

    @property
    def portal_url(self) -> str:
        return self.config.portal_url

    # MARK: - URLs

    def get_skylink_url(self, skylink: str, **overrides) -> str:
        """
        Compose the portal URL for a skylink.

        Args:
            skylink: Skylink in any recognized wrapping.
            **overrides: SkylinkUrlOptions fields replacing the client defaults
                for this call, e.g. ``subdomain=True``.

        Raises:
            InvalidArgumentError: If an override is not a SkylinkUrlOptions field.
            NotAnIdentifierError: If no skylink can be extracted.
        """
        options = _override(self.config.skylink_options, overrides)
        return get_skylink_url(self.portal_url, skylink, options)

    def open_url(self, skylink: str, **overrides) -> str:
        """Compose the portal URL that opens a skylink in the browser."""
        return self.get_skylink_url(skylink, **{**overrides, "download": False})

    def download_url(self, skylink: str, **overrides) -> str:
        """Compose the portal URL that downloads a skylink as an attachment."""
        return self.get_skylink_url(skylink, **{**overrides, "download": True})

    def get_hns_url(self, domain: str, **overrides) -> str:
        """Compose the portal URL for a Handshake domain."""
        options = _override(self.config.hns_options, overrides)
        return get_hns_url(self.portal_url, domain, options)

    def download_hns_url(self, domain: str, **overrides) -> str:
        """Compose the portal URL that downloads a Handshake domain as an attachment."""
        return self.get_hns_url(domain, **{**overrides, "download": True})

    def get_hnsres_url(self, domain: str, **overrides) -> str:
        """Compose the portal URL that resolves a Handshake domain."""
        options = _override(self.config.hnsres_options, overrides)
        return get_hnsres_url(self.portal_url, domain, options)

    # MARK: - Registry

    async def lookup_entry(
        self,
        owner: Union[User, str],
        file_id: FileID,
    ) -> Optional[RegistryEntry]:
        """
        Fetch and verify the current registry entry for a file.

        Args:
            owner: The owning User, or their hex public key.
            file_id: The file's identity.

        Returns:
            The verified entry, or None if the file has no entry.

        Raises:
            VerificationFailedError: If the entry is not signed by the owner or
                is for another file.
        """
        public_key = _owner_id(owner)
        tweak = derive_tweak(file_id)
        logger.debug("Looking up %s for %s", tweak.hex(), public_key)

        signed = await self.registry.lookup(public_key, tweak)
        if signed is None:
            return None

        entry = ensure_verified(signed, public_key)
        if entry.tweak != tweak:
            logger.warning("Registry returned entry for another tweak for %s", public_key)
            raise VerificationFailedError(
                f"Registry entry for {public_key} is for tweak {entry.tweak.hex()}, "
                f"expected {tweak.hex()}"
            )
        return entry

    async def read(self, owner: Union[User, str], file_id: FileID) -> str:
        """
        Get the skylink a file currently points at.

        Raises:
            EntryNotFoundError: If the file has no entry.
            VerificationFailedError: If the entry is not signed by the owner.
        """
        entry = await self.lookup_entry(owner, file_id)
        if entry is None:
            raise EntryNotFoundError(_owner_id(owner), derive_tweak(file_id))
        return entry.data

    async def write(self, user: User, file_id: FileID, skylink: str) -> RegistryEntry:
        """
        Point a file at a skylink with the next revision.

        This reads the current revision and submits revision + 1 (or 0 for a
        new file). A concurrent writer can advance the revision in between;
        the registry then rejects the update.

        Returns:
            The submitted entry.

        Raises:
            ConflictError: If the submitted revision was stale.
            VerificationFailedError: If the current entry is not signed by the user.
        """
        if not isinstance(skylink, str):
            raise InvalidArgumentError(f"Skylink has to be a string, {type(skylink).__name__} provided")

        existing = await self.lookup_entry(user, file_id)
        revision = 0 if existing is None else existing.revision + 1

        entry = RegistryEntry(tweak=derive_tweak(file_id), data=skylink, revision=revision)
        signed = user.sign_entry(entry)

        logger.debug("Submitting revision %d for %s", revision, user.id)
        await self.registry.update(user.id, signed)
        return entry

    async def write_with_retry(self, user: User, file_id: FileID, skylink: str) -> RegistryEntry:
        """
        Like write, but retries on ConflictError with a fresh revision.

        Raises:
            ConflictError: If every attempt lost the race.
        """
        max_retries = self.retry_config.max_retries
        for attempt in range(max_retries):
            try:
                return await self.write(user, file_id, skylink)
            except ConflictError as e:
                logger.warning(
                    "Revision %d for %s was stale (retry %d/%d)",
                    e.revision, user.id, attempt + 1, max_retries,
                )
                delay = self.retry_config.retry_delay.total_seconds()
                if delay > 0:
                    await asyncio.sleep(delay)

        return await self.write(user, file_id, skylink)

    # MARK: - Files

    async def get_file(self, owner: Union[User, str], file_id: FileID) -> bytes:
        """
        Download the content a file currently points at.

        Raises:
            EntryNotFoundError: If the file has no entry.
            VerificationFailedError: If the entry is not signed by the owner.
            TransportError: If the download fails.
        """
        skylink = await self.read(owner, file_id)
        return await self.storage.download(skylink)

    async def set_file(self, user: User, file_id: FileID, data: bytes) -> str:
        """
        Upload content and point the file at it.

        Returns:
            The skylink of the uploaded content.

        Raises:
            ConflictError: If a concurrent writer advanced the revision.
            TransportError: If the upload or update fails.
        """
        skylink = await self.storage.upload(data, file_id.filename)
        await self.write(user, file_id, skylink)
        return skylink

    async def set_file_with_retry(self, user: User, file_id: FileID, data: bytes) -> str:
        """Like set_file, but retries the registry update on ConflictError."""
        skylink = await self.storage.upload(data, file_id.filename)
        await self.write_with_retry(user, file_id, skylink)
        return skylink


def _owner_id(owner: Union[User, str]) -> str:
    if isinstance(owner, User):
        return owner.id
    if isinstance(owner, str):
        return owner
    raise InvalidArgumentError(f"Owner has to be a User or hex public key, got {type(owner).__name__}")
