"""Content storage interface and implementations."""

import base64
import hashlib
import logging
from abc import ABC, abstractmethod

from ..skylink import parse_skylink
from ..types import URI_SKYNET_PREFIX, TransportError

logger = logging.getLogger(__name__)


class StorageClient(ABC):
    """Interface for uploading and downloading immutable content."""

    @abstractmethod
    async def upload(self, data: bytes, filename: str = "") -> str:
        """
        Upload content and return its skylink.

        Raises:
            TransportError: If the upload fails.
        """
        ...

    @abstractmethod
    async def download(self, skylink: str) -> bytes:
        """
        Download the content behind a skylink.

        Raises:
            TransportError: If the download fails.
        """
        ...


class InMemoryStorage(StorageClient):
    """
    In-memory, content-addressed implementation of StorageClient (for testing).

    Skylinks are a 2-byte version field followed by the BLAKE2b-256 of the
    content, returned with the ``sia:`` prefix like a portal upload.
    """

    VERSION_FIELD = b"\x01\x00"

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}
        self._filenames: dict[str, str] = {}

    async def upload(self, data: bytes, filename: str = "") -> str:
        """Store content and return ``sia:<skylink>``."""
        digest = hashlib.blake2b(bytes(data), digest_size=32).digest()
        skylink = base64.urlsafe_b64encode(self.VERSION_FIELD + digest).decode("ascii").rstrip("=")
        self._blobs[skylink] = bytes(data)
        if filename:
            self._filenames[skylink] = filename
        logger.debug("Uploaded %d bytes as %s", len(data), skylink)
        return f"{URI_SKYNET_PREFIX}{skylink}"

    async def download(self, skylink: str) -> bytes:
        """Return the content behind a skylink in any recognized wrapping."""
        parsed = parse_skylink(skylink)
        if parsed is None or parsed not in self._blobs:
            raise TransportError(f"Content not found for skylink: {skylink}")
        return bytes(self._blobs[parsed])

    def filename(self, skylink: str) -> str:
        """The filename hint given at upload, or an empty string."""
        parsed = parse_skylink(skylink)
        return self._filenames.get(parsed or "", "")
