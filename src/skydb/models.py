"""Models for SkyDB files and registry entries."""

from dataclasses import dataclass
from datetime import timedelta
from enum import IntEnum

from .types import SIGNATURE_SIZE, TWEAK_SIZE, InvalidArgumentError


FILEID_V1 = 1


class FileType(IntEnum):
    """Type of a file. 0 is never a valid file type."""
    INVALID = 0
    PUBLIC_UNENCRYPTED = 1


@dataclass(frozen=True)
class FileID:
    """
    Logical, versioned identity of a mutable file.

    Attributes:
        version: FileID format version (FILEID_V1).
        application_id: Identifier of the application owning the file.
        file_type: FileType of the file. FileType.INVALID is rejected.
        filename: Name of the file. Case and exact text are part of the identity.
    """

    version: int
    application_id: str
    file_type: FileType
    filename: str

    def __post_init__(self) -> None:
        if not isinstance(self.version, int) or isinstance(self.version, bool):
            raise InvalidArgumentError(f"version has to be an int, got {self.version!r}")
        if not isinstance(self.application_id, str):
            raise InvalidArgumentError(f"application_id has to be a string, got {self.application_id!r}")
        if not isinstance(self.filename, str):
            raise InvalidArgumentError(f"filename has to be a string, got {self.filename!r}")
        try:
            file_type = FileType(self.file_type)
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown file type: {self.file_type!r}") from e
        if file_type == FileType.INVALID:
            raise InvalidArgumentError("FileType.INVALID is not a valid file type")
        object.__setattr__(self, "file_type", file_type)


def new_file_id(application_id: str, file_type: FileType, filename: str) -> FileID:
    """Build a version 1 FileID."""
    return FileID(
        version=FILEID_V1,
        application_id=application_id,
        file_type=file_type,
        filename=filename,
    )


@dataclass(frozen=True)
class RegistryEntry:
    """A versioned record binding a tweak to a skylink."""
    tweak: bytes
    data: str
    revision: int

    def __post_init__(self) -> None:
        if len(self.tweak) != TWEAK_SIZE:
            raise InvalidArgumentError(f"Tweak must be {TWEAK_SIZE} bytes, got {len(self.tweak)}")
        if self.revision < 0:
            raise InvalidArgumentError(f"Revision must be non-negative, got {self.revision}")


@dataclass(frozen=True)
class SignedRegistryEntry:
    """A registry entry with the owner's Ed25519 signature over its digest."""
    entry: RegistryEntry
    signature: bytes

    def __post_init__(self) -> None:
        if len(self.signature) != SIGNATURE_SIZE:
            raise InvalidArgumentError(
                f"Signature must be {SIGNATURE_SIZE} bytes, got {len(self.signature)}"
            )

    @property
    def signature_hex(self) -> str:
        """The signature as a hex string."""
        return self.signature.hex()


@dataclass
class RetryConfig:
    """Configuration for retrying writes that lost a revision race."""
    max_retries: int = 3
    retry_delay: timedelta = timedelta(0)
