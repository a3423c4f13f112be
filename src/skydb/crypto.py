"""Hashing for registry tweaks and entry digests."""

import hashlib
from typing import Union

from .models import FileID, RegistryEntry
from .types import TWEAK_SIZE, InvalidArgumentError


def hash_all(*args: Union[str, bytes]) -> bytes:
    """
    Hash all arguments with a single cumulative BLAKE2b-256.

    Strings are fed as UTF-8, bytes as-is. Argument order is part of the
    result.

    Raises:
        InvalidArgumentError: If an argument is neither str nor bytes.
    """
    hasher = hashlib.blake2b(digest_size=TWEAK_SIZE)
    for arg in args:
        if isinstance(arg, str):
            hasher.update(arg.encode("utf-8"))
        elif isinstance(arg, (bytes, bytearray)):
            hasher.update(arg)
        else:
            raise InvalidArgumentError(f"Cannot hash value of type {type(arg).__name__}")
    return hasher.digest()


def derive_tweak(file_id: FileID) -> bytes:
    """Derive the 32-byte registry lookup key for a FileID."""
    return hash_all(
        str(file_id.version),
        file_id.application_id,
        str(int(file_id.file_type)),
        file_id.filename,
    )


def entry_digest(entry: RegistryEntry) -> bytes:
    """The digest a registry entry signature commits to."""
    return hash_all(entry.tweak, entry.data, str(entry.revision))
