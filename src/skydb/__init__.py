"""
SkyDB - Mutable files on Skynet

Python implementation of skylink parsing/URL composition and the SkyDB
registry protocol using Ed25519 + BLAKE2b.
"""

from .types import (
    DEFAULT_PORTAL_URL,
    URI_SKYNET_PREFIX,
    URI_HANDSHAKE_PREFIX,
    URI_HANDSHAKE_RESOLVER_PREFIX,
    SkyDBError,
    InvalidArgumentError,
    NotAnIdentifierError,
    EntryNotFoundError,
    ConflictError,
    TransportError,
    VerificationFailedError,
    InvalidSignatureError,
)
from .skylink import (
    ParseMode,
    ParseOptions,
    parse_skylink,
    convert_skylink_to_base32,
    convert_skylink_to_base64,
    trim_uri_prefix,
)
from .urls import (
    SkylinkUrlOptions,
    HnsUrlOptions,
    HnsresUrlOptions,
    make_url,
    add_subdomain,
    add_url_query,
    get_skylink_url,
    get_hns_url,
    get_hnsres_url,
)
from .models import (
    FILEID_V1,
    FileType,
    FileID,
    new_file_id,
    RegistryEntry,
    SignedRegistryEntry,
    RetryConfig,
)
from .crypto import hash_all, derive_tweak, entry_digest
from .keys import derive_seed, derive_keys_from_seed
from .signature import sign_entry, verify_entry, verify_entry_bytes, ensure_verified
from .user import User, derive_user
from .registry import RegistryClient, InMemoryRegistry
from .storage import StorageClient, InMemoryStorage
from .client import PortalConfig, SkyDBClient

__version__ = "0.1.0"

__all__ = [
    # Constants
    "DEFAULT_PORTAL_URL",
    "URI_SKYNET_PREFIX",
    "URI_HANDSHAKE_PREFIX",
    "URI_HANDSHAKE_RESOLVER_PREFIX",
    # Errors
    "SkyDBError",
    "InvalidArgumentError",
    "NotAnIdentifierError",
    "EntryNotFoundError",
    "ConflictError",
    "TransportError",
    "VerificationFailedError",
    "InvalidSignatureError",
    # Skylink
    "ParseMode",
    "ParseOptions",
    "parse_skylink",
    "convert_skylink_to_base32",
    "convert_skylink_to_base64",
    "trim_uri_prefix",
    # URLs
    "SkylinkUrlOptions",
    "HnsUrlOptions",
    "HnsresUrlOptions",
    "make_url",
    "add_subdomain",
    "add_url_query",
    "get_skylink_url",
    "get_hns_url",
    "get_hnsres_url",
    # Models
    "FILEID_V1",
    "FileType",
    "FileID",
    "new_file_id",
    "RegistryEntry",
    "SignedRegistryEntry",
    "RetryConfig",
    # Crypto
    "hash_all",
    "derive_tweak",
    "entry_digest",
    # Keys
    "derive_seed",
    "derive_keys_from_seed",
    # Signature
    "sign_entry",
    "verify_entry",
    "verify_entry_bytes",
    "ensure_verified",
    # User
    "User",
    "derive_user",
    # Backends
    "RegistryClient",
    "InMemoryRegistry",
    "StorageClient",
    "InMemoryStorage",
    # Client
    "PortalConfig",
    "SkyDBClient",
]
