"""SkyDB storage module."""

from .storage_client import StorageClient, InMemoryStorage

__all__ = [
    "StorageClient",
    "InMemoryStorage",
]
