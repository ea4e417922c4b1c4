"""Settings and content store adapters."""

from wpai.store.directory import ExtensionDirectory
from wpai.store.errors import DirectoryError, DuplicateError, NotFoundError, StoreError
from wpai.store.file_store import FileContentStore, FileSettingsStore
from wpai.store.protocol import ContentStoreProtocol, SettingsStoreProtocol

__all__ = [
    "ContentStoreProtocol",
    "DirectoryError",
    "DuplicateError",
    "ExtensionDirectory",
    "FileContentStore",
    "FileSettingsStore",
    "NotFoundError",
    "SettingsStoreProtocol",
    "StoreError",
]
