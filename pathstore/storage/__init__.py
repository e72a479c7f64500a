"""
Local filesystem storage module.

This module exposes path-addressed files and collections stored under a
root directory, together with derived metadata and a small error taxonomy.
"""

from .errors import (
    AlreadyExistsError,
    InvalidPathError,
    NotFoundError,
    StorageError,
    is_exist_error,
    is_not_exist_error,
    translate_error,
    translate_errors,
)
from .file_utils import FileUtils, file_utils
from .local_storage import StorageProvider
from .models import DEFAULT_MIME_TYPE, DIRECTORY_MIME_TYPE, MetaData


def create_storage(root_data_dir: str) -> StorageProvider:
    """Create a storage provider rooted at ``root_data_dir``."""
    return StorageProvider(root_data_dir)


__all__ = [
    # Provider
    "StorageProvider",
    "create_storage",
    # Data models
    "MetaData",
    "DIRECTORY_MIME_TYPE",
    "DEFAULT_MIME_TYPE",
    # Exceptions
    "StorageError",
    "AlreadyExistsError",
    "NotFoundError",
    "InvalidPathError",
    "translate_error",
    "translate_errors",
    "is_exist_error",
    "is_not_exist_error",
    # Utilities
    "FileUtils",
    "file_utils",
]
