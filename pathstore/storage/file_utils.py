"""
File utility functions for the local storage provider.

This module derives resource metadata from filesystem entries: MIME type
detection by extension, ETag generation, content hashing, and assembly of
MetaData records.
"""

import hashlib
import mimetypes
import os
import stat as stat_module
from pathlib import Path

from .models import DEFAULT_MIME_TYPE, DIRECTORY_MIME_TYPE, MetaData


class FileUtils:
    """Utility class for metadata derivation."""

    # Read size used when hashing file content
    HASH_CHUNK_SIZE = 8192

    # mimetypes reports compression suffixes as an encoding, not a type
    COMPRESSION_MIME_TYPES = {
        "gzip": "application/gzip",
        "bzip2": "application/x-bzip2",
        "xz": "application/x-xz",
        "compress": "application/x-compress",
        "br": "application/x-brotli",
    }

    def __init__(self):
        """Initialize file utilities."""
        mimetypes.init()

    def get_content_type(self, path: str, is_dir: bool = False) -> str:
        """
        Get MIME content type for a resource.

        Args:
            path: Logical or filesystem path of the resource
            is_dir: Whether the resource is a collection

        Returns:
            MIME content type string
        """
        if is_dir:
            return DIRECTORY_MIME_TYPE
        content_type, encoding = mimetypes.guess_type(path, strict=False)
        if encoding:
            return self.COMPRESSION_MIME_TYPES.get(encoding, DEFAULT_MIME_TYPE)
        return content_type or DEFAULT_MIME_TYPE

    def make_etag(self, modified: int) -> str:
        """Build the quoted ETag for a modification time in epoch seconds."""
        return f'"{modified}"'

    def calculate_file_hash(self, file_path: Path, algorithm: str = "sha256") -> str:
        """
        Calculate hash of a file.

        Args:
            file_path: Path to the file
            algorithm: Any algorithm name accepted by hashlib (md5, sha1, sha256)

        Returns:
            Hexadecimal hash string

        Raises:
            ValueError: If the algorithm is not supported by hashlib
        """
        hash_func = hashlib.new(algorithm)

        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(self.HASH_CHUNK_SIZE), b""):
                hash_func.update(chunk)

        return hash_func.hexdigest()

    def build_metadata(self, logical_path: str, st: os.stat_result) -> MetaData:
        """
        Resolve a MetaData record from a stat result.

        Args:
            logical_path: Path relative to the storage root, used as id and path
            st: Result of ``os.stat`` / ``DirEntry.stat`` for the entry

        Returns:
            MetaData without children or checksum
        """
        is_dir = stat_module.S_ISDIR(st.st_mode)
        modified = int(st.st_mtime)
        return MetaData(
            id=logical_path,
            path=logical_path,
            size=st.st_size,
            is_col=is_dir,
            mime_type=self.get_content_type(logical_path, is_dir),
            modified=modified,
            etag=self.make_etag(modified),
        )


# Create a singleton instance for convenience
file_utils = FileUtils()

__all__ = [
    "FileUtils",
    "file_utils",
]
