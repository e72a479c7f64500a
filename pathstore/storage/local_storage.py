"""
Local filesystem storage provider.

This module provides the StorageProvider, which maps logical resource paths
onto a root directory and performs create, read, stat, remove, copy, rename
and collection operations on them. Every filesystem call goes through the
error translator so callers only have to branch on AlreadyExistsError and
NotFoundError.
"""

import os
import posixpath
import shutil
from pathlib import Path
from typing import BinaryIO

import structlog

from .errors import InvalidPathError, NotFoundError, translate_errors
from .file_utils import file_utils
from .models import MetaData

logger = structlog.get_logger(__name__)


class StorageProvider:
    """
    Path-addressed storage backed by a local directory.

    The provider keeps no state besides its root directory: there is no
    cache and no index, every operation re-reads the filesystem. Concurrent
    callers race at the filesystem level.
    """

    # Directory mode for collections created by create_col
    COLLECTION_MODE = 0o755

    # Buffer size used when copying streams
    CHUNK_SIZE = 64 * 1024

    def __init__(self, root_data_dir: str | os.PathLike):
        """
        Initialize the provider.

        Args:
            root_data_dir: Directory all logical paths are resolved against
        """
        self._root = os.path.realpath(os.path.expanduser(os.fspath(root_data_dir)))
        self.file_utils = file_utils

    @property
    def root(self) -> Path:
        return Path(self._root)

    def _contains(self, full: str) -> bool:
        return os.path.commonpath([self._root, full]) == self._root

    def _escape_error(self, path: str) -> InvalidPathError:
        return InvalidPathError(
            f"resolve {path}: path escapes the storage root",
            error_code="INVALID_PATH",
            status_code=400,
            op="resolve",
            path=path,
        )

    def _resolve(self, path: str, follow_last: bool = True) -> Path:
        """
        Join a logical path onto the root.

        The joined path is normalized, then symlinks are resolved and the
        canonical location must still lie under the root. Components that do
        not exist yet are kept as written. With ``follow_last`` false only
        the parent is canonicalized, for operations that act on a link
        itself rather than on its target.

        Raises:
            InvalidPathError: If the path escapes the root
        """
        relative = str(path).replace("\\", "/").lstrip("/")
        full = os.path.normpath(os.path.join(self._root, relative))
        if not self._contains(full):
            raise self._escape_error(path)

        if full != self._root:
            if follow_last:
                canonical = os.path.realpath(full)
            else:
                canonical = os.path.realpath(os.path.dirname(full))
            if not self._contains(canonical):
                logger.warning("Symlink escapes storage root", path=path, target=canonical)
                raise self._escape_error(path)
        return Path(full)

    def _resolve_non_root(self, op: str, path: str) -> Path:
        full = self._resolve(path, follow_last=False)
        if str(full) == self._root:
            raise InvalidPathError(
                f"{op} {path}: operation not allowed on the storage root",
                error_code="INVALID_PATH",
                status_code=400,
                op=op,
                path=path,
            )
        return full

    def _copy_stream(self, source: BinaryIO, target: BinaryIO) -> int:
        written = 0
        for chunk in iter(lambda: source.read(self.CHUNK_SIZE), b""):
            target.write(chunk)
            written += len(chunk)
        return written

    @staticmethod
    def _child_path(parent: str, name: str) -> str:
        if not parent:
            return name
        return posixpath.normpath(posixpath.join(parent, name))

    def put_file(self, path: str, stream: BinaryIO, size: int = -1) -> int:
        """
        Write the full contents of a stream to a file.

        The target is created or truncated. A failure mid-write leaves a
        partially written file behind.

        Args:
            path: Logical path of the file
            stream: Binary stream to read from until EOF
            size: Expected length; only compared for logging, never enforced

        Returns:
            Number of bytes written
        """
        full = self._resolve(path)
        with translate_errors("create", path):
            with open(full, "wb") as fd:
                written = self._copy_stream(stream, fd)

        if size >= 0 and written != size:
            logger.warning("Size mismatch on put", path=path, expected=size, written=written)
        logger.debug("File written", path=path, size=written)
        return written

    def stat(self, path: str, children: bool = False, checksum_type: str | None = None) -> MetaData:
        """
        Resolve metadata for a resource.

        Args:
            path: Logical path of the resource
            children: List immediate children when the resource is a collection
            checksum_type: hashlib algorithm used to fill the checksum of a file

        Returns:
            MetaData for the resource

        Raises:
            NotFoundError: If the resource does not exist
            ValueError: If checksum_type is not a hashlib algorithm
        """
        full = self._resolve(path)
        with translate_errors("stat", path):
            st = os.stat(full)

        meta = self.file_utils.build_metadata(path, st)

        if checksum_type and not meta.is_col:
            with translate_errors("stat", path):
                meta.checksum = self.file_utils.calculate_file_hash(full, checksum_type)
            meta.checksum_type = checksum_type

        if not meta.is_col or not children:
            return meta

        with translate_errors("readdir", path):
            with os.scandir(full) as entries:
                for entry in entries:
                    child_path = self._child_path(path, entry.name)
                    child = self.file_utils.build_metadata(
                        child_path, entry.stat(follow_symlinks=False)
                    )
                    meta.children.append(child)

        return meta

    def get_file(self, path: str) -> BinaryIO:
        """
        Open a file for reading.

        The caller owns the returned stream and must close it.

        Raises:
            NotFoundError: If the path is missing or not a regular file
        """
        full = self._resolve(path)
        if full.exists() and not full.is_file():
            raise NotFoundError(
                f"open {path}: not a regular file",
                error_code="NOT_FOUND",
                status_code=404,
                op="open",
                path=path,
            )
        with translate_errors("open", path):
            return open(full, "rb")

    def remove(self, path: str, recursive: bool = False) -> None:
        """
        Delete a resource.

        Without ``recursive`` only files and empty collections can be
        removed; a non-empty collection raises the raw OSError. With
        ``recursive`` the collection and all its descendants are removed,
        and a missing path is not an error.
        """
        full = self._resolve_non_root("remove", path)
        is_dir = full.is_dir() and not full.is_symlink()

        with translate_errors("remove", path):
            if not recursive:
                if is_dir:
                    os.rmdir(full)
                else:
                    os.unlink(full)
            elif is_dir:
                shutil.rmtree(full)
            elif os.path.lexists(full):
                os.unlink(full)
            else:
                logger.debug("Nothing to remove", path=path)
                return

        logger.debug("Resource removed", path=path, recursive=recursive)

    def create_col(self, path: str, recursive: bool = False) -> None:
        """
        Create a collection.

        Without ``recursive`` the parent must exist and the collection must
        not. With ``recursive`` missing ancestors are created and an existing
        collection is accepted.
        """
        full = self._resolve(path)
        with translate_errors("mkdir", path):
            if recursive:
                os.makedirs(full, mode=self.COLLECTION_MODE, exist_ok=True)
            else:
                os.mkdir(full, mode=self.COLLECTION_MODE)
        logger.debug("Collection created", path=path, recursive=recursive)

    def copy(self, src: str, dst: str) -> int:
        """
        Copy the content of a single file.

        Returns:
            Number of bytes copied
        """
        src_full = self._resolve(src)
        dst_full = self._resolve(dst)
        with translate_errors("copy", src):
            source = open(src_full, "rb")
        with source:
            if src_full == dst_full or (dst_full.exists() and os.path.samefile(src_full, dst_full)):
                raise shutil.SameFileError(f"{src} and {dst} are the same file")
            with translate_errors("copy", dst):
                with open(dst_full, "wb") as target:
                    written = self._copy_stream(source, target)

        logger.debug("File copied", src=src, dst=dst, size=written)
        return written

    def rename(self, src: str, dst: str) -> None:
        """Move a file or collection to a new path."""
        src_full = self._resolve_non_root("rename", src)
        dst_full = self._resolve_non_root("rename", dst)
        with translate_errors("rename", src):
            os.replace(src_full, dst_full)
        logger.debug("Resource renamed", src=src, dst=dst)


__all__ = ["StorageProvider"]
