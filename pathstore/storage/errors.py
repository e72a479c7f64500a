"""
Error taxonomy for storage operations.

Filesystem failures are normalized into two recognized categories,
already-exists and does-not-exist. Anything else is re-raised untouched so
callers can treat it as an internal failure.
"""

import errno
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any


class StorageError(Exception):
    """Base exception for storage operations."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        op: str | None = None,
        path: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        self.op = op
        self.path = path


class AlreadyExistsError(StorageError):
    """Target resource already exists."""

    pass


class NotFoundError(StorageError):
    """Target resource does not exist."""

    pass


class InvalidPathError(StorageError):
    """Logical path resolves outside the storage root."""

    pass


# Operations for which ENOTDIR means the addressed entry was never found
LOOKUP_OPS = frozenset({"stat", "open", "readdir", "remove", "mkdir", "create"})


def _describe(op: str, path: str, exc: OSError) -> str:
    reason = exc.strerror or str(exc)
    return f"{op} {path}: {reason}"


def translate_error(op: str, path: str, exc: OSError) -> StorageError | OSError:
    """
    Map a raw filesystem error onto the storage taxonomy.

    ENOTDIR only counts as does-not-exist for lookup operations. For copy
    and rename it usually means the destination is a file standing where a
    directory was expected, so it stays unclassified.

    Args:
        op: Name of the failing operation (e.g. "mkdir")
        path: Logical path the operation was addressed to
        exc: The original error

    Returns:
        AlreadyExistsError, NotFoundError, or ``exc`` itself when the
        failure has no normalized category
    """
    if isinstance(exc, FileExistsError) or exc.errno == errno.EEXIST:
        return AlreadyExistsError(
            _describe(op, path, exc),
            error_code="ALREADY_EXISTS",
            status_code=409,
            details={"errno": exc.errno},
            op=op,
            path=path,
        )
    if (
        isinstance(exc, FileNotFoundError)
        or exc.errno == errno.ENOENT
        or (op in LOOKUP_OPS and exc.errno == errno.ENOTDIR)
    ):
        return NotFoundError(
            _describe(op, path, exc),
            error_code="NOT_FOUND",
            status_code=404,
            details={"errno": exc.errno},
            op=op,
            path=path,
        )
    return exc


@contextmanager
def translate_errors(op: str, path: str) -> Iterator[None]:
    """Translate OSErrors raised inside the block; others pass through."""
    try:
        yield
    except OSError as exc:
        translated = translate_error(op, path, exc)
        if translated is exc:
            raise
        raise translated from exc


def is_exist_error(err: BaseException | None) -> bool:
    """Check whether ``err`` is the already-exists category."""
    return isinstance(err, AlreadyExistsError)


def is_not_exist_error(err: BaseException | None) -> bool:
    """Check whether ``err`` is the does-not-exist category."""
    return isinstance(err, NotFoundError)


__all__ = [
    "StorageError",
    "AlreadyExistsError",
    "NotFoundError",
    "InvalidPathError",
    "translate_error",
    "translate_errors",
    "is_exist_error",
    "is_not_exist_error",
]
