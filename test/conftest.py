import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import structlog

from pathstore.storage import StorageProvider


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    with tempfile.TemporaryDirectory() as tmpdirname:
        yield Path(tmpdirname)


@pytest.fixture
def storage_root(temp_dir: Path) -> Path:
    root = temp_dir / "data"
    root.mkdir()
    return root


@pytest.fixture
def storage(storage_root: Path) -> StorageProvider:
    return StorageProvider(storage_root)


@pytest.fixture
def populated_storage(storage: StorageProvider, storage_root: Path) -> StorageProvider:
    """Root with docs/readme.txt, docs/notes.md and docs/archive/old.bin."""
    (storage_root / "docs" / "archive").mkdir(parents=True)
    (storage_root / "docs" / "readme.txt").write_bytes(b"read me")
    (storage_root / "docs" / "notes.md").write_bytes(b"# notes")
    (storage_root / "docs" / "archive" / "old.bin").write_bytes(b"\x00\x01")
    return storage


@pytest.fixture(autouse=True)
def mock_logger(mocker: Any) -> MagicMock:
    return mocker.patch.object(structlog, "get_logger", return_value=MagicMock())
