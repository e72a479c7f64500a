import json
from pathlib import Path
from typing import Any

import pytest

from pathstore.auth import AuthProvider, hash_password
from pathstore.main import main
from pathstore.utils.config import ConfigProvider


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("PATHSTORE_ROOT_DATA_DIR", "PATHSTORE_CONFIG_FILE", "PATHSTORE_AUTH_FILE", "PATHSTORE_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


class TestStorageCommands:
    """Test suite for storage subcommands."""

    def test_put_stat_get(self, storage_root: Path, temp_dir: Path, capsys: Any) -> None:
        local = temp_dir / "upload.txt"
        local.write_bytes(b"uploaded content")
        root = str(storage_root)

        assert main(["--root", root, "mkdir", "docs"]) == 0
        assert main(["--root", root, "put", str(local), "docs/upload.txt"]) == 0
        capsys.readouterr()

        assert main(["--root", root, "stat", "docs", "--children"]) == 0
        meta = json.loads(capsys.readouterr().out)
        assert meta["isCol"] is True
        assert [child["path"] for child in meta["children"]] == ["docs/upload.txt"]

        download = temp_dir / "download.txt"
        assert main(["--root", root, "get", "docs/upload.txt", str(download)]) == 0
        assert download.read_bytes() == b"uploaded content"

    def test_stat_checksum(self, storage_root: Path, capsys: Any) -> None:
        (storage_root / "a.txt").write_bytes(b"abc")

        assert main(["--root", str(storage_root), "stat", "a.txt", "--checksum", "md5"]) == 0
        meta = json.loads(capsys.readouterr().out)
        assert meta["checksum"] == "900150983cd24fb0d6963f7d28e17f72"
        assert meta["checksumType"] == "md5"

    def test_cp_mv_rm(self, storage_root: Path) -> None:
        (storage_root / "a.txt").write_bytes(b"abc")
        root = str(storage_root)

        assert main(["--root", root, "cp", "a.txt", "b.txt"]) == 0
        assert main(["--root", root, "mv", "b.txt", "c.txt"]) == 0
        assert (storage_root / "c.txt").read_bytes() == b"abc"
        assert not (storage_root / "b.txt").exists()

        assert main(["--root", root, "mkdir", "-p", "x/y/z"]) == 0
        assert main(["--root", root, "rm", "-r", "x"]) == 0
        assert not (storage_root / "x").exists()

    def test_missing_resource_exit_code(self, storage_root: Path, capsys: Any) -> None:
        assert main(["--root", str(storage_root), "stat", "missing.txt"]) == 1
        assert "pathstore: stat missing.txt" in capsys.readouterr().err

    def test_non_empty_remove_exit_code(self, storage_root: Path, capsys: Any) -> None:
        (storage_root / "dir").mkdir()
        (storage_root / "dir" / "a.txt").write_bytes(b"x")

        assert main(["--root", str(storage_root), "rm", "dir"]) == 1
        assert capsys.readouterr().err.startswith("pathstore:")

    def test_root_from_config_file(self, storage_root: Path, temp_dir: Path, capsys: Any) -> None:
        config_file = temp_dir / "pathstore.json"
        (storage_root / "a.txt").write_bytes(b"abc")

        assert main(["--config", str(config_file), "init-config", str(storage_root), "--port", "9090"]) == 0
        assert ConfigProvider(config_file).parse().port == 9090

        capsys.readouterr()
        assert main(["--config", str(config_file), "stat", "a.txt"]) == 0
        assert json.loads(capsys.readouterr().out)["size"] == 3

    def test_unknown_checksum_algorithm_exit_code(self, storage_root: Path, capsys: Any) -> None:
        (storage_root / "a.txt").write_bytes(b"abc")

        assert main(["--root", str(storage_root), "stat", "a.txt", "--checksum", "bogus"]) == 1
        err = capsys.readouterr().err
        assert err.startswith("pathstore:")
        assert "bogus" in err

    def test_missing_config_file(self, temp_dir: Path, capsys: Any) -> None:
        assert main(["--config", str(temp_dir / "missing.json"), "stat", ""]) == 1
        assert "Cannot read configuration" in capsys.readouterr().err


def test_init_user(temp_dir: Path, mocker: Any) -> None:
    auth_file = temp_dir / "users.json"
    mocker.patch("pathstore.main.getpass.getpass", return_value="hunter2")
    mocker.patch("pathstore.main.hash_password", side_effect=lambda password: hash_password(password, rounds=4))

    exit_code = main(["init-user", "alice", "--display-name", "Alice", "--auth-file", str(auth_file)])

    assert exit_code == 0
    identity = AuthProvider(auth_file).authenticate("alice", "hunter2")
    assert identity.display_name == "Alice"
