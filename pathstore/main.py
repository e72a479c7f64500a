#!/usr/bin/env python3
"""
Command-line entry point for pathstore.

Runs single storage operations against a root directory, and bootstraps the
JSON configuration and user files used by the surrounding service.
"""

import argparse
import getpass
import logging
import shutil
import sys
from pathlib import Path
from typing import Optional

import structlog
from dotenv import load_dotenv

from pathstore.auth import AuthError, AuthProvider, User, hash_password
from pathstore.storage import StorageError, StorageProvider
from pathstore.utils.config import ConfigError, ConfigProvider, ServerConfig
from pathstore.utils.env_config import AppSettings, reload_settings

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure stdlib logging and structlog for the process."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(message)s", stream=sys.stderr)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_format:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pathstore", description="Local path-addressed object store")
    parser.add_argument("--root", help="storage root directory (overrides configuration)")
    parser.add_argument("--config", help="JSON configuration file")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("stat", help="print resource metadata as JSON")
    p.add_argument("path")
    p.add_argument("--children", action="store_true", help="list immediate children")
    p.add_argument("--checksum", metavar="ALG", help="hash file content with ALG")

    p = sub.add_parser("put", help="upload a local file")
    p.add_argument("src", help="local file, '-' for stdin")
    p.add_argument("dst")

    p = sub.add_parser("get", help="download a file")
    p.add_argument("src")
    p.add_argument("dst", nargs="?", help="local file, stdout when omitted")

    p = sub.add_parser("rm", help="remove a resource")
    p.add_argument("path")
    p.add_argument("-r", "--recursive", action="store_true")

    p = sub.add_parser("mkdir", help="create a collection")
    p.add_argument("path")
    p.add_argument("-p", "--parents", action="store_true")

    p = sub.add_parser("cp", help="copy a file")
    p.add_argument("src")
    p.add_argument("dst")

    p = sub.add_parser("mv", help="rename a resource")
    p.add_argument("src")
    p.add_argument("dst")

    p = sub.add_parser("init-config", help="write a new configuration file")
    p.add_argument("root_data_dir")
    p.add_argument("--port", type=int, default=8080)
    p.add_argument("--temp-dir", default="")

    p = sub.add_parser("init-user", help="write a user file with a single user")
    p.add_argument("username")
    p.add_argument("--display-name", default="")
    p.add_argument("--email", default="")
    p.add_argument("--auth-file", help="JSON user file")

    return parser


def resolve_root(args: argparse.Namespace, settings: AppSettings) -> str:
    """Pick the storage root: --root, then environment, then the config file."""
    if args.root:
        return args.root
    if settings.root_data_dir:
        return settings.root_data_dir

    config = ConfigProvider(args.config or settings.config_file).parse()
    if not config.root_data_dir:
        raise ConfigError("rootDataDir is not set", args.config or settings.config_file)
    return config.root_data_dir


def run_storage_command(storage: StorageProvider, args: argparse.Namespace) -> None:
    if args.command == "stat":
        meta = storage.stat(args.path, children=args.children, checksum_type=args.checksum)
        print(meta.to_json(indent=2))
    elif args.command == "put":
        if args.src == "-":
            storage.put_file(args.dst, sys.stdin.buffer)
        else:
            src = Path(args.src)
            with open(src, "rb") as f:
                storage.put_file(args.dst, f, src.stat().st_size)
    elif args.command == "get":
        with storage.get_file(args.src) as f:
            if args.dst:
                with open(args.dst, "wb") as out:
                    shutil.copyfileobj(f, out)
            else:
                shutil.copyfileobj(f, sys.stdout.buffer)
                sys.stdout.flush()
    elif args.command == "rm":
        storage.remove(args.path, recursive=args.recursive)
    elif args.command == "mkdir":
        storage.create_col(args.path, recursive=args.parents)
    elif args.command == "cp":
        storage.copy(args.src, args.dst)
    elif args.command == "mv":
        storage.rename(args.src, args.dst)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the command line."""
    load_dotenv()
    settings = reload_settings()
    logging_config = settings.get_logging_config()
    configure_logging(logging_config["level"], logging_config["json_format"])

    args = build_parser().parse_args(argv)

    try:
        if args.command == "init-config":
            cfg = ServerConfig(root_data_dir=args.root_data_dir, root_temp_dir=args.temp_dir, port=args.port)
            ConfigProvider(args.config or settings.config_file).create_new_config(cfg)
            return 0

        if args.command == "init-user":
            password = getpass.getpass(f"Password for '{args.username}': ")
            user = User(
                username=args.username,
                password=hash_password(password),
                display_name=args.display_name,
                email=args.email,
            )
            AuthProvider(args.auth_file or settings.auth_file).create_user(user)
            return 0

        storage = StorageProvider(resolve_root(args, settings))
        run_storage_command(storage, args)
        return 0

    except (StorageError, ConfigError, AuthError, ValueError) as e:
        logger.debug("Command failed", command=args.command, error=str(e))
        print(f"pathstore: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.error("Command failed", command=args.command, error=str(e))
        print(f"pathstore: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
