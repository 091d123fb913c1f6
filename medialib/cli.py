"""Command line interface for the media library."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from rich.logging import RichHandler

from .cli_progress import (
    NotificationPrinter,
    _human_size,
    console,
    render_configuration_summary,
    render_listing,
    render_upload_results,
)
from .errors import MediaError
from .file_collector import FileCollector
from .models import FileUpload, MediaConfig
from .paths import normalize, parent_of
from .services.object_store import SupabaseStorageClient
from .utils.events import NOTIFY
from .views import MediaManager

logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default behavior is silent unless --debug, --log-level or LOG_LEVEL is
    provided. Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    env_level = os.getenv("LOG_LEVEL")
    if silent or (not debug and not log_level and not env_level):
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, (log_level or env_level or "INFO").upper(), logging.INFO)

    handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return logging.getLevelName(level)


def _normalize_path(path: Optional[str]) -> str:
    if path is None:
        return ""
    return normalize(path)


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _load_env_file(path: Path, override: bool = False) -> None:
    if not path.exists():
        raise CLIError(f"env file not found: {path}")
    if not path.is_file():
        raise CLIError(f"env path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None


def _build_config(bucket: Optional[str]) -> MediaConfig:
    overrides = {"bucket": bucket} if bucket else {}
    config = MediaConfig.from_env(**overrides)
    if not config.base_url:
        raise CLIError("SUPABASE_URL environment variable is not set")
    return config


def _read_uploads(sources: Sequence[Path], config: MediaConfig) -> List[FileUpload]:
    paths = FileCollector.expand(Path(source).expanduser() for source in sources)
    if not paths:
        raise CLIError("no image files to upload")

    uploads = []
    for path in paths:
        if not path.is_file():
            raise CLIError(f"source does not exist: {path}")
        upload = FileUpload.from_path(path)
        # Advisory policy only: warn, never reject
        if upload.size > config.max_file_size:
            console.print(
                f"[yellow]WARNING:[/yellow] {path.name} is {_human_size(upload.size)}, "
                f"above the {_human_size(config.max_file_size)} limit"
            )
        if not config.accepts(upload.content_type):
            console.print(
                f"[yellow]WARNING:[/yellow] {path.name} is not {config.accepted_mime} "
                f"({upload.content_type or 'unknown type'})"
            )
        uploads.append(upload)
    return uploads


async def _run_command(args: argparse.Namespace, config: MediaConfig) -> int:
    printer = NotificationPrinter(quiet_success=args.silent or args.command in {"ls", "url"})

    async with SupabaseStorageClient(config) as store:
        manager = MediaManager(store, config)
        manager.events.on(NOTIFY, printer)

        if args.command == "url":
            console.print(manager.url_for(_normalize_path(args.key)))
            return 0

        if args.command == "ls":
            listing = await manager.navigate_to(_normalize_path(args.path))
            if printer.errors:
                return 1
            render_listing(listing, manager.url_for, show_urls=args.urls)
            return 0

        if args.command == "mkdir":
            await manager.navigate_to(_normalize_path(args.path))
            manager.open_folder_dialog()
            if not await manager.submit_create_folder(args.name):
                return 1
            render_listing(manager.listing, manager.url_for)
            return 0

        if args.command == "upload":
            uploads = _read_uploads(args.files, config)
            await manager.navigate_to(_normalize_path(args.dest))
            results = await manager.submit_upload(uploads)
            render_upload_results(results)
            render_listing(manager.listing, manager.url_for)
            return 0 if all(result.success for result in results) else 1

        if args.command == "rm":
            exit_code = 0
            for key in args.keys:
                key = _normalize_path(key)
                if not key:
                    raise CLIError("refusing to delete the bucket root")
                await manager.navigate_to(parent_of(key))
                if not await manager.delete(key):
                    exit_code = 1
            return exit_code

    raise CLIError(f"unknown command: {args.command}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="media-admin",
        description="Browse and manage the storefront media library.",
    )
    parser.add_argument("--bucket", default=None, help="Bucket name (default from MEDIA_BUCKET or 'media')")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument("--version", action="version", version="media-admin (from medialib)")

    commands = parser.add_subparsers(dest="command")

    ls = commands.add_parser("ls", help="List a folder")
    ls.add_argument("path", nargs="?", default="", help="Folder path (default: root)")
    ls.add_argument("-u", "--urls", action="store_true", help="Show public URLs")

    mkdir = commands.add_parser("mkdir", help="Create a folder")
    mkdir.add_argument("path", help="Parent folder path ('/' for root)")
    mkdir.add_argument("name", help="New folder name")

    upload = commands.add_parser("upload", help="Upload images into a folder")
    upload.add_argument("dest", help="Destination folder path ('/' for root)")
    upload.add_argument("files", nargs="+", type=Path, help="Image files or folders of images")

    rm = commands.add_parser("rm", help="Delete objects permanently")
    rm.add_argument("keys", nargs="+", help="Object paths")

    url = commands.add_parser("url", help="Print the public URL of an object")
    url.add_argument("key", help="Object path")

    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = _build_config(args.bucket)
    except CLIError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.debug:
        render_configuration_summary(
            {
                "Storage": config.base_url,
                "Bucket": config.bucket,
                "API Key": "set" if config.api_key else "(missing)",
                "Env File": str(used_env_file) if used_env_file else "-",
                "Logging": effective_log_mode,
            }
        )

    try:
        return asyncio.run(_run_command(args, config))
    except (CLIError, MediaError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
