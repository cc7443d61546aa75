# album_sync/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .components.search import list_files, list_folders
from .components.transfer import Transfer, delete_local_item
from .config import DEFAULT_CONFIG_FILE, Settings, load_settings
from .logging_setup import setup_logging
from .remote.items import RemoteItem
from .remote.ssh import SSHClient
from .tools.preflight_entry import run_preflight
from . import ui

# ---------------- version ----------------
try:
    from importlib.metadata import PackageNotFoundError, version as _pkg_version
    __VERSION__ = _pkg_version("album-sync")
except PackageNotFoundError:
    __VERSION__ = "0.0.0+dev"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

log = logging.getLogger(__name__)


# ---------------- generic helpers ----------------
def _settings_from_args(args: argparse.Namespace) -> Settings:
    overrides: Dict[str, Any] = dict(
        host=args.host,
        port=args.port,
        username=args.user,
        password=args.password,
        key_path=str(args.key_path) if args.key_path else None,
        remote_workdir=args.remote_dir,
        local_workdir=str(args.local_dir) if args.local_dir else None,
        scp_extra_args=args.scp_arg or None,
        log_file=args.log_file,
    )
    return load_settings(args.config, overrides=overrides)


def _item_from_arg(value: str) -> RemoteItem:
    """'a/b/c' -> RemoteItem('c', 'a/b')"""
    path = value.strip().strip("/")
    if not path:
        raise ValueError("empty item path")
    parent, _, name = path.rpartition("/")
    return RemoteItem(name, parent or None)


def _ssh_for(settings: Settings) -> SSHClient:
    return SSHClient(
        host=settings.host,
        user=settings.username,
        port=settings.port,
        password=settings.password or None,
        key_path=settings.key_path or None,
        timeout=settings.connect_timeout,
    )


def _ensure_credentials(settings: Settings) -> Settings:
    if settings.password or settings.key_path:
        return settings
    if not sys.stdin.isatty():
        # fall back to agent/default keys
        return settings
    return settings.updated(password=ui.ask_password(settings.username, settings.host))


# ---------------- parser builders ----------------
def _common_parent() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)

    common.add_argument("--config", type=Path, default=None,
                        help=f"TOML config file (default: ./{DEFAULT_CONFIG_FILE} if present)")

    # Login
    common.add_argument("--host", default=None)
    common.add_argument("--port", type=int, default=None)
    common.add_argument("--user", default=None)
    common.add_argument("--password", default=None,
                        help="SSH password (prefer ALBUM_SYNC_PASSWORD or the config file)")
    common.add_argument("--key-path", type=Path, default=None, help="Private key for key-based login")

    # Working directories
    common.add_argument("--remote-dir", default=None, help="Remote working directory")
    common.add_argument("--local-dir", type=Path, default=None, help="Local working directory")
    common.add_argument("--scp-arg", action="append", default=None,
                        help="Extra option passed to scp (repeatable), e.g. --scp-arg=-O")

    # Logging
    common.add_argument("--log-file", default=None)
    common.add_argument("-v", "--verbose", action="count", default=1)
    return common


def _build_parser() -> argparse.ArgumentParser:
    common = _common_parent()
    # login/path flags live on the subcommands so their defaults cannot clobber each other
    p = argparse.ArgumentParser(
        prog="album-sync",
        description="Search a remote folder tree over SSH, pull an item down for editing, push it back",
    )
    p.add_argument("--version", action="version", version=f"album-sync {__VERSION__}")

    sub = p.add_subparsers(dest="cmd", required=True)

    browse = sub.add_parser("browse", parents=[common],
                            help="Interactive search -> download -> edit -> upload loop")
    browse.add_argument("--clean-local", action="store_true",
                        help="Delete the local copy after a successful upload")

    search = sub.add_parser("search", parents=[common], help="List remote folders matching a query")
    search.add_argument("query")

    ls = sub.add_parser("ls", parents=[common], help="List the files inside a remote folder")
    ls.add_argument("folder", help="Folder path relative to the remote working directory")

    down = sub.add_parser("download", parents=[common], help="Download one item")
    down.add_argument("item", help="Path relative to the remote working directory")

    up = sub.add_parser("upload", parents=[common], help="Upload one item")
    up.add_argument("item", help="Path relative to the local working directory")
    up.add_argument("--clean-local", action="store_true",
                    help="Delete the local copy after a successful upload")

    clean = sub.add_parser("clean", parents=[common], help="Delete the local copy of an item")
    clean.add_argument("item", help="Path relative to the local working directory")

    sub.add_parser("preflight", parents=[common], help="Check local tools and configuration")
    return p


# ---------------- command handlers ----------------
def _do_browse(args: argparse.Namespace, settings: Settings) -> int:
    settings = _ensure_credentials(settings)
    with _ssh_for(settings) as ssh:
        transfer = Transfer(ssh, settings)
        while True:
            query = ui.ask_query()
            if not query:
                break

            choice = ui.choose_item(list_folders(ssh, settings.remote_workdir, query))
            if choice is None:
                continue

            if not ui.confirm(f"Are you sure you want to download {ui.hl(choice.filename)}?"):
                continue

            transfer.download_item(choice)
            ui.print_success(f"Downloaded {ui.hl(choice.path())} to {ui.hl(settings.local_workdir)}")

            while not ui.confirm("Are you done editing?"):
                ui.print_step("Take your time, answer yes once the edits are saved.")

            transfer.upload_item(choice)
            ui.print_success(f"Uploaded {ui.hl(choice.path())} to {ui.hl(settings.remote_workdir)}")

            if args.clean_local:
                transfer.delete_local_item(choice)
    return EXIT_OK


def _do_search(args: argparse.Namespace, settings: Settings) -> int:
    settings = _ensure_credentials(settings)
    with _ssh_for(settings) as ssh:
        items = list_folders(ssh, settings.remote_workdir, args.query)
    if not items:
        ui.print_warning(f"No folders match {ui.hl(args.query)}")
        return EXIT_OK
    ui.console.print(ui.render_items(items, title=f"Folders matching '{args.query}'"))
    return EXIT_OK


def _do_ls(args: argparse.Namespace, settings: Settings) -> int:
    folder = _item_from_arg(args.folder)
    settings = _ensure_credentials(settings)
    with _ssh_for(settings) as ssh:
        items = list_files(ssh, settings.remote_workdir, folder)
    ui.console.print(ui.render_items(items, title=folder.path()))
    return EXIT_OK


def _do_download(args: argparse.Namespace, settings: Settings) -> int:
    item = _item_from_arg(args.item)
    settings = _ensure_credentials(settings)
    with _ssh_for(settings) as ssh:
        Transfer(ssh, settings).download_item(item)
    ui.print_success(f"Downloaded {ui.hl(item.path())} to {ui.hl(settings.local_workdir)}")
    return EXIT_OK


def _do_upload(args: argparse.Namespace, settings: Settings) -> int:
    item = _item_from_arg(args.item)
    settings = _ensure_credentials(settings)
    with _ssh_for(settings) as ssh:
        transfer = Transfer(ssh, settings)
        transfer.upload_item(item)
        ui.print_success(f"Uploaded {ui.hl(item.path())} to {ui.hl(settings.remote_workdir)}")
        if args.clean_local:
            transfer.delete_local_item(item)
    return EXIT_OK


def _do_clean(args: argparse.Namespace, settings: Settings) -> int:
    item = _item_from_arg(args.item)
    delete_local_item(settings.local_workdir, item)
    return EXIT_OK


def _do_preflight(args: argparse.Namespace, settings: Settings) -> int:
    return run_preflight(settings)


DISPATCH: Dict[str, Callable[[argparse.Namespace, Settings], int]] = {
    "browse": _do_browse,
    "search": _do_search,
    "ls": _do_ls,
    "download": _do_download,
    "upload": _do_upload,
    "clean": _do_clean,
    "preflight": _do_preflight,
}

# commands that only touch the local side
_LOCAL_ONLY = {"clean", "preflight"}


# ---------------- entrypoint ----------------
def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    parser = _build_parser()
    if not argv:
        parser.print_help()
        return EXIT_USAGE
    args = parser.parse_args(argv)

    func = DISPATCH.get(args.cmd)
    if func is None:
        parser.print_help()
        return EXIT_USAGE

    try:
        settings = _settings_from_args(args)
        if args.cmd not in _LOCAL_ONLY:
            settings.validate()
        elif args.cmd == "clean" and not settings.local_workdir:
            raise ValueError("missing required settings: local_workdir")
    except (OSError, ValueError) as e:
        # tomllib.TOMLDecodeError is a ValueError
        print(f"album-sync: configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(verbosity=args.verbose, log_file=settings.log_file)

    try:
        return int(func(args, settings))
    except KeyboardInterrupt:
        ui.print_warning("Interrupted.")
        return EXIT_INTERRUPTED
    except Exception as e:
        log.exception("%s failed: %s", args.cmd, e)
        ui.print_error(f"{args.cmd} failed: {e}")
        return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
