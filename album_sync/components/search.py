# album_sync/components/search.py
import logging
from typing import List

from ..remote.commands import CommandError, run, shell_quote
from ..remote.items import RemoteItem
from ..remote.ssh import SSHClient

log = logging.getLogger(__name__)


def _parse(out: str, root: str) -> List[RemoteItem]:
    items: List[RemoteItem] = []
    base = root.rstrip("/") or "/"
    for line in out.split("\n"):
        line = line.strip("\r")
        if not line or line.rstrip("/") == base:
            continue
        items.append(RemoteItem.from_full_path(line, root=base))
    return items


def list_folders(ssh: SSHClient, remote_workdir: str, query: str) -> List[RemoteItem]:
    """Folders under the remote working directory whose path contains ``query`` (case-insensitive)."""
    if not query:
        return []
    cmd = f"find {shell_quote(remote_workdir)} -type d | grep -i -F -- {shell_quote(query)}"
    res = run(ssh, cmd, check=False)
    if res.err.strip():
        raise CommandError(cmd, res.rc, res.out, res.err)
    # grep exits 1 when nothing matched
    if res.rc not in (0, 1):
        raise CommandError(cmd, res.rc, res.out, res.err)
    items = _parse(res.out, remote_workdir)
    log.debug("search %r -> %d folder(s)", query, len(items))
    return items


def list_files(ssh: SSHClient, remote_workdir: str, folder: RemoteItem) -> List[RemoteItem]:
    """Regular files anywhere inside ``folder``."""
    base = remote_workdir.rstrip("/") or "/"
    target = f"{shell_quote(base)}/{folder.quoted().path()}"
    cmd = f"find {target} -type f"
    res = run(ssh, cmd, check=False)
    if res.rc != 0 or res.err.strip():
        raise CommandError(cmd, res.rc, res.out, res.err)
    return _parse(res.out, base)
