# album_sync/components/transfer.py
import logging
from pathlib import Path
from typing import Dict, List, Tuple

from ..config import Settings
from ..remote.commands import CommandError, run, shell_quote
from ..remote.items import RemoteItem
from ..remote.ssh import SSHClient
from .local import remove_path, run_local

log = logging.getLogger(__name__)


class Transfer:
    """
    Moves items between the remote and local working directories.

    Folders travel as zip archives:
      download: zip on the remote -> scp down -> rm remote archive -> unzip locally -> rm local archive
      upload:   zip locally -> scp up -> unzip on the remote -> rm remote archive -> rm local archive
    Plain files are copied as-is. Any failing step raises and stops the transfer.
    """

    def __init__(self, ssh: SSHClient, settings: Settings) -> None:
        self.ssh = ssh
        self.settings = settings

    # ---------------- paths ----------------
    @property
    def remote_root(self) -> str:
        return self.settings.remote_workdir.rstrip("/") or "/"

    @property
    def local_root(self) -> Path:
        return Path(self.settings.local_workdir).expanduser()

    def remote_path(self, item: RemoteItem) -> str:
        return item.path_in(self.remote_root)

    def remote_shell_path(self, item: RemoteItem) -> str:
        """Remote path as a shell word: quoted working directory + quoted item."""
        return f"{shell_quote(self.remote_root)}/{item.quoted().path()}"

    def remote_shell_dir(self, item: RemoteItem) -> str:
        if item.parent:
            return f"{shell_quote(self.remote_root)}/{RemoteItem(item.parent).quoted().path()}"
        return shell_quote(self.remote_root)

    def local_path(self, item: RemoteItem) -> Path:
        return self.local_root / item.path()

    # ---------------- scp ----------------
    def _scp_base(self) -> Tuple[List[str], Dict[str, str]]:
        s = self.settings
        env: Dict[str, str] = {}
        if s.password:
            # sshpass -e reads SSHPASS, keeping the password off the process list
            argv = ["sshpass", "-e", "scp"]
            env["SSHPASS"] = s.password
        else:
            argv = ["scp"]
            if s.key_path:
                argv += ["-i", str(Path(s.key_path).expanduser())]
        argv += ["-P", str(int(s.port))]
        argv += list(s.scp_extra_args or [])
        return argv, env

    def _remote_target(self, shell_path: str) -> str:
        return f"{self.settings.username}@{self.settings.host}:{shell_path}"

    def _run_scp(self, argv: List[str], env: Dict[str, str]) -> None:
        try:
            run_local(argv, env=env)
        except CommandError:
            if "-O" not in argv:
                # SFTP-mode scp (OpenSSH 9+) takes the quoted remote path literally
                log.warning("scp failed; on OpenSSH 9+ retry with --scp-arg=-O (legacy scp protocol)")
            raise

    def _scp_download(self, item: RemoteItem) -> Path:
        log.info("Downloading %s...", item.path())
        dest_dir = self.local_root / item.parent if item.parent else self.local_root
        dest_dir.mkdir(parents=True, exist_ok=True)
        argv, env = self._scp_base()
        argv += [self._remote_target(self.remote_shell_path(item)), f"{dest_dir}/"]
        self._run_scp(argv, env)
        return self.local_path(item)

    def _scp_upload(self, item: RemoteItem) -> None:
        log.info("Uploading %s...", item.path())
        argv, env = self._scp_base()
        argv += [str(self.local_path(item)), self._remote_target(self.remote_shell_dir(item) + "/")]
        self._run_scp(argv, env)

    # ---------------- download ----------------
    def download_item(self, item: RemoteItem) -> Path:
        remote = self.remote_path(item)
        try:
            is_dir = self.ssh.is_dir(remote)
        except FileNotFoundError as e:
            raise FileNotFoundError(f"Remote item not found: {remote}") from e

        if not is_dir:
            return self._scp_download(item)

        archive = item.as_archive()
        self.compress_remote_folder(item)
        self._scp_download(archive)
        self.delete_remote_archive(archive)
        self.unzip_local_archive(archive)
        return self.local_path(item)

    def compress_remote_folder(self, item: RemoteItem) -> None:
        log.info("Compressing %s", item.path())
        archive = self.remote_shell_path(item.as_archive())
        cmd = (
            f"cd {shell_quote(self.remote_root)} && rm -f {archive} && "
            f"zip -r -q {archive} {item.quoted().path()}"
        )
        run(self.ssh, cmd)

    def delete_remote_archive(self, archive: RemoteItem) -> None:
        if not archive.is_archive():
            raise ValueError(f"refusing to delete non-archive {archive.path()}")
        log.info("Removing archive...")
        run(self.ssh, f"rm -f {self.remote_shell_path(archive)}")

    def unzip_local_archive(self, archive: RemoteItem) -> None:
        local = self.local_path(archive)
        log.info("Unzipping archive...")
        run_local(["unzip", "-o", "-q", str(local), "-d", str(self.local_root)])
        local.unlink()

    # ---------------- upload ----------------
    def upload_item(self, item: RemoteItem) -> None:
        local = self.local_path(item)
        if not local.exists():
            raise FileNotFoundError(f"Local item not found: {local}")

        if not local.is_dir():
            self._scp_upload(item)
            return

        archive = item.as_archive()
        self.compress_local_folder(item)
        try:
            self._scp_upload(archive)
            self.unzip_remote_archive(archive)
        finally:
            remove_path(self.local_path(archive))

    def compress_local_folder(self, item: RemoteItem) -> None:
        log.info("Compressing %s", item.path())
        archive = item.as_archive()
        remove_path(self.local_path(archive))
        run_local(["zip", "-r", "-q", archive.path(), item.path()], cwd=self.local_root)

    def unzip_remote_archive(self, archive: RemoteItem) -> None:
        path = self.remote_shell_path(archive)
        log.info("Unzipping archive...")
        run(self.ssh, f"unzip -o -q {path} -d {shell_quote(self.remote_root)}")
        run(self.ssh, f"rm -f {path}")

    # ---------------- local cleanup ----------------
    def delete_local_item(self, item: RemoteItem) -> bool:
        return delete_local_item(self.local_root, item)


def delete_local_item(local_workdir: str | Path, item: RemoteItem) -> bool:
    """Remove the local copy of ``item``; a missing item is only logged."""
    path = Path(local_workdir).expanduser() / item.path()
    if not (path.exists() or path.is_symlink()):
        log.info("Item not found: %s", path)
        return False
    remove_path(path)
    log.info("Removed local copy %s", path)
    return True
