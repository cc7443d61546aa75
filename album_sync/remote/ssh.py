# album_sync/remote/ssh.py
from __future__ import annotations

import logging
import stat as stat_mod
from dataclasses import dataclass
from typing import Optional, Tuple

import paramiko

log = logging.getLogger(__name__)


@dataclass
class SSHClient:
    host: str
    user: str
    port: int = 22
    password: Optional[str] = None
    key_path: Optional[str] = None
    timeout: int = 30

    def __post_init__(self) -> None:
        self._ssh: paramiko.SSHClient | None = None
        self._sftp: paramiko.SFTPClient | None = None

    # Context manager
    def __enter__(self) -> "SSHClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _load_key(self) -> Optional[paramiko.PKey]:
        if not self.key_path:
            return None
        # try RSA, fallback to Ed25519
        try:
            return paramiko.RSAKey.from_private_key_file(self.key_path, password=self.password)
        except paramiko.SSHException:
            return paramiko.Ed25519Key.from_private_key_file(self.key_path, password=self.password)

    def connect(self) -> None:
        log.info("Connecting to %s...", self.host)
        cli = paramiko.SSHClient()
        cli.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        key = self._load_key()
        cli.connect(
            hostname=self.host,
            port=self.port,
            username=self.user,
            password=None if key is not None else self.password,
            pkey=key,
            look_for_keys=key is None and not self.password,
            allow_agent=key is None and not self.password,
            timeout=self.timeout,
            banner_timeout=self.timeout,
            auth_timeout=self.timeout,
        )
        self._ssh = cli
        log.debug("Connected to %s:%s as %s", self.host, self.port, self.user)

    def close(self) -> None:
        try:
            if self._sftp is not None:
                self._sftp.close()
            if self._ssh is not None:
                self._ssh.close()
        finally:
            self._sftp = None
            self._ssh = None

    @property
    def connected(self) -> bool:
        return self._ssh is not None

    def _require(self) -> paramiko.SSHClient:
        if self._ssh is None:
            raise RuntimeError("SSH not connected")
        return self._ssh

    def exec(self, cmd: str) -> Tuple[int, str, str]:
        ssh = self._require()
        log.debug("RUN: %s", cmd)
        stdin, stdout, stderr = ssh.exec_command(cmd)
        rc = stdout.channel.recv_exit_status()
        out = stdout.read().decode("utf-8", "ignore")
        err = stderr.read().decode("utf-8", "ignore")
        return rc, out, err

    def sftp(self) -> paramiko.SFTPClient:
        if self._sftp is None:
            self._sftp = self._require().open_sftp()
        return self._sftp

    def stat(self, path: str) -> paramiko.SFTPAttributes:
        return self.sftp().stat(path)

    def is_dir(self, path: str) -> bool:
        attrs = self.stat(path)
        return stat_mod.S_ISDIR(attrs.st_mode or 0)
