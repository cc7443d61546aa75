# album_sync/remote/commands.py
from __future__ import annotations

import shlex
from dataclasses import dataclass

from .ssh import SSHClient


@dataclass
class Result:
    rc: int
    out: str
    err: str


class CommandError(RuntimeError):
    def __init__(self, cmd: str, rc: int, out: str = "", err: str = "") -> None:
        super().__init__(f"command failed rc={rc}: {cmd}\n{err or out}".rstrip())
        self.cmd = cmd
        self.rc = rc
        self.out = out
        self.err = err


def run(ssh: SSHClient, cmd: str, *, check: bool = True) -> Result:
    rc, out, err = ssh.exec(cmd)
    if check and rc != 0:
        raise CommandError(cmd, rc, out, err)
    return Result(rc, out, err)


# POSIX quoting for working directories and search queries
shell_quote = shlex.quote
