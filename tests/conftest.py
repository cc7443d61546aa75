from typing import Dict, List, Optional, Set, Tuple

import pytest

from album_sync.config import Settings


class FakeSSH:
    """Stands in for album_sync.remote.ssh.SSHClient; records commands into ``events``."""

    def __init__(
        self,
        dirs: Optional[Set[str]] = None,
        files: Optional[Set[str]] = None,
        responses: Optional[List[Tuple[int, str, str]]] = None,
        events: Optional[list] = None,
    ) -> None:
        self.dirs = dirs or set()
        self.files = files or set()
        self.responses = list(responses or [])
        self.events = events if events is not None else []

    @property
    def commands(self) -> List[str]:
        return [cmd for kind, cmd in self.events if kind == "ssh"]

    def exec(self, cmd: str) -> Tuple[int, str, str]:
        self.events.append(("ssh", cmd))
        if self.responses:
            return self.responses.pop(0)
        return 0, "", ""

    def is_dir(self, path: str) -> bool:
        if path in self.dirs:
            return True
        if path in self.files:
            return False
        raise FileNotFoundError(2, "No such file", path)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        host="nas.local",
        port=2222,
        username="alice",
        password="s3cret",
        remote_workdir="/srv/albums",
        local_workdir=str(tmp_path),
        log_file="",
    )


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    import os

    for key in list(os.environ):
        if key.startswith("ALBUM_SYNC_"):
            monkeypatch.delenv(key, raising=False)
