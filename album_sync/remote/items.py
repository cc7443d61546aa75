# album_sync/remote/items.py
from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, replace
from typing import Optional

ARCHIVE_SUFFIX = ".zip"

_EXTENSION_RE = re.compile(r".+\.\w{2,4}$")


@dataclass(frozen=True)
class RemoteItem:
    """A file or folder under a working directory (local or remote)."""

    filename: str
    parent: Optional[str] = None

    def path(self) -> str:
        return posixpath.join(self.parent, self.filename) if self.parent else self.filename

    def path_in(self, directory: str) -> str:
        if not directory:
            return self.path()
        return posixpath.join(directory, self.path())

    def in_(self, parent: Optional[str]) -> "RemoteItem":
        return replace(self, parent=parent or None)

    def as_archive(self) -> "RemoteItem":
        return replace(self, filename=f"{self.filename}{ARCHIVE_SUFFIX}")

    def is_archive(self) -> bool:
        return self.filename.endswith(ARCHIVE_SUFFIX)

    def has_file_extension(self) -> bool:
        return bool(_EXTENSION_RE.match(self.filename))

    def quoted(self) -> "RemoteItem":
        return RemoteItem(
            quote(self.filename),
            quote(self.parent) if self.parent else None,
        )

    @classmethod
    def from_full_path(cls, full_path: str, root: Optional[str] = None) -> "RemoteItem":
        """
        Build an item from a path printed by the remote host.
        With ``root`` set, the directories between it and the basename become the parent.
        """
        p = full_path.rstrip("/") or full_path
        name = posixpath.basename(p)
        if not root:
            return cls(name)
        base = root.rstrip("/") or "/"
        try:
            rel = posixpath.relpath(p, base)
        except ValueError:
            return cls(name)
        if rel.startswith(".."):
            return cls(name)
        parent = posixpath.dirname(rel)
        return cls(name, parent or None)

    def __str__(self) -> str:
        return self.path()


def quote(value: str) -> str:
    """Wrap a name in double quotes for a remote shell word."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("$", "\\$")
        .replace("`", "\\`")
    )
    return f'"{escaped}"'
