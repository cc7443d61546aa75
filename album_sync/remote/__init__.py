# album_sync/remote/__init__.py
"""
Remote utilities: thin wrappers around Paramiko + helpers for item paths and commands.
Re-export the public API so editors/type-checkers can resolve symbols.
"""

from .ssh import SSHClient
from .commands import CommandError, Result, run, shell_quote
from .items import RemoteItem

__all__ = [
    "SSHClient",
    "CommandError",
    "Result",
    "RemoteItem",
    "run",
    "shell_quote",
]
