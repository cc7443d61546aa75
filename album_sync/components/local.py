# album_sync/components/local.py
from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ..remote.commands import CommandError, Result

log = logging.getLogger(__name__)


def run_local(
    args: Sequence[str],
    *,
    cwd: str | os.PathLike[str] | None = None,
    env: Optional[Mapping[str, str]] = None,
    check: bool = True,
) -> Result:
    """Run a local command without a shell and capture its output."""
    argv = [str(a) for a in args]
    log.debug("LOCAL: %s (cwd=%s)", " ".join(argv), cwd or ".")
    full_env = None
    if env:
        full_env = dict(os.environ)
        full_env.update(env)
    try:
        proc = subprocess.run(
            argv,
            cwd=str(cwd) if cwd is not None else None,
            env=full_env,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise FileNotFoundError(f"{argv[0]} not found on PATH") from e
    if check and proc.returncode != 0:
        raise CommandError(" ".join(argv), proc.returncode, proc.stdout or "", proc.stderr or "")
    return Result(proc.returncode, proc.stdout or "", proc.stderr or "")


def which(name: str) -> Optional[str]:
    return shutil.which(name)


def remove_path(path: Path) -> bool:
    """Remove a file or a whole directory tree. Returns False if nothing was there."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False
