"""
Preflight checks: local binaries used for transfers and the configured paths.

Run as ``album-sync preflight`` or via the top-level preflight.py script.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..components.local import run_local, which
from ..config import Settings

REQUIRED_BINARIES = ("scp", "zip", "unzip")


def _version_line(name: str) -> str:
    # zip/unzip print their banner on -v; scp has no version flag
    if name == "scp":
        return "present"
    try:
        res = run_local([name, "-v"], check=False)
    except FileNotFoundError:
        return "present"
    lines = [ln.strip() for ln in (res.out or res.err).splitlines() if ln.strip()]
    return lines[0] if lines else "present"


def collect_checks(
    settings: Optional[Settings] = None,
    *,
    lookup: Optional[Callable[[str], Optional[str]]] = None,
) -> List[Tuple[bool, str]]:
    lookup = lookup or which
    checks: List[Tuple[bool, str]] = []

    for name in REQUIRED_BINARIES:
        path = lookup(name)
        if path:
            checks.append((True, f"{name}: {path} ({_version_line(name)})"))
        else:
            checks.append((False, f"{name}: not found on PATH"))

    needs_sshpass = settings is None or bool(settings.password)
    sshpass = lookup("sshpass")
    if sshpass:
        checks.append((True, f"sshpass: {sshpass}"))
    elif needs_sshpass:
        checks.append((False, "sshpass: not found on PATH (required for password login)"))

    if settings is None:
        return checks

    try:
        settings.validate()
        checks.append((True, f"login: {settings.username}@{settings.host}:{settings.port}"))
    except ValueError as e:
        checks.append((False, f"config: {e}"))

    if settings.key_path:
        kp = Path(settings.key_path).expanduser()
        checks.append((kp.is_file(), f"key path: {kp}" + ("" if kp.is_file() else " (missing)")))

    if settings.local_workdir:
        lp = Path(settings.local_workdir).expanduser()
        checks.append((lp.is_dir(), f"local working directory: {lp}" + ("" if lp.is_dir() else " (missing)")))

    return checks


def run_preflight(settings: Optional[Settings] = None) -> int:
    print("== album-sync preflight ==")
    print(f"Python: {sys.version.split()[0]}")
    ok = True
    for passed, msg in collect_checks(settings):
        print(f"[{'OK' if passed else 'WARN'}] {msg}")
        ok = ok and passed
    print("\nPreflight complete.")
    return 0 if ok else 1
