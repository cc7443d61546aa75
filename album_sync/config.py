# album_sync/config.py
from __future__ import annotations

import dataclasses
import logging
import os
import shlex
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

log = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "album-sync.toml"
ENV_PREFIX = "ALBUM_SYNC_"

# env var suffix -> Settings field
_ENV_FIELDS = {
    "HOST": "host",
    "PORT": "port",
    "USER": "username",
    "PASSWORD": "password",
    "KEY_PATH": "key_path",
    "REMOTE_DIR": "remote_workdir",
    "LOCAL_DIR": "local_workdir",
    "LOG_FILE": "log_file",
}


@dataclass
class Settings:
    host: str = ""
    port: int = 22
    username: str = ""
    password: str = ""
    key_path: str = ""
    remote_workdir: str = ""
    local_workdir: str = ""
    scp_extra_args: List[str] = field(default_factory=list)
    connect_timeout: int = 30
    log_file: str = "album-sync.log"

    def validate(self) -> None:
        missing = [
            name
            for name in ("host", "username", "remote_workdir", "local_workdir")
            if not str(getattr(self, name) or "").strip()
        ]
        if missing:
            raise ValueError(f"missing required settings: {', '.join(missing)}")
        if not (0 < int(self.port) < 65536):
            raise ValueError(f"invalid port: {self.port}")

    def updated(self, **updates: Any) -> "Settings":
        """Copy with the non-None values of ``updates`` applied."""
        clean = {k: v for k, v in updates.items() if v is not None}
        if "port" in clean:
            clean["port"] = int(clean["port"])
        return dataclasses.replace(self, **clean)


DEF_SETTINGS = Settings()


def _from_toml(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Accept either a flat table or the ``[login]`` layout."""
    out: Dict[str, Any] = {}
    login = data.get("login") or {}
    for key in ("host", "port", "username", "password", "key_path"):
        if key in login:
            out[key] = login[key]
        elif key in data:
            out[key] = data[key]
    aliases = {
        "remote_workdir": ("remote_workdir", "remoteWorkingDirectory", "remote_dir"),
        "local_workdir": ("local_workdir", "localWorkingDirectory", "local_dir"),
    }
    for name, keys in aliases.items():
        for k in keys:
            if k in data:
                out[name] = data[k]
                break
    for key in ("scp_extra_args", "connect_timeout", "log_file"):
        if key in data:
            out[key] = data[key]
    if isinstance(out.get("scp_extra_args"), str):
        out["scp_extra_args"] = shlex.split(out["scp_extra_args"])
    return out


def load_file(path: Path) -> Dict[str, Any]:
    with open(path, "rb") as f:
        data = tomllib.load(f)
    log.debug("Loaded config from %s", path)
    return _from_toml(data)


def load_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    out: Dict[str, Any] = {}
    for suffix, name in _ENV_FIELDS.items():
        val = env.get(ENV_PREFIX + suffix)
        if val:
            out[name] = val
    return out


def load_settings(
    config_path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Settings:
    """
    Defaults < config file < ALBUM_SYNC_* environment < explicit overrides (CLI flags).
    An explicit ``config_path`` must exist; the default file is optional.
    """
    settings = DEF_SETTINGS
    if config_path is not None:
        path = Path(config_path).expanduser()
        if not path.is_file():
            raise FileNotFoundError(f"config file not found: {path}")
        settings = settings.updated(**load_file(path))
    else:
        default = Path.cwd() / DEFAULT_CONFIG_FILE
        if default.is_file():
            settings = settings.updated(**load_file(default))
    settings = settings.updated(**load_env(environ))
    if overrides:
        settings = settings.updated(**overrides)
    return settings
