"""
Loading and validation of the SiteMirror configuration.

Pydantic describes the schema; values come from an optional YAML/JSON file,
then from ``SITE_MIRROR_*`` environment variables, then from command-line
overrides applied through :meth:`MirrorConfig.with_overrides`.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

DEFAULT_USER_AGENT = "Mozilla/4.5 (compatible; iCab 2.9.7; Macintosh; U; PPC; Mac OS X)"

# environment variable -> config field
ENV_OVERRIDES: Dict[str, str] = {
    "SITE_MIRROR_UA": "user_agent",
    "SITE_MIRROR_DIR": "output_dir",
    "SITE_MIRROR_VERBOSE": "verbose",
    "SITE_MIRROR_DEBUG": "debug",
}

_FALSE_STRINGS = {"", "0", "false", "no", "off"}


class MirrorConfig(BaseModel):
    """Configuration for one mirroring run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    username: Optional[str] = Field(None, description="Basic auth user name.")
    password: Optional[str] = Field(None, description="Basic auth password.")
    referer: Optional[str] = Field(None, description="Referer sent with the seed URL.")
    allowed_hosts: List[str] = Field(default_factory=list, description="Extra hosts to follow.")
    max_requests: Optional[int] = Field(None, ge=1, description="Stop after this many requests.")
    max_stored_files: Optional[int] = Field(None, ge=1, description="Stop after storing this many files.")
    delay: Optional[float] = Field(None, ge=0, description="Upper bound of the random pause (seconds).")
    flat: bool = Field(False, description="Store every file directly under its host directory.")
    output_dir: Path = Field(Path("."), description="Directory the mirror is written to.")
    tar: bool = Field(False, description="Create a gzip tar archive of the mirror.")
    zip: bool = Field(False, description="Create a zip archive of the mirror.")
    verbose: bool = Field(False, description="Log progress.")
    debug: bool = Field(False, description="Log debugging output; implies verbose.")
    timeout: float = Field(300.0, gt=0, description="Total timeout of one request (seconds).")

    @field_validator("allowed_hosts", mode="before")
    def _split_hosts(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [h.strip() for h in v.split(",") if h.strip()]
        return v

    @field_validator("verbose", "debug", mode="before")
    def _env_flag(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower() not in _FALSE_STRINGS
        return v

    @model_validator(mode="before")
    @classmethod
    def _debug_implies_verbose(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("debug") and not data.get("verbose"):
            flag = data["debug"]
            if not (isinstance(flag, str) and flag.strip().lower() in _FALSE_STRINGS):
                data = {**data, "verbose": True}
        return data

    @property
    def has_credentials(self) -> bool:
        return self.username is not None and self.password is not None

    def with_overrides(self, **overrides: Any) -> MirrorConfig:
        """Return a validated copy; ``None`` values leave the field untouched."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return MirrorConfig(**data)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def _env_values(env: Mapping[str, str]) -> dict[str, Any]:
    return {field: env[name] for name, field in ENV_OVERRIDES.items() if env.get(name)}


def load_config(
    path: Union[str, Path, None] = None,
    env: Optional[Mapping[str, str]] = None,
) -> MirrorConfig:
    """
    Read YAML or JSON (if *path* is given), overlay ``SITE_MIRROR_*`` variables
    from *env* (``os.environ`` by default) and return a validated MirrorConfig.
    """
    data: dict[str, Any] = {}
    if path is not None:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
        suffix = path_obj.suffix.lower()
        if suffix in (".yaml", ".yml"):
            data = _read_yaml(path_obj)
        elif suffix == ".json":
            data = _read_json(path_obj)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    data.update(_env_values(os.environ if env is None else env))

    return MirrorConfig(**data)


__all__ = ["MirrorConfig", "load_config", "DEFAULT_USER_AGENT", "ENV_OVERRIDES"]
