from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError

ROOT_ENV = "FSL_FIXDIR"
HIDE_RC_ENV = "FIX_HIDE_RC"

DEFAULT_PRODUCT = "FIX ICA Denoising Scripts"
DEFAULT_EXCLUDED_DIR = "examples"
VERSIONING_SUBDIR = "versioning"


def _as_text(name: str, value: Any) -> Optional[str]:
    """YAML turns bare tokens like ``1.068`` into numbers; keep them as text."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    raise ConfigError(f"{name} must be a string, got {type(value).__name__}")


def _as_path(name: str, value: Any) -> Path:
    if isinstance(value, os.PathLike):
        return Path(value)
    return Path(_as_text(name, value))


@dataclass
class VersionConfig:
    """Everything the resolver needs; no environment reads past this point."""

    root_dir: Path
    versioning_dir: Optional[Path] = None
    product_name: str = DEFAULT_PRODUCT
    excluded_dir: Optional[str] = DEFAULT_EXCLUDED_DIR
    hide_rc: Optional[str] = None
    logs_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        self.root_dir = _as_path("root_dir", self.root_dir)
        if self.versioning_dir is None:
            self.versioning_dir = self.root_dir / VERSIONING_SUBDIR
        else:
            # relative paths are taken from the install root
            self.versioning_dir = self.root_dir / _as_path("versioning_dir", self.versioning_dir)
        if self.logs_dir is not None:
            self.logs_dir = _as_path("logs_dir", self.logs_dir)
        self.product_name = _as_text("product_name", self.product_name) or DEFAULT_PRODUCT
        self.excluded_dir = _as_text("excluded_dir", self.excluded_dir) or None
        self.hide_rc = _as_text("hide_rc", self.hide_rc) or None

    @property
    def base_file(self) -> Path:
        return self.versioning_dir / "base.txt"

    @property
    def release_file(self) -> Path:
        return self.versioning_dir / "release.txt"

    @property
    def candidate_file(self) -> Path:
        return self.versioning_dir / "candidate.txt"


def load_config(path: str) -> Dict[str, Any]:
    """Load YAML configuration and create the log directory if one is set."""
    cfg_path = Path(path)
    if not cfg_path.is_file():
        raise ConfigError(f"config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        try:
            cfg = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"could not parse {cfg_path}: {e}") from e

    if cfg is None:
        cfg = {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"{cfg_path} must contain a mapping, got {type(cfg).__name__}")

    logs_dir = cfg.get("logs_dir")
    if logs_dir:
        _as_path("logs_dir", logs_dir).mkdir(parents=True, exist_ok=True)
    return cfg


def guess_root_dir() -> Path:
    """Install root assumed when neither the caller nor the environment names one."""
    # src/fix_pipeline/config.py -> repository root
    return Path(__file__).resolve().parents[2]


def build_config(
    root_dir: Optional[str] = None,
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> VersionConfig:
    """Layer defaults, YAML file, environment and explicit arguments.

    Later layers win. ``overrides`` whose value is None are ignored so that
    unset command-line options do not mask the file or environment.
    """
    env = os.environ if environ is None else environ
    known = {f.name for f in fields(VersionConfig)}

    values: Dict[str, Any] = {}
    if config_path:
        for key, value in load_config(config_path).items():
            if key not in known:
                raise ConfigError(f"unknown option '{key}' in {config_path}")
            values[key] = value

    if env.get(ROOT_ENV):
        values["root_dir"] = env[ROOT_ENV]
    if HIDE_RC_ENV in env:
        values["hide_rc"] = env[HIDE_RC_ENV]

    if root_dir is not None:
        values["root_dir"] = root_dir
    for key, value in overrides.items():
        if key not in known:
            raise TypeError(f"unknown config option: {key}")
        if value is not None:
            values[key] = value

    if not values.get("root_dir"):
        values["root_dir"] = guess_root_dir()
    return VersionConfig(**values)
