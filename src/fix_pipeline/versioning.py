from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .config import VersionConfig
from .errors import ConfigError, ConsistencyError
from .repository import GitMetadataProvider, RepositoryMetadataProvider, RepositoryState

logger = logging.getLogger(__name__)

RELEASE = "release"
CANDIDATE = "candidate"
DEVELOPMENT = "development"

REPORT_RULE = "=" * 40


@dataclass
class VersionInfo:
    directory: str
    product: str
    base: str
    state: str
    display: str
    commit: Optional[str] = None
    short_commit: Optional[str] = None
    modified: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _read_marker(path: Path) -> Optional[str]:
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"could not read {path}: {e}") from e


def read_base_version(cfg: VersionConfig) -> str:
    """Read the required base version token."""
    base = _read_marker(cfg.base_file)
    if base is None:
        raise ConfigError(f"base version file not found: {cfg.base_file}")
    if not base:
        raise ConfigError(f"base version file is empty: {cfg.base_file}")
    return base


def resolve_state(cfg: VersionConfig, base: str) -> str:
    """Check marker files against the base version and classify the install."""
    release = _read_marker(cfg.release_file)
    candidate = _read_marker(cfg.candidate_file)

    if release is not None and release != base:
        raise ConsistencyError(
            f"{cfg.release_file.name} contains '{release}' but {cfg.base_file.name} contains '{base}'"
        )
    if candidate is not None and candidate != base:
        raise ConsistencyError(
            f"{cfg.candidate_file.name} contains '{candidate}' but {cfg.base_file.name} contains '{base}'"
        )
    if release is not None and candidate is not None:
        raise ConsistencyError(
            f"both {cfg.release_file.name} and {cfg.candidate_file.name} exist in {cfg.versioning_dir}"
        )

    is_release = release is not None
    is_candidate = candidate is not None

    if cfg.hide_rc is not None:
        if cfg.hide_rc != base:
            raise ConsistencyError(f"hide-RC override is set to '{cfg.hide_rc}', but the current version is '{base}'")
        if is_candidate:
            logger.debug("Presenting candidate %s as a release", base)
            is_candidate = False
            is_release = True

    if is_release:
        return RELEASE
    if is_candidate:
        return CANDIDATE
    return DEVELOPMENT


def display_string(base: str, state: str, repo: Optional[RepositoryState] = None) -> str:
    if state == RELEASE:
        out = base
    elif state == CANDIDATE:
        out = f"{base}-rc"
    else:
        out = f"Post-{base}"

    if repo is not None:
        if repo.modified:
            out += "-MOD"
        if state != RELEASE:
            out += f"-{repo.short_commit}"
    return out


def resolve_version(cfg: VersionConfig, provider: Optional[RepositoryMetadataProvider] = None) -> VersionInfo:
    """Resolve the version of the install described by ``cfg``.

    Raises ConfigError when base.txt is missing and ConsistencyError when the
    marker files or the hide-RC override disagree with it. Missing repository
    metadata is not an error; commit fields are then left empty.
    """
    base = read_base_version(cfg)
    state = resolve_state(cfg, base)

    if provider is None:
        provider = GitMetadataProvider()
    repo = provider.state(cfg.root_dir, cfg.excluded_dir)
    if repo is None:
        logger.debug("No repository metadata for %s", cfg.root_dir)

    info = VersionInfo(
        directory=str(cfg.root_dir),
        product=cfg.product_name,
        base=base,
        state=state,
        display=display_string(base, state, repo),
        commit=repo.commit if repo else None,
        short_commit=repo.short_commit if repo else None,
        modified=repo.modified if repo else None,
    )
    logger.debug("Resolved %s as %s (%s)", cfg.root_dir, info.display, state)
    return info


def short_report(info: VersionInfo) -> str:
    return info.display


def extended_report(info: VersionInfo) -> str:
    if info.modified is None:
        modified = "unknown"
    else:
        modified = "YES" if info.modified else "no"
    lines = [
        REPORT_RULE,
        f"  DIRECTORY: {info.directory}",
        f"    PRODUCT: {info.product}",
        f"    VERSION: {info.display}",
        f"     COMMIT: {info.commit or 'unknown'}",
        f"   MODIFIED: {modified}",
        REPORT_RULE,
    ]
    return "\n".join(lines)
