from __future__ import annotations

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositoryState:
    commit: str
    short_commit: str
    modified: bool


class RepositoryMetadataProvider(ABC):
    """Source of commit and dirty-state information for an install root."""

    @abstractmethod
    def state(self, root: Path, excluded_dir: Optional[str] = None) -> Optional[RepositoryState]:
        """Return the checkout state, or None when no metadata is available."""


class StaticMetadataProvider(RepositoryMetadataProvider):
    def __init__(self, state: Optional[RepositoryState] = None) -> None:
        self._state = state

    def state(self, root: Path, excluded_dir: Optional[str] = None) -> Optional[RepositoryState]:
        return self._state


class GitMetadataProvider(RepositoryMetadataProvider):
    """Query a git working copy through the ``git`` executable."""

    def __init__(self, git: str = "git", timeout: float = 10.0) -> None:
        self.git = git
        self.timeout = timeout

    def _run(self, root: Path, *args: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            [self.git, *args],
            cwd=str(root),
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )

    def _rev_parse(self, root: Path, *args: str) -> Optional[str]:
        r = self._run(root, "rev-parse", *args, "HEAD")
        out = (r.stdout or "").strip()
        if r.returncode != 0 or not out:
            logger.debug("git rev-parse %s failed in %s: %s", " ".join(args), root, (r.stderr or "").strip())
            return None
        return out

    def is_modified(self, root: Path, excluded_dir: Optional[str] = None) -> Optional[bool]:
        """Compare tracked files against HEAD; None if git could not tell."""
        # stat-only changes would otherwise show up in diff-index
        self._run(root, "update-index", "-q", "--refresh")
        pathspec: List[str] = ["."]
        if excluded_dir:
            pathspec.append(f":(exclude){excluded_dir}")
        r = self._run(root, "diff-index", "--quiet", "HEAD", "--", *pathspec)
        if r.returncode == 0:
            return False
        if r.returncode == 1:
            return True
        logger.debug("git diff-index failed in %s: %s", root, (r.stderr or "").strip())
        return None

    def state(self, root: Path, excluded_dir: Optional[str] = None) -> Optional[RepositoryState]:
        root = Path(root)
        if not (root / ".git").exists():
            logger.debug("%s is not a git checkout", root)
            return None
        if shutil.which(self.git) is None:
            logger.debug("%s not found on PATH", self.git)
            return None

        try:
            commit = self._rev_parse(root)
            short_commit = self._rev_parse(root, "--short")
            if commit is None or short_commit is None:
                return None
            modified = self.is_modified(root, excluded_dir)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("Could not query git in %s: %s", root, e)
            return None

        if modified is None:
            return None
        return RepositoryState(commit=commit, short_commit=short_commit, modified=modified)
