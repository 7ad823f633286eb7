"""Deploy the build output to the static host.

The site is served from a ``gh-pages`` branch holding only the contents of the
dist directory: the dist tree is committed on the working branch, split into
its own history with ``git subtree split`` and force-pushed.
"""

from __future__ import annotations

import subprocess
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .config import BuildConfig
from .errors import PublishError

COMMIT_TEMPLATE = "Distribution {stamp}"


def _git(args: List[str], *, cwd: Path) -> str:
    cmd = ["git", *args]
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), capture_output=True, text=True, check=False)
    except OSError as exc:
        raise PublishError(f"Could not run {' '.join(cmd)}: {exc}") from exc
    if proc.returncode != 0:
        detail = (proc.stderr or proc.stdout or "").strip()
        raise PublishError(f"{' '.join(cmd)} failed with exit code {proc.returncode}: {detail}")
    return proc.stdout.strip()


def repo_root(path: Path) -> Path:
    return Path(_git(["rev-parse", "--show-toplevel"], cwd=path))


def _dist_prefix(config: BuildConfig, root: Path) -> str:
    try:
        return config.dist_dir.resolve().relative_to(root.resolve()).as_posix()
    except ValueError as exc:
        raise PublishError(f"Dist directory {config.dist_dir} is not inside the repository {root}.") from exc


def commit_dist(config: BuildConfig, *, now: Optional[datetime] = None) -> str:
    """Commit the dist directory; returns the commit message used."""
    root = repo_root(config.dist_dir.parent)
    prefix = _dist_prefix(config, root)
    stamp = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    message = COMMIT_TEMPLATE.format(stamp=stamp)

    _git(["add", prefix], cwd=root)
    _git(["commit", "-m", message], cwd=root)
    return message


def push_dist(config: BuildConfig) -> str:
    """Force-push the dist subtree to the publish branch; returns the split commit."""
    root = repo_root(config.dist_dir.parent)
    prefix = _dist_prefix(config, root)

    split = _git(["subtree", "split", "--prefix", prefix], cwd=root)
    if not split:
        raise PublishError(f"git subtree split returned no commit for prefix {prefix!r}.")
    _git(["push", "--force", config.publish_remote, f"{split}:{config.publish_branch}"], cwd=root)
    return split
