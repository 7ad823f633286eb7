"""Build configuration for the documentation compiler.

Settings are resolved in layers, later layers winning:

1. the defaults of :class:`BuildConfig`,
2. an optional YAML file (``TWEED_DOCS_CONFIG``, or ``tweed-docs.yaml`` in
   the working directory),
3. ``TWEED_DOCS_*`` environment variables,
4. explicit overrides passed by the caller (the CLI flags).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

DEFAULT_BASE_URL = "https://tweedjs.github.io/docs"
DEFAULT_CONFIG_NAME = "tweed-docs.yaml"

_CONFIG_ENV_VAR = "TWEED_DOCS_CONFIG"

_PATH_FIELDS = {"docs_dir", "dist_dir"}


@dataclass(frozen=True)
class BuildConfig:
    docs_dir: Path = Path("docs")
    dist_dir: Path = Path("dist")
    base_url: str = DEFAULT_BASE_URL
    json_indent: int = 2

    # `make push` equivalents.
    publish_remote: str = "origin"
    publish_branch: str = "gh-pages"

    quiet: bool = False

    def resolved(self) -> "BuildConfig":
        """Return a copy with absolute source/output directories."""
        return replace(
            self,
            docs_dir=Path(self.docs_dir).expanduser().resolve(),
            dist_dir=Path(self.dist_dir).expanduser().resolve(),
            base_url=self.base_url.rstrip("/"),
        )


def _env_str(name: str) -> Optional[str]:
    raw = (os.environ.get(name) or "").strip()
    return raw or None


def _env_int(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        return int(default)


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.environ.get(name) or "").strip().lower()
    if not raw:
        return bool(default)
    return raw in {"1", "true", "yes", "y", "on"}


def config_path() -> Path:
    return Path(os.environ.get(_CONFIG_ENV_VAR) or DEFAULT_CONFIG_NAME).expanduser()


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(f"Failed to read build config at {path}.") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Build config {path} is not valid UTF-8: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in build config {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Build config {path} must be a mapping, got {type(data).__name__}.")

    # The publish settings may be nested, mirroring the Makefile targets.
    publish = data.pop("publish", None)
    if isinstance(publish, dict):
        for key in ("remote", "branch"):
            if key in publish:
                data[f"publish_{key}"] = publish[key]

    known = {f.name for f in fields(BuildConfig)}
    return {k: v for k, v in data.items() if k in known}


def _env_overrides(base: BuildConfig) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    docs_dir = _env_str("TWEED_DOCS_SOURCE_DIR")
    if docs_dir:
        out["docs_dir"] = docs_dir
    dist_dir = _env_str("TWEED_DOCS_DIST_DIR")
    if dist_dir:
        out["dist_dir"] = dist_dir
    base_url = _env_str("TWEED_DOCS_BASE_URL")
    if base_url:
        out["base_url"] = base_url
    remote = _env_str("TWEED_DOCS_PUBLISH_REMOTE")
    if remote:
        out["publish_remote"] = remote
    branch = _env_str("TWEED_DOCS_PUBLISH_BRANCH")
    if branch:
        out["publish_branch"] = branch
    out["json_indent"] = _env_int("TWEED_DOCS_JSON_INDENT", base.json_indent)
    out["quiet"] = _env_bool("TWEED_DOCS_QUIET", base.quiet)
    return out


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in values.items():
        if key in _PATH_FIELDS:
            out[key] = Path(str(value))
        elif key == "json_indent":
            try:
                out[key] = int(value)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Invalid json_indent value: {value!r}") from exc
        elif key == "quiet":
            out[key] = bool(value)
        else:
            out[key] = str(value)
    return out


def load_config(path: Optional[Path] = None, **overrides: Any) -> BuildConfig:
    """Load the build configuration.

    ``overrides`` with a value of ``None`` are ignored so that unset CLI flags
    do not clobber the file or environment settings. A config file named
    explicitly (``path`` or ``TWEED_DOCS_CONFIG``) must exist; the default
    ``tweed-docs.yaml`` is optional.
    """
    cfg = BuildConfig()

    explicit_path = path is not None or _env_str(_CONFIG_ENV_VAR) is not None
    path = Path(path) if path is not None else config_path()
    if path.exists():
        cfg = replace(cfg, **_coerce(_read_config_file(path)))
    elif explicit_path:
        raise ConfigError(f"Build config not found: {path}")

    cfg = replace(cfg, **_coerce(_env_overrides(cfg)))

    explicit = {k: v for k, v in overrides.items() if v is not None}
    if explicit:
        cfg = replace(cfg, **_coerce(explicit))

    return cfg.resolved()
