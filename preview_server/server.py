"""FastAPI preview server for the compiled documentation site.

Serves the dist directory with the same paths the static host exposes
(``/manifest.json`` and ``/<section>/<subsection>.json``) so the client-side
site can be pointed at a local build while writing docs. ``POST /v1/rebuild``
recompiles the sources and returns the fresh manifest.

The dist directory comes from the build configuration
(``TWEED_DOCS_DIST_DIR``, the ``tweed-docs.yaml`` file, or ``./dist``).
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import ValidationError

from sitebuild.config import BuildConfig, load_config
from sitebuild.errors import BuildError
from sitebuild.manifest import MANIFEST_NAME, build_site
from sitebuild.models import DocumentPayload, Manifest
from sitebuild.writer import read_json

app = FastAPI(title="Tweed Docs Preview Server")

_SLUG_RE = re.compile(r"^[A-Za-z0-9_-]+$")


@lru_cache()
def get_config() -> BuildConfig:
    """Build configuration used by the server (cached)."""
    return load_config()


def _load(path: Path) -> Any:
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"{path.name} has not been built.")
    try:
        return read_json(path)
    except (OSError, ValueError) as exc:
        raise HTTPException(status_code=500, detail=f"Could not read {path.name}: {exc}")


@app.get("/manifest.json", response_model=Manifest)
def manifest() -> Manifest:
    data = _load(get_config().dist_dir / MANIFEST_NAME)
    try:
        return Manifest.model_validate(data)
    except ValidationError as exc:
        raise HTTPException(status_code=500, detail=f"Invalid manifest: {exc}")


@app.get("/{section}/{subsection}.json", response_model=DocumentPayload)
def document(section: str, subsection: str) -> DocumentPayload:
    if not (_SLUG_RE.match(section) and _SLUG_RE.match(subsection)):
        raise HTTPException(status_code=404, detail="Unknown document.")

    data = _load(get_config().dist_dir / section / f"{subsection}.json")
    try:
        return DocumentPayload.model_validate(data)
    except ValidationError as exc:
        raise HTTPException(status_code=500, detail=f"Invalid document: {exc}")


@app.post("/v1/rebuild", response_model=Manifest)
def rebuild() -> Manifest:
    """Recompile the docs tree and return the new manifest."""
    try:
        return build_site(get_config())
    except BuildError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
