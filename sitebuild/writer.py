"""JSON output for the dist directory."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from .models import DocumentPayload, Manifest


def to_json(model: BaseModel, *, indent: int = 2) -> str:
    # Field order of the models is the key order of the files.
    return json.dumps(model.model_dump(), indent=indent, ensure_ascii=False)


def _write_json(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")


def write_document(path: Path, document: DocumentPayload, *, indent: int = 2) -> None:
    _write_json(path, to_json(document, indent=indent))


def write_manifest(path: Path, manifest: Manifest, *, indent: int = 2) -> str:
    """Write the manifest and return the serialized JSON."""
    payload = to_json(manifest, indent=indent)
    _write_json(path, payload)
    return payload


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))
