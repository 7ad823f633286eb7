"""Build the documentation site: table of contents -> JSON fragments + manifest.

Source layout::

    docs/
      _index.yaml            # sections: [getting-started, components, ...]
      getting-started/
        _index.yaml          # section: Name, description: ..., subsections: [...]
        installation.md
        ...

Output layout::

    dist/
      manifest.json
      getting-started/
        installation.json    # {"html": ..., "examples": [...]}
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .config import BuildConfig
from .errors import BuildError, ManifestError
from .models import DocumentPayload, Manifest, SectionEntry, SubsectionEntry
from .parser import parse_document
from .writer import write_document, write_manifest

INDEX_NAME = "_index.yaml"
MANIFEST_NAME = "manifest.json"


@dataclass(frozen=True)
class SectionIndex:
    name: str
    description: str
    subsections: List[str]


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as exc:
        raise ManifestError(f"Index file not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise ManifestError(f"{path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise ManifestError(f"Failed to read index file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ManifestError(f"Malformed YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ManifestError(f"Index file {path} must be a mapping, got {type(data).__name__}.")
    return data


def _id_list(data: Dict[str, Any], key: str, path: Path) -> List[str]:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) and v.strip() for v in value):
        raise ManifestError(f"`{key}` in {path} must be a list of identifiers.")
    return [v.strip() for v in value]


def load_table_of_contents(docs_dir: Path) -> List[str]:
    """Return the section ids declared in ``docs_dir/_index.yaml``, in order."""
    path = docs_dir / INDEX_NAME
    return _id_list(_load_yaml(path), "sections", path)


def load_section_index(section_dir: Path) -> SectionIndex:
    path = section_dir / INDEX_NAME
    data = _load_yaml(path)
    name = data.get("section")
    if not name:
        raise ManifestError(f"`section` name missing in {path}.")
    return SectionIndex(
        name=str(name),
        description=str(data.get("description") or "").strip(),
        subsections=_id_list(data, "subsections", path),
    )


def document_url(dist_file: Path, config: BuildConfig) -> str:
    """Public URL of a file under the dist directory."""
    rel = Path(dist_file).relative_to(config.dist_dir)
    return f"{config.base_url}/{rel.as_posix()}"


def _log(config: BuildConfig, message: str) -> None:
    if not config.quiet:
        print(message)


def build_section(slug: str, config: BuildConfig) -> SectionEntry:
    section_docs = config.docs_dir / slug
    section_dist = config.dist_dir / slug
    index = load_section_index(section_docs)

    section_dist.mkdir(parents=True, exist_ok=True)
    entry = SectionEntry(name=index.name, slug=slug, description=index.description)

    for subsection in index.subsections:
        src_file = section_docs / f"{subsection}.md"
        dist_file = section_dist / f"{subsection}.json"

        try:
            parsed = parse_document(src_file)
        except FileNotFoundError as exc:
            raise ManifestError(f"Document not found: {src_file}") from exc
        except UnicodeDecodeError as exc:
            raise ManifestError(f"{src_file} is not valid UTF-8: {exc}") from exc
        except BuildError as exc:
            raise type(exc)(f"{src_file}: {exc}") from exc

        write_document(
            dist_file,
            DocumentPayload(html=parsed.html, examples=parsed.examples),
            indent=config.json_indent,
        )
        _log(config, f"Wrote {dist_file}")

        entry.subsections.append(
            SubsectionEntry(
                headers=parsed.headers,
                slug=subsection,
                url=document_url(dist_file, config),
            )
        )

    return entry


def build_site(config: BuildConfig) -> Manifest:
    """Compile every declared document and write the manifest."""
    config = config.resolved()
    _log(config, f"Building docs from {config.docs_dir}...")
    config.dist_dir.mkdir(parents=True, exist_ok=True)

    manifest = Manifest()
    for section in load_table_of_contents(config.docs_dir):
        manifest.sections.append(build_section(section, config))

    manifest_file = config.dist_dir / MANIFEST_NAME
    write_manifest(manifest_file, manifest, indent=config.json_indent)
    _log(config, f"Manifest with {len(manifest.sections)} sections saved to {manifest_file}")
    return manifest
