import os
import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parent.parent

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sitebuild.config import BuildConfig  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for name in list(os.environ):
        if name.startswith("TWEED_DOCS_"):
            monkeypatch.delenv(name, raising=False)
    # Never pick up a tweed-docs.yaml from the directory the tests run in.
    monkeypatch.chdir(tmp_path)


def write_docs_tree(root: Path) -> Path:
    """Write a small docs tree whose declared order is deliberately unsorted."""
    docs = root / "docs"
    (docs / "zeta").mkdir(parents=True)
    (docs / "alpha").mkdir(parents=True)

    (docs / "_index.yaml").write_text("sections:\n  - zeta\n  - alpha\n", encoding="utf-8")

    (docs / "zeta" / "_index.yaml").write_text(
        "section: Zeta Section\n"
        "description: |\n"
        "  Last letter, first section.\n"
        "\n"
        "subsections:\n"
        "  - second\n"
        "  - first\n",
        encoding="utf-8",
    )
    (docs / "zeta" / "second.md").write_text(
        "Title: Second: The Sequel\n"
        "Order: 2\n"
        "# Second\n"
        "\n"
        "Create an app with `new App()`.\n"
        "\n"
        "```tweed\n"
        "const app = new App()\n"
        "---\n"
        "const app: App = new App()\n"
        "```\n",
        encoding="utf-8",
    )
    (docs / "zeta" / "first.md").write_text(
        "Title: First\n"
        "# First\n"
        "\n"
        "```shell\n"
        "npm install tweed\n"
        "```\n",
        encoding="utf-8",
    )

    (docs / "alpha" / "_index.yaml").write_text(
        "section: Alpha Section\ndescription: Plain.\nsubsections:\n  - only\n",
        encoding="utf-8",
    )
    (docs / "alpha" / "only.md").write_text("Just prose, no code.\n", encoding="utf-8")
    return docs


@pytest.fixture
def docs_tree(tmp_path) -> Path:
    return write_docs_tree(tmp_path)


@pytest.fixture
def build_config(tmp_path, docs_tree) -> BuildConfig:
    return BuildConfig(
        docs_dir=docs_tree,
        dist_dir=tmp_path / "dist",
        base_url="https://example.org/docs/",
        quiet=True,
    ).resolved()
