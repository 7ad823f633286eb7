"""Markdown document parsing for the documentation site.

A source document looks like::

    Title: Getting Started
    Order: 1
    # Getting Started

    Some prose with `inline code`.

    ```tweed
    const app = new App()
    ---
    const app: App = new App()
    ```

The leading ``key: value`` lines become the document headers and the rest is
rendered to HTML. Fences tagged ``tweed`` are dual-language examples: they
are pulled out of the HTML into ``examples`` and leave an
``<example-slot></example-slot>`` marker where the client mounts a
JavaScript/TypeScript switcher.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

import markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import BACKTICK_RE, BacktickInlineProcessor
from markdown.postprocessors import Postprocessor
from markdown.preprocessors import Preprocessor

from .errors import ExampleError
from .highlight import code_block, code_span
from .models import Example

EXAMPLE_LANGUAGE = "tweed"
EXAMPLE_SLOT = "<example-slot></example-slot>"

_HEADER_LINE_RE = re.compile(r"^(\w+):[ \t]*(\S.*?)\s*$")

# Fences may be indented by up to three spaces, e.g. inside list items.
_FENCE_RE = re.compile(
    r"^(?P<indent>[ ]{0,3})(?P<fence>~{3,}|`{3,})[ ]*(?P<lang>[\w#.+-]*)[ ]*\n"
    r"(?P<code>.*?)(?<=\n)"
    r"[ ]{0,3}(?P=fence)[ ]*$",
    re.MULTILINE | re.DOTALL,
)

_EXAMPLE_SEPARATOR_RE = re.compile(r"^[ \t]*---[ \t]*$", re.MULTILINE)


@dataclass
class CompiledMarkdown:
    html: str
    examples: List[Example] = field(default_factory=list)


@dataclass
class ParsedDocument:
    headers: Dict[str, str]
    html: str
    examples: List[Example] = field(default_factory=list)


def split_front_matter(text: str) -> Tuple[Dict[str, str], str]:
    """Split ``text`` into its leading ``key: value`` headers and the Markdown body.

    Keys are lowercased; a value keeps any colons after the first one.
    """
    headers: Dict[str, str] = {}
    offset = 0
    for line in text.splitlines(keepends=True):
        if not line.endswith("\n"):
            break
        m = _HEADER_LINE_RE.match(line)
        if not m:
            break
        headers[m.group(1).lower()] = m.group(2)
        offset += len(line)
    return headers, text[offset:]


def split_example(code: str) -> Tuple[str, str]:
    """Split a dual-language example into its untyped and typed variants."""
    parts = _EXAMPLE_SEPARATOR_RE.split(code)
    if len(parts) != 2:
        raise ExampleError(
            f"A `{EXAMPLE_LANGUAGE}` example needs exactly one `---` separator "
            f"(found {len(parts) - 1})."
        )
    untyped, typed = (p.lstrip("\n").rstrip() for p in parts)
    return untyped, typed


def _dedent(code: str, width: int) -> str:
    if not width:
        return code
    return re.sub(r"^[ ]{0,%d}" % width, "", code, flags=re.MULTILINE)


def _unescape_code(text: str) -> str:
    # Inverse of markdown.util.code_escape.
    return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


class _FencePreprocessor(Preprocessor):
    """Render fenced code blocks, diverting dual-language examples."""

    def __init__(self, md, examples: List[Example]):
        super().__init__(md)
        self.examples = examples

    def _render(self, lang: str | None, code: str) -> str:
        if lang == EXAMPLE_LANGUAGE:
            untyped, typed = split_example(code)
            self.examples.append(
                Example(
                    javascript=code_block(untyped, "javascript"),
                    typescript=code_block(typed, "typescript"),
                )
            )
            return EXAMPLE_SLOT
        return code_block(code.rstrip(), lang)

    def run(self, lines):
        text = "\n".join(lines)
        while True:
            m = _FENCE_RE.search(text)
            if not m:
                break
            indent = m.group("indent")
            code = _dedent(m.group("code"), len(indent))
            placeholder = self.md.htmlStash.store(self._render(m.group("lang") or None, code))
            # Keep the indent so the placeholder lines up with the surrounding block.
            text = f"{text[:m.start()]}\n\n{indent}{placeholder}\n\n{text[m.end():]}"
        return text.split("\n")


class _CodeSpanProcessor(BacktickInlineProcessor):
    """Backtick code spans highlighted with the default grammar."""

    def __init__(self, pattern, md):
        super().__init__(pattern)
        self.md = md

    def handleMatch(self, m, data):
        el, start, end = super().handleMatch(m, data)
        if getattr(el, "tag", None) == "code":
            placeholder = self.md.htmlStash.store(code_span(_unescape_code(el.text or "")))
            return placeholder, start, end
        return el, start, end


class _ExampleSlotPostprocessor(Postprocessor):
    # The slot is a custom element, so Markdown wraps it in a paragraph.
    def run(self, text):
        return text.replace(f"<p>{EXAMPLE_SLOT}</p>", EXAMPLE_SLOT)


class DocsExtension(Extension):
    """Python-Markdown extension wiring the fence, code span and slot handlers."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.examples: List[Example] = []

    def extendMarkdown(self, md):
        md.registerExtension(self)
        md.preprocessors.register(_FencePreprocessor(md, self.examples), "docs_fences", 25)
        md.inlinePatterns.register(_CodeSpanProcessor(BACKTICK_RE, md), "backtick", 190)
        md.postprocessors.register(_ExampleSlotPostprocessor(md), "example_slot", 25)

    def reset(self):
        self.examples.clear()


def compile_markdown(source: str) -> CompiledMarkdown:
    """Render Markdown to HTML, collecting dual-language examples in document order."""
    ext = DocsExtension()
    md = markdown.Markdown(extensions=["tables", "toc", ext])
    html = md.convert(source)
    return CompiledMarkdown(html=html, examples=list(ext.examples))


def parse_document(path: Path) -> ParsedDocument:
    text = Path(path).read_text(encoding="utf-8")
    headers, body = split_front_matter(text)
    compiled = compile_markdown(body)
    return ParsedDocument(headers=headers, html=compiled.html, examples=compiled.examples)
