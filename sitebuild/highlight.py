"""Syntax highlighting for documentation code samples.

The documented framework is written in JavaScript/TypeScript with JSX and
decorators, so samples are lexed with a TypeScript grammar extended with the
framework's keyword list, class-name heuristics and ``@annotation`` rules.
Output uses Prism-style ``token <kind>`` CSS classes so the site's existing
stylesheet applies unchanged.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from pygments import highlight as pygments_highlight
from pygments import token as T
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer, bygroups, inherit, words
from pygments.lexers.html import HtmlLexer
from pygments.lexers.javascript import TypeScriptLexer
from pygments.lexers.shell import BashLexer

from .errors import HighlightError

KEYWORDS = (
    "any",
    "as",
    "async",
    "await",
    "boolean",
    "break",
    "case",
    "catch",
    "class",
    "const",
    "constructor",
    "continue",
    "debugger",
    "declare",
    "default",
    "delete",
    "do",
    "else",
    "end",
    "enum",
    "export",
    "extends",
    "finally",
    "for",
    "from",
    "function",
    "get",
    "if",
    "implements",
    "import",
    "in",
    "instanceof",
    "interface",
    "let",
    "module",
    "namespace",
    "new",
    "null",
    "number",
    "of",
    "package",
    "private",
    "protected",
    "public",
    "readonly",
    "require",
    "return",
    "set",
    "static",
    "string",
    "super",
    "switch",
    "symbol",
    "this",
    "throw",
    "try",
    "type",
    "typeof",
    "var",
    "void",
    "while",
    "with",
    "yield",
)

_CLASS_CONTEXT_KEYWORDS = (
    "class",
    "interface",
    "type",
    "implements",
    "extends",
    "instanceof",
    "new",
    "import",
)


class TweedLexer(TypeScriptLexer):
    """TypeScript grammar with the framework's keywords, classes and annotations."""

    name = "Tweed"
    aliases = ["tweed"]
    filenames = []

    tokens = {
        "root": [
            (r"@[\w.]+", T.Name.Decorator),
            (
                r"\b(%s)(\s+)([A-Z]\w*)" % "|".join(_CLASS_CONTEXT_KEYWORDS),
                bygroups(T.Keyword, T.Whitespace, T.Name.Class),
            ),
            (r"([:<{,])(\s*)([A-Z]\w*)", bygroups(T.Punctuation, T.Whitespace, T.Name.Class)),
            (r"\b[A-Z]\w*(?=\s*\()", T.Name.Class),
            (words(KEYWORDS, prefix=r"\b", suffix=r"\b"), T.Keyword, "slashstartsregex"),
            inherit,
        ],
    }


# Most specific types first; lookups walk up the token hierarchy.
_TOKEN_CLASSES = {
    T.Comment: "comment",
    T.Keyword: "keyword",
    T.Literal.String.Regex: "regex",
    T.Literal.String: "string",
    T.Literal.Number: "number",
    T.Name.Class: "class-name",
    T.Name.Decorator: "annotation",
    T.Name.Function: "function",
    T.Name.Builtin: "builtin",
    T.Name.Tag: "tag",
    T.Name.Attribute: "attr-name",
    T.Name.Variable: "variable",
    T.Operator: "operator",
    T.Punctuation: "punctuation",
}


def token_class(ttype) -> str:
    """Map a Pygments token type to its Prism class name ('' for plain text)."""
    while ttype:
        if ttype in _TOKEN_CLASSES:
            return _TOKEN_CLASSES[ttype]
        ttype = ttype.parent
    return ""


class TokenHtmlFormatter(HtmlFormatter):
    """HtmlFormatter that emits ``token <kind>`` classes instead of Pygments short names."""

    def _get_css_class(self, ttype):
        kind = token_class(ttype)
        return f"token {kind}" if kind else ""


_FORMATTER = TokenHtmlFormatter(nowrap=True)

_LEXERS: Dict[Optional[str], Callable[[], Lexer]] = {
    None: lambda: TweedLexer(ensurenl=False),
    "javascript": lambda: TweedLexer(ensurenl=False),
    "typescript": lambda: TweedLexer(ensurenl=False),
    "shell": lambda: BashLexer(ensurenl=False),
    "html": lambda: HtmlLexer(ensurenl=False),
}


def supported_languages() -> list[str]:
    return sorted(name for name in _LEXERS if name)


def highlight(code: str, language: Optional[str] = None) -> str:
    """Return highlighted HTML for ``code``.

    Raises :class:`HighlightError` for a language outside the recognized set;
    unknown fences are never passed through unhighlighted.
    """
    factory = _LEXERS.get(language or None)
    if factory is None:
        raise HighlightError(f"Cannot highlight {language}")
    return pygments_highlight(code, factory(), _FORMATTER)


def code_block(code: str, language: Optional[str] = None) -> str:
    return f"<pre><code>{highlight(code, language)}</code></pre>"


def code_span(code: str) -> str:
    return f"<code>{highlight(code)}</code>"
