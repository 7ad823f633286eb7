"""Exceptions raised while building or publishing the documentation site."""

from __future__ import annotations


class BuildError(RuntimeError):
    """Base class for every failure surfaced by the site compiler."""


class ConfigError(BuildError):
    pass


class ManifestError(BuildError):
    """A table of contents or section index is missing or malformed."""


class HighlightError(BuildError):
    """A code fence uses a language the highlighter does not know."""


class ExampleError(BuildError):
    """A dual-language example is not split into exactly two variants."""


class PublishError(BuildError):
    pass
