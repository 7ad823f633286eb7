"""Schemas of the JSON files written to the dist directory."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel


class Example(BaseModel):
    """One dual-language example, both variants already highlighted."""

    javascript: str
    typescript: str


class DocumentPayload(BaseModel):
    html: str
    examples: List[Example] = []


class SubsectionEntry(BaseModel):
    headers: Dict[str, str] = {}
    slug: str
    url: str


class SectionEntry(BaseModel):
    name: str
    slug: str
    description: str = ""
    subsections: List[SubsectionEntry] = []


class Manifest(BaseModel):
    sections: List[SectionEntry] = []
