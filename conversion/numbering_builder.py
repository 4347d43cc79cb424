from __future__ import annotations
from typing import Sequence

from list_assembler import assemble_list
from models import ElementKind, NumberingEntry, NumberingParagraph
from utils import parse_level, runs_to_html
from .builder_base import BaseElementBuilder


class NumberingBuilder(BaseElementBuilder):
    """Numbering paragraphs are rendered per run, see build_entries."""

    kind = ElementKind.NUMBERING

    def to_entry(self, element: NumberingParagraph) -> NumberingEntry:
        return NumberingEntry(
            level=parse_level(element.level),
            format=element.format,
            content_html=runs_to_html(element.paragraph.runs),
        )

    def build_entries(self, entries: Sequence[NumberingEntry]) -> str:
        return assemble_list(entries)

    def build(self, element: NumberingParagraph) -> str:
        return self.build_entries([self.to_entry(element)])
