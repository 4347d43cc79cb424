from __future__ import annotations
from typing import List

from models import ElementKind, Paragraph, Table
from .builder_base import BaseElementBuilder
from .paragraph_builder import ParagraphBuilder


class TableBuilder(BaseElementBuilder):
    kind = ElementKind.TABLE

    def __init__(self):
        self._paragraphs = ParagraphBuilder()

    def _cell(self, paragraphs: List[Paragraph]) -> str:
        inner = "".join(self._paragraphs.build(p) for p in paragraphs)
        return f"<td>{inner}</td>"

    def build(self, element: Table) -> str:
        rows = []
        for row in element.rows:
            rows.append("<tr>" + "".join(self._cell(c) for c in row) + "</tr>")
        return "<table>" + "".join(rows) + "</table>"
