from __future__ import annotations

from models import ElementKind, Paragraph
from utils import paragraph_style_attr, runs_to_html
from .builder_base import BaseElementBuilder


class ParagraphBuilder(BaseElementBuilder):
    kind = ElementKind.PARAGRAPH

    def build(self, element: Paragraph) -> str:
        return f"<p{paragraph_style_attr(element)}>{runs_to_html(element.runs)}</p>"
