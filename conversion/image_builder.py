from __future__ import annotations
import base64
import html

from models import ElementKind, Image
from .builder_base import BaseElementBuilder


class ImageBuilder(BaseElementBuilder):
    kind = ElementKind.IMAGE

    def build(self, element: Image) -> str:
        attrs = []
        if element.data and element.content_type:
            encoded = base64.b64encode(element.data).decode("ascii")
            attrs.append(f'src="data:{element.content_type};base64,{encoded}"')
        alt = element.description or element.name or ""
        attrs.append(f'alt="{html.escape(alt, quote=True)}"')
        return "<img " + " ".join(attrs) + " />"
