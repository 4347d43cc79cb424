import logging
from typing import Dict, Iterable, List, Optional, Tuple, Type

from conversion.builder_base import BaseElementBuilder, ElementBuilderRegistry
from conversion.image_builder import ImageBuilder
from conversion.numbering_builder import NumberingBuilder
from conversion.paragraph_builder import ParagraphBuilder
from conversion.table_builder import TableBuilder
from models import DocumentElement, ElementKind, NumberingEntry, NumberingParagraph

logger = logging.getLogger(__name__)


def register_default_builders() -> None:
    ElementBuilderRegistry.register(ElementKind.PARAGRAPH, ParagraphBuilder)
    ElementBuilderRegistry.register(ElementKind.NUMBERING, NumberingBuilder)
    ElementBuilderRegistry.register(ElementKind.TABLE, TableBuilder)
    ElementBuilderRegistry.register(ElementKind.IMAGE, ImageBuilder)


register_default_builders()


class ElementDispatcher:
    """Routes each document element to the builder registered for its kind.

    Consecutive numbering paragraphs are collected into one list run and
    rendered together, so nesting survives across paragraphs. Elements that
    have no builder, or whose builder fails, are skipped: the rest of the
    document is still rendered.
    """

    def __init__(self, builders: Optional[Dict[ElementKind, BaseElementBuilder]] = None):
        self._builders: Dict[ElementKind, BaseElementBuilder] = dict(builders or {})
        self.skipped = 0

    def _builder_for(self, kind) -> Optional[BaseElementBuilder]:
        try:
            kind = ElementKind(kind)
        except ValueError:
            return None
        if kind not in self._builders:
            builder_cls: Optional[Type[BaseElementBuilder]] = ElementBuilderRegistry.get(kind)
            if builder_cls is None:
                return None
            self._builders[kind] = builder_cls()
        return self._builders[kind]

    def _flush_list(self, pending: List[Tuple[int, NumberingParagraph]], out: List[str]) -> None:
        if not pending:
            return
        builder = self._builder_for(ElementKind.NUMBERING)
        if builder is None:
            self.skipped += len(pending)
            logger.warning("Skipping list run of %d entries, no numbering builder registered", len(pending))
            pending.clear()
            return

        entries: List[NumberingEntry] = []
        for index, element in pending:
            try:
                entries.append(builder.to_entry(element))
            except Exception:
                self.skipped += 1
                logger.warning("Skipping malformed list entry #%d", index, exc_info=True)
        pending.clear()
        if entries:
            out.append(builder.build_entries(entries))

    def dispatch(self, elements: Iterable[DocumentElement]) -> List[str]:
        out: List[str] = []
        pending: List[Tuple[int, NumberingParagraph]] = []
        for index, element in enumerate(elements):
            kind = getattr(element, "kind", None)
            if kind == ElementKind.NUMBERING:
                pending.append((index, element))
                continue
            self._flush_list(pending, out)

            builder = self._builder_for(kind)
            if builder is None:
                self.skipped += 1
                logger.warning("Skipping unsupported element #%d (%s)", index, type(element).__name__)
                continue
            try:
                out.append(builder.build(element))
            except Exception:
                self.skipped += 1
                logger.warning("Skipping malformed %s element #%d", kind, index, exc_info=True)
        self._flush_list(pending, out)
        logger.debug("Rendered %d fragments (%d elements skipped)", len(out), self.skipped)
        return out


def render_elements(elements: Iterable[DocumentElement]) -> List[str]:
    return ElementDispatcher().dispatch(elements)
