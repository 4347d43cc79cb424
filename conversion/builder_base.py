from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

from models import DocumentElement, ElementKind


class BaseElementBuilder(ABC):
    """Renders one kind of document element to an HTML fragment."""

    kind: ElementKind

    @abstractmethod
    def build(self, element: DocumentElement) -> str:
        ...

    @property
    def name(self) -> str:
        return self.__class__.__name__


class ElementBuilderRegistry:
    _registry: Dict[ElementKind, Type[BaseElementBuilder]] = {}

    @classmethod
    def register(cls, kind: ElementKind, builder_cls: Type[BaseElementBuilder]):
        cls._registry[ElementKind(kind)] = builder_cls

    @classmethod
    def get(cls, kind) -> Optional[Type[BaseElementBuilder]]:
        try:
            return cls._registry.get(ElementKind(kind))
        except ValueError:
            return None

    @classmethod
    def available_kinds(cls) -> List[ElementKind]:
        return list(cls._registry.keys())
