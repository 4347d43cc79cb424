"""Reference tables for courts and document types.

The pipeline only needs read access. Components take a lookup object in
their constructor; the in-memory tables below back both the CLI (loaded from
CSV) and the tests.
"""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Union

import pandas as pd

from models import Court, DocumentType

logger = logging.getLogger(__name__)

COURT_COLUMNS = ["type", "location", "label", "is_superior_court", "is_foreign_court"]
DOCUMENT_TYPE_COLUMNS = ["abbreviation", "label"]


class CourtLookup(Protocol):
    def find_by_type_and_location(self, court_type: Optional[str], location: Optional[str]) -> List[Court]:
        ...

    def find_by_label(self, label: str) -> List[Court]:
        ...


class DocumentTypeLookup(Protocol):
    def find_unique_by_abbreviation(self, abbreviation: str) -> Optional[DocumentType]:
        ...


class InMemoryCourtTable:
    def __init__(self, courts: Iterable[Court]):
        self._courts = tuple(courts)

    def __len__(self):
        return len(self._courts)

    def find_by_type_and_location(self, court_type: Optional[str], location: Optional[str]) -> List[Court]:
        # location None only matches courts that have no location (BGH, BFH, ...)
        return [c for c in self._courts if c.type == court_type and (c.location or None) == (location or None)]

    def find_by_label(self, label: str) -> List[Court]:
        return [c for c in self._courts if c.label == label]


class InMemoryDocumentTypeTable:
    def __init__(self, document_types: Iterable[DocumentType]):
        self._types = tuple(document_types)

    def __len__(self):
        return len(self._types)

    def find_unique_by_abbreviation(self, abbreviation: str) -> Optional[DocumentType]:
        hits = [d for d in self._types if d.abbreviation == abbreviation]
        if len(hits) != 1:
            return None
        return hits[0]


def _cell(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def _flag(value) -> bool:
    text = _cell(value)
    return bool(text) and text.lower() in {"1", "true", "yes", "ja", "x"}


def courts_from_dataframe(df: pd.DataFrame) -> List[Court]:
    cols = {str(c).strip().lower(): c for c in df.columns}
    if "type" not in cols:
        raise ValueError("court table needs at least a 'type' column")
    courts: List[Court] = []
    for _, row in df.iterrows():
        get = lambda name: row[cols[name]] if name in cols else None
        court_type = _cell(get("type"))
        if not court_type:
            continue
        courts.append(Court(
            type=court_type,
            location=_cell(get("location")),
            label=_cell(get("label")),
            is_superior_court=_flag(get("is_superior_court")),
            is_foreign_court=_flag(get("is_foreign_court")),
        ))
    return courts


def document_types_from_dataframe(df: pd.DataFrame) -> List[DocumentType]:
    cols = {str(c).strip().lower(): c for c in df.columns}
    if "abbreviation" not in cols:
        raise ValueError("document type table needs an 'abbreviation' column")
    out: List[DocumentType] = []
    for _, row in df.iterrows():
        abbreviation = _cell(row[cols["abbreviation"]])
        if not abbreviation:
            continue
        label = _cell(row[cols["label"]]) if "label" in cols else None
        out.append(DocumentType(abbreviation=abbreviation, label=label or abbreviation))
    return out


@lru_cache(maxsize=8)
def _load_court_table(path: str) -> InMemoryCourtTable:
    df = pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[""])
    table = InMemoryCourtTable(courts_from_dataframe(df))
    logger.info("Loaded %d courts from %s", len(table), path)
    return table


@lru_cache(maxsize=8)
def _load_document_type_table(path: str) -> InMemoryDocumentTypeTable:
    df = pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[""])
    table = InMemoryDocumentTypeTable(document_types_from_dataframe(df))
    logger.info("Loaded %d document types from %s", len(table), path)
    return table


def load_court_table(path: Union[str, Path]) -> InMemoryCourtTable:
    """Reads a court CSV (type, location, label, is_superior_court, is_foreign_court).

    Tables are cached per path for the life of the process; call
    clear_table_cache() to pick up a refreshed file.
    """
    return _load_court_table(str(Path(path).resolve()))


def load_document_type_table(path: Union[str, Path]) -> InMemoryDocumentTypeTable:
    return _load_document_type_table(str(Path(path).resolve()))


def clear_table_cache() -> None:
    _load_court_table.cache_clear()
    _load_document_type_table.cache_clear()
