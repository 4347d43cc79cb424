"""Collects metadata signals from an attached decision document.

Three sources are scanned:
  - body paragraphs written as "<key>: <value>" (e.g. "Aktenzeichen: VII ZR 10/23")
  - the document's custom properties, keyed by the same German names
  - the footer, for ECLI-shaped strings only

Custom properties are read after the body, so they win when both carry the
same key. Nothing is inferred: a key that is not present simply stays absent.
"""
import logging
import re
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from models import HarvestResult, MetadataProperty, NumberingParagraph, Paragraph, ParsedDocument
from utils import dedupe_preserving_order, normalize_whitespace

logger = logging.getLogger(__name__)

ECLI_RE = re.compile(r"ECLI:[A-Z]{2}:[A-Za-z0-9.]{1,7}:\d{4}:[A-Za-z0-9.]{1,25}")
# "Key: value" where key is one of the property names
KEY_VALUE_RE = re.compile(r"^\s*(?P<key>[^:]{1,40}?)\s*:\s*(?P<value>.+?)\s*$")


def _paragraph_texts(elements: Iterable) -> Iterable[str]:
    for el in elements:
        if isinstance(el, (Paragraph, NumberingParagraph)):
            yield el.text


def parse_key_value(text: str) -> Optional[Tuple[MetadataProperty, str]]:
    m = KEY_VALUE_RE.match(normalize_whitespace(text))
    if not m:
        return None
    prop = MetadataProperty.from_key(m.group("key"))
    if prop is None:
        return None
    value = m.group("value").strip()
    return (prop, value) if value else None


def harvest_properties(paragraph_texts: Iterable[str], custom_properties: Mapping[str, str]) -> Dict[MetadataProperty, str]:
    metadata: Dict[MetadataProperty, str] = {}
    for text in paragraph_texts:
        hit = parse_key_value(text)
        if hit:
            metadata[hit[0]] = hit[1]
    for key, raw in (custom_properties or {}).items():
        prop = MetadataProperty.from_key(key)
        if prop is None:
            continue
        value = normalize_whitespace(raw)
        if value:
            metadata[prop] = value
    return metadata


def find_ecli_candidates(footer_text: Optional[str]) -> List[str]:
    """All distinct ECLI strings in the footer, in order of first appearance."""
    if not footer_text:
        return []
    return dedupe_preserving_order(m.group(0).rstrip(".") for m in ECLI_RE.finditer(footer_text))


class MetadataHarvester:
    def harvest(self, document: ParsedDocument) -> HarvestResult:
        metadata = harvest_properties(_paragraph_texts(document.elements), document.custom_properties)
        eclis = find_ecli_candidates(document.footer_text)
        logger.info(
            "Harvested %d metadata properties and %d ECLI candidates from %s",
            len(metadata), len(eclis), document.source_name or "document")
        return HarvestResult(metadata=metadata, ecli_candidates=eclis)
