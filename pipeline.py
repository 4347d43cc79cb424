import logging
from typing import Optional, Protocol

from core_data_initializer import CoreDataInitializer
from element_dispatcher import ElementDispatcher
from lookups import CourtLookup, DocumentTypeLookup
from metadata_harvester import MetadataHarvester
from models import ConversionResult, ParsedDocument
from record_store import RecordStore

logger = logging.getLogger(__name__)


class DocumentSource(Protocol):
    def load(self, document_id: str) -> ParsedDocument:
        ...


class ConversionPipeline:
    """Converts an attached document to HTML and pre-fills the record's core data.

    One call handles one attach event and keeps no state between calls. The
    rendered HTML is produced before any metadata work, so ambiguous or
    missing metadata never costs the editor the converted text. Only a
    failed save is fatal; it surfaces as PersistenceError.
    """

    def __init__(self, source: DocumentSource, courts: CourtLookup, document_types: DocumentTypeLookup, store: RecordStore, harvester: Optional[MetadataHarvester] = None):
        self.source = source
        self.harvester = harvester or MetadataHarvester()
        self.initializer = CoreDataInitializer(courts, document_types, store)

    def render(self, document: ParsedDocument):
        return ElementDispatcher().dispatch(document.elements)

    def convert(self, document_id: str, target_record_id: str) -> ConversionResult:
        document = self.source.load(document_id)
        rendered = self.render(document)
        harvest = self.harvester.harvest(document)
        unit = self.initializer.initialize(target_record_id, harvest)
        logger.info("Converted %s into %d HTML fragments for record %s", document_id, len(rendered), target_record_id)
        return ConversionResult(
            document_id=document_id,
            rendered_html=rendered,
            ecli_candidates=list(harvest.ecli_candidates),
            metadata=dict(harvest.metadata),
            core_data=unit.core_data,
        )
