"""Pre-fills a documentation unit's core data from harvested document metadata.

Only fields that are still blank on the record are written. The new core data
is computed completely in memory and then stored with a single save call, so
a run either persists all accepted values or none.
"""
import copy
import logging
from typing import List, Optional

from court_resolver import CourtResolver, candidate_from_metadata
from errors import PersistenceError
from lookups import CourtLookup, DocumentTypeLookup
from models import CoreData, Court, DocumentationUnit, HarvestResult, LegalEffect, MetadataProperty, Procedure
from record_store import RecordStore
from utils import parse_decision_date

logger = logging.getLogger(__name__)

# court types whose decisions are legally effective by default
AUTO_YES_COURT_TYPES = frozenset({"BGH", "BVerwG", "BFH", "BVerfG", "BAG", "BSG"})


def _blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def select_ecli(explicit: Optional[str], footer_candidates: List[str]) -> Optional[str]:
    """An explicit ECLI property always wins; footer candidates only count when unique."""
    if explicit:
        return explicit
    if len(footer_candidates) == 1:
        return footer_candidates[0]
    if footer_candidates:
        logger.info("ECLI left unset, footer holds %d candidates", len(footer_candidates))
    return None


def derive_legal_effect(current: Optional[str], harvested: Optional[str], court: Optional[Court], court_changed: bool) -> Optional[str]:
    """Legal effect after this run, given the record's value before the merge.

    A record marked "Keine Angabe" whose court was just resolved to one of
    AUTO_YES_COURT_TYPES becomes "Ja", whatever the document says.
    """
    if (current == LegalEffect.NOT_SPECIFIED.label
            and court_changed
            and court is not None
            and court.type in AUTO_YES_COURT_TYPES):
        return LegalEffect.YES.label
    if harvested is not None:
        effect = LegalEffect.from_label(harvested)
        if effect is None:
            logger.info("Ignoring unknown legal effect %r", harvested)
        else:
            return effect.label
    return current


class CoreDataInitializer:
    def __init__(self, courts: CourtLookup, document_types: DocumentTypeLookup, store: RecordStore):
        self.court_resolver = CourtResolver(courts)
        self.document_types = document_types
        self.store = store

    def merge(self, core_data: CoreData, harvest: HarvestResult) -> CoreData:
        """Returns a new CoreData with every accepted value applied. Does not persist."""
        meta = harvest.metadata
        out = copy.deepcopy(core_data)

        file_number = meta.get(MetadataProperty.FILE_NUMBER)
        if file_number and _blank(out.file_numbers):
            out.file_numbers = [file_number]

        if out.decision_date is None:
            raw_date = meta.get(MetadataProperty.DECISION_DATE)
            out.decision_date = parse_decision_date(raw_date)
            if raw_date and out.decision_date is None:
                logger.info("Decision date %r does not match dd.mm.yyyy, left unset", raw_date)

        court_changed = False
        if out.court is None:
            court = self.court_resolver.resolve(candidate_from_metadata(meta))
            if court is not None:
                out.court = court
                court_changed = True

        appraisal_body = meta.get(MetadataProperty.APPRAISAL_BODY)
        if appraisal_body and _blank(out.appraisal_body):
            out.appraisal_body = appraisal_body

        abbreviation = meta.get(MetadataProperty.DOCUMENT_TYPE)
        if abbreviation and out.document_type is None:
            out.document_type = self.document_types.find_unique_by_abbreviation(abbreviation)
            if out.document_type is None:
                logger.info("Document type %r has no unique match, left unset", abbreviation)

        if _blank(out.ecli):
            ecli = select_ecli(meta.get(MetadataProperty.ECLI), harvest.ecli_candidates)
            if ecli:
                out.ecli = ecli

        procedure = meta.get(MetadataProperty.PROCEDURE)
        if procedure and out.procedure is None:
            out.procedure = Procedure(label=procedure)

        out.legal_effect = derive_legal_effect(
            out.legal_effect, meta.get(MetadataProperty.LEGAL_EFFECT), out.court, court_changed)
        return out

    def initialize(self, record_id: str, harvest: HarvestResult) -> DocumentationUnit:
        unit = self.store.load(record_id)
        unit.core_data = self.merge(unit.core_data, harvest)
        try:
            saved = self.store.save(unit)
        except Exception as exc:
            raise PersistenceError(record_id, str(exc)) from exc
        if not saved:
            raise PersistenceError(record_id)
        logger.info("Initialized core data of %s from document metadata", record_id)
        return unit
