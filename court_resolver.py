import logging
from typing import List, Mapping, Optional

from lookups import CourtLookup
from models import Court, CourtCandidate, MetadataProperty

logger = logging.getLogger(__name__)


def candidate_from_metadata(metadata: Mapping[MetadataProperty, str]) -> CourtCandidate:
    return CourtCandidate(
        type=metadata.get(MetadataProperty.COURT_TYPE) or None,
        location=metadata.get(MetadataProperty.COURT_LOCATION) or None,
        label=metadata.get(MetadataProperty.COURT) or None,
    )


def _unique(matches: List[Court]) -> Optional[Court]:
    return matches[0] if len(matches) == 1 else None


class CourtResolver:
    """Resolves a court from type/location/label signals, or not at all.

    Lookups are tried from most to least specific and the first one with
    exactly one hit wins. Zero or several hits never produce a court; the
    editor has to pick one by hand.
    """

    def __init__(self, courts: CourtLookup):
        self.courts = courts

    def resolve(self, candidate: CourtCandidate) -> Optional[Court]:
        if candidate.type and candidate.location:
            court = _unique(self.courts.find_by_type_and_location(candidate.type, candidate.location))
            if court:
                logger.debug("Court resolved by type and location: %s", court.label)
                return court
        elif candidate.type:
            court = _unique(self.courts.find_by_type_and_location(candidate.type, None))
            if court:
                logger.debug("Court resolved by type only: %s", court.label)
                return court

        if candidate.label:
            court = _unique(self.courts.find_by_label(candidate.label))
            if court:
                logger.debug("Court resolved by label: %s", court.label)
                return court

        if candidate.type or candidate.location or candidate.label:
            logger.info("Court left unset, no unique match for %s", candidate)
        return None
