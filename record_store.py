import copy
import dataclasses
import datetime
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

from errors import CorruptRecordError, RecordNotFoundError
from models import CoreData, Court, DocumentationUnit, DocumentType, Procedure

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    def load(self, record_id: str) -> DocumentationUnit:
        ...

    def save(self, unit: DocumentationUnit) -> bool:
        ...


def core_data_to_dict(core: CoreData) -> Dict[str, Any]:
    data = dataclasses.asdict(core)
    if core.decision_date is not None:
        data["decision_date"] = core.decision_date.isoformat()
    return data


def core_data_from_dict(data: Optional[Dict[str, Any]]) -> CoreData:
    data = dict(data or {})
    decision_date = data.get("decision_date")
    court = data.get("court")
    document_type = data.get("document_type")
    procedure = data.get("procedure")
    return CoreData(
        file_numbers=list(data.get("file_numbers") or []),
        decision_date=datetime.date.fromisoformat(decision_date) if decision_date else None,
        court=Court(**court) if court else None,
        appraisal_body=data.get("appraisal_body"),
        document_type=DocumentType(**document_type) if document_type else None,
        ecli=data.get("ecli"),
        procedure=Procedure(**procedure) if procedure else None,
        legal_effect=data.get("legal_effect"),
        extra=dict(data.get("extra") or {}),
    )


class InMemoryRecordStore:
    """Keeps documentation units in a dict; save() hands out copies."""

    def __init__(self, units=None):
        self._units: Dict[str, DocumentationUnit] = {}
        for unit in units or []:
            self._units[unit.id] = copy.deepcopy(unit)
        self.saved = []

    def load(self, record_id: str) -> DocumentationUnit:
        if record_id not in self._units:
            raise RecordNotFoundError(record_id)
        return copy.deepcopy(self._units[record_id])

    def save(self, unit: DocumentationUnit) -> bool:
        self._units[unit.id] = copy.deepcopy(unit)
        self.saved.append(copy.deepcopy(unit))
        return True


class JsonRecordStore:
    """One JSON file per documentation unit, named <id>.json, under a base directory.

    A missing file loads as a blank unit so that a fresh record can be
    initialized straight from an attached document.
    """

    def __init__(self, base_dir: Union[str, Path], create_missing: bool = True):
        self.base_dir = Path(base_dir)
        self.create_missing = create_missing

    def _path(self, record_id: str) -> Path:
        return self.base_dir / f"{record_id}.json"

    def load(self, record_id: str) -> DocumentationUnit:
        path = self._path(record_id)
        if not path.exists():
            if not self.create_missing:
                raise RecordNotFoundError(record_id)
            logger.info("No stored record %s, starting from blank core data", record_id)
            return DocumentationUnit(id=record_id)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            return DocumentationUnit(id=payload.get("id", record_id), core_data=core_data_from_dict(payload.get("core_data")))
        except (ValueError, TypeError, AttributeError) as exc:
            # JSONDecodeError and bad ISO dates are ValueErrors, unknown keys TypeErrors
            raise CorruptRecordError(record_id, str(exc)) from exc

    def save(self, unit: DocumentationUnit) -> bool:
        path = self._path(unit.id)
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            payload = {"id": unit.id, "core_data": core_data_to_dict(unit.core_data)}
            tmp = path.with_suffix(".json.tmp")
            tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp.replace(path)
        except OSError:
            logger.error("Could not write record %s to %s", unit.id, path, exc_info=True)
            return False
        logger.info("Saved record %s to %s", unit.id, path)
        return True
