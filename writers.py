import json
import pandas as pd
from pathlib import Path
from typing import Any, Dict, List

from models import ConversionResult
from record_store import core_data_to_dict

CSV_COLUMNS = [
    "document_id",
    "fragments",
    "ecli_candidates",
    "file_numbers",
    "decision_date",
    "court",
    "appraisal_body",
    "document_type",
    "ecli",
    "procedure",
    "legal_effect",
    "metadata",
]


def result_to_dict(result: ConversionResult) -> Dict[str, Any]:
    return {
        "document_id": result.document_id,
        "fragments": len(result.rendered_html),
        "ecli_candidates": list(result.ecli_candidates),
        "metadata": {prop.name: value for prop, value in result.metadata.items()},
        "core_data": core_data_to_dict(result.core_data) if result.core_data else None,
    }


def write_html(result: ConversionResult, file_path: Path):
    """Writes the rendered fragments, one per line, as a standalone HTML body."""
    file_path.write_text("\n".join(result.rendered_html) + "\n", encoding="utf-8")


def write_results_jsonl(results: List[ConversionResult], file_path: Path):
    """Writes one JSON object per converted document."""
    with file_path.open("w", encoding="utf-8") as f:
        for result in results:
            f.write(json.dumps(result_to_dict(result), ensure_ascii=False) + "\n")


def write_results_csv(results: List[ConversionResult], file_path: Path):
    """Writes a flat CSV summary of the initialized core data.

    List and dict fields are serialized as JSON strings to keep the CSV flat.
    """
    if not results:
        pd.DataFrame(columns=CSV_COLUMNS).to_csv(file_path, index=False)
        return

    def to_json(value):
        return json.dumps(value, ensure_ascii=False) if value is not None else "null"

    records = []
    for result in results:
        core = result.core_data
        records.append({
            "document_id": result.document_id,
            "fragments": len(result.rendered_html),
            "ecli_candidates": to_json(result.ecli_candidates),
            "file_numbers": to_json(core.file_numbers if core else []),
            "decision_date": core.decision_date.isoformat() if core and core.decision_date else None,
            "court": core.court.label if core and core.court else None,
            "appraisal_body": core.appraisal_body if core else None,
            "document_type": core.document_type.label if core and core.document_type else None,
            "ecli": core.ecli if core else None,
            "procedure": core.procedure.label if core and core.procedure else None,
            "legal_effect": core.legal_effect if core else None,
            "metadata": to_json({prop.name: value for prop, value in result.metadata.items()}),
        })

    pd.DataFrame(records, columns=CSV_COLUMNS).to_csv(file_path, index=False)
