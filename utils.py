import datetime
import html
import re
from pathlib import Path
from typing import Iterable, List, Optional, Union

from models import Paragraph, Run

DECISION_DATE_FORMAT = "%d.%m.%Y"
DECISION_DATE_RE = re.compile(r"^\d{2}\.\d{2}\.\d{4}$")

ALIGNMENTS = {"left", "center", "right", "justify"}


def normalize_whitespace(text: Optional[str]) -> str:
    """Collapses runs of whitespace (including NBSP) into single spaces."""
    if not text:
        return ""
    return " ".join(text.replace("\u00a0", " ").split())


def parse_level(token: Union[int, str, None]) -> int:
    """Parses a numbering level indicator. Anything unparsable is level 0."""
    if isinstance(token, bool):
        return 0
    if isinstance(token, int):
        return max(token, 0)
    try:
        return max(int(str(token).strip()), 0)
    except (TypeError, ValueError):
        return 0


def parse_decision_date(value: Optional[str]) -> Optional[datetime.date]:
    """Parses dd.mm.yyyy. No partial or guessed dates: on mismatch returns None."""
    if not value:
        return None
    value = value.strip()
    if not DECISION_DATE_RE.match(value):
        return None
    try:
        return datetime.datetime.strptime(value, DECISION_DATE_FORMAT).date()
    except ValueError:
        return None


def run_to_html(run: Run) -> str:
    out = html.escape(run.text, quote=False)
    if not out:
        return ""
    if run.superscript:
        out = f"<sup>{out}</sup>"
    elif run.subscript:
        out = f"<sub>{out}</sub>"
    if run.strike:
        out = f"<s>{out}</s>"
    if run.underline:
        out = f"<u>{out}</u>"
    if run.italic:
        out = f"<em>{out}</em>"
    if run.bold:
        out = f"<strong>{out}</strong>"
    return out


def runs_to_html(runs: Iterable[Run]) -> str:
    return "".join(run_to_html(r) for r in runs)


def paragraph_style_attr(paragraph: Paragraph) -> str:
    if paragraph.alignment in ALIGNMENTS:
        return f' style="text-align: {paragraph.alignment}"'
    return ""


def dedupe_preserving_order(values: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for v in values:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


def ensure_output_base(base: Union[str, Path]) -> Path:
    """Creates (if needed) and returns the base output directory."""
    p = Path(base)
    p.mkdir(parents=True, exist_ok=True)
    return p


def safe_stem(name: str) -> str:
    """File-system friendly variant of a document name, used for output files."""
    stem = Path(name).stem or "document"
    stem = re.sub(r"[^\w.\-]+", "_", stem, flags=re.UNICODE).strip("._")
    return stem or "document"
