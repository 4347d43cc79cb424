import dataclasses
import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class ElementKind(str, Enum):
    PARAGRAPH = "paragraph"
    NUMBERING = "numbering"
    TABLE = "table"
    IMAGE = "image"


class NumberingFormat(str, Enum):
    DECIMAL = "decimal"
    BULLET = "bullet"
    UPPER_ROMAN = "upperRoman"
    LOWER_ROMAN = "lowerRoman"
    UPPER_LETTER = "upperLetter"
    LOWER_LETTER = "lowerLetter"

    @classmethod
    def from_docx(cls, value: Optional[str]) -> "NumberingFormat":
        """Map a w:numFmt value to a format; anything unknown counts as decimal."""
        for member in cls:
            if member.value == value:
                return member
        return cls.DECIMAL


@dataclasses.dataclass
class Run:
    """A piece of paragraph text sharing one set of character formatting."""
    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strike: bool = False
    superscript: bool = False
    subscript: bool = False


@dataclasses.dataclass
class Paragraph:
    runs: List[Run] = dataclasses.field(default_factory=list)
    alignment: Optional[str] = None  # 'left' | 'center' | 'right' | 'justify'
    kind: ElementKind = dataclasses.field(default=ElementKind.PARAGRAPH, init=False)

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)


@dataclasses.dataclass
class NumberingParagraph:
    """A paragraph carrying a list level and numbering format."""
    paragraph: Paragraph
    level: Union[int, str, None] = 0
    format: NumberingFormat = NumberingFormat.DECIMAL
    num_id: Optional[str] = None
    kind: ElementKind = dataclasses.field(default=ElementKind.NUMBERING, init=False)

    @property
    def text(self) -> str:
        return self.paragraph.text


@dataclasses.dataclass
class Table:
    rows: List[List[List[Paragraph]]] = dataclasses.field(default_factory=list)
    kind: ElementKind = dataclasses.field(default=ElementKind.TABLE, init=False)


@dataclasses.dataclass
class Image:
    name: Optional[str] = None
    description: Optional[str] = None
    content_type: Optional[str] = None
    data: Optional[bytes] = None
    kind: ElementKind = dataclasses.field(default=ElementKind.IMAGE, init=False)


DocumentElement = Union[Paragraph, NumberingParagraph, Table, Image]


@dataclasses.dataclass(frozen=True)
class NumberingEntry:
    level: int
    format: NumberingFormat
    content_html: str


@dataclasses.dataclass
class ParsedDocument:
    """What a document source hands to the pipeline for one attached file."""
    elements: List[DocumentElement]
    footer_text: str = ""
    custom_properties: Dict[str, str] = dataclasses.field(default_factory=dict)
    source_name: Optional[str] = None


class MetadataProperty(Enum):
    FILE_NUMBER = "Aktenzeichen"
    DECISION_DATE = "Entscheidungsdatum"
    COURT_TYPE = "Gerichtstyp"
    COURT_LOCATION = "Gerichtsort"
    COURT = "Gericht"
    APPRAISAL_BODY = "Spruchkörper"
    DOCUMENT_TYPE = "Dokumenttyp"
    ECLI = "ECLI"
    PROCEDURE = "Vorgang"
    LEGAL_EFFECT = "Rechtskraft"

    @property
    def key(self) -> str:
        return self.value

    @classmethod
    def from_key(cls, key: Optional[str]) -> Optional["MetadataProperty"]:
        if not key:
            return None
        wanted = key.strip().casefold()
        for member in cls:
            if member.value.casefold() == wanted:
                return member
        return None


class LegalEffect(Enum):
    YES = "Ja"
    NO = "Nein"
    NOT_SPECIFIED = "Keine Angabe"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional["LegalEffect"]:
        if label is None:
            return None
        for member in cls:
            if member.value == label.strip():
                return member
        return None


@dataclasses.dataclass(frozen=True)
class CourtCandidate:
    type: Optional[str] = None
    location: Optional[str] = None
    label: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class Court:
    type: Optional[str]
    location: Optional[str] = None
    label: Optional[str] = None
    is_superior_court: bool = False
    is_foreign_court: bool = False

    def __post_init__(self):
        if self.label is None:
            object.__setattr__(self, "label", court_label(self.type, self.location))


def court_label(court_type: Optional[str], location: Optional[str]) -> str:
    """Courts without location (e.g. BFH) are labelled by their type alone."""
    parts = [p for p in (court_type, location) if p]
    return " ".join(parts)


@dataclasses.dataclass(frozen=True)
class DocumentType:
    abbreviation: str
    label: str


@dataclasses.dataclass(frozen=True)
class Procedure:
    label: str


@dataclasses.dataclass
class CoreData:
    """Bibliographic metadata of a case-law documentation unit."""
    file_numbers: List[str] = dataclasses.field(default_factory=list)
    decision_date: Optional[datetime.date] = None
    court: Optional[Court] = None
    appraisal_body: Optional[str] = None
    document_type: Optional[DocumentType] = None
    ecli: Optional[str] = None
    procedure: Optional[Procedure] = None
    legal_effect: Optional[str] = None
    # fields owned by other parts of the system, carried through untouched
    extra: Dict[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass
class DocumentationUnit:
    id: str
    core_data: CoreData = dataclasses.field(default_factory=CoreData)


@dataclasses.dataclass
class HarvestResult:
    metadata: Dict[MetadataProperty, str]
    ecli_candidates: List[str]


@dataclasses.dataclass
class ConversionResult:
    document_id: str
    rendered_html: List[str]
    ecli_candidates: List[str]
    metadata: Dict[MetadataProperty, str] = dataclasses.field(default_factory=dict)
    core_data: Optional[CoreData] = None

    @property
    def html(self) -> str:
        return "".join(self.rendered_html)
