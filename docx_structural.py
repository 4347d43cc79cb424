import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml import parse_xml
from docx.table import Table as DocxTable
from docx.text.paragraph import Paragraph as DocxParagraph
from docx2python import docx2python

from errors import DocumentSourceError
from models import DocumentElement, Image, NumberingFormat, NumberingParagraph, Paragraph, ParsedDocument, Run, Table

logger = logging.getLogger(__name__)

# Reads an attached .docx into the element tree the converter works on.
# python-docx gives us body order, numbering definitions and custom properties;
# docx2python flattens header/footer text, which python-docx only exposes per section.

CUSTOM_PROPS_PARTNAME = "/docProps/custom.xml"
CUSTOM_PROPS_NS = "{http://schemas.openxmlformats.org/officeDocument/2006/custom-properties}"

ALIGNMENT_NAMES = {"LEFT": "left", "CENTER": "center", "RIGHT": "right", "JUSTIFY": "justify"}


def _flatten_text(node: Any) -> Iterable[str]:
    # docx2python nests text as tables -> rows -> cells -> paragraphs
    if isinstance(node, str):
        t = " ".join(node.split())
        if t:
            yield t
        return
    if isinstance(node, list):
        for child in node:
            yield from _flatten_text(child)


def read_footer_text(docx_path: Union[str, Path]) -> str:
    content = docx2python(str(docx_path), html=False)
    try:
        return "\n".join(_flatten_text(content.footer))
    finally:
        content.close()


def read_custom_properties(document) -> Dict[str, str]:
    props: Dict[str, str] = {}
    for part in document.part.package.iter_parts():
        if str(part.partname) != CUSTOM_PROPS_PARTNAME:
            continue
        root = parse_xml(part.blob)
        for prop in root.iter(f"{CUSTOM_PROPS_NS}property"):
            name = prop.get("name")
            if not name:
                continue
            # value sits in a single vt:* child (lpwstr, filetime, i4, ...)
            props[name] = "".join(prop.itertext()).strip()
    return props


class NumberingDefinitions:
    """Answers "which numFmt does (numId, ilvl) use" from the numbering part."""

    def __init__(self, document):
        try:
            self._numbering = document.part.numbering_part.element
        except (KeyError, NotImplementedError):
            self._numbering = None
        self._cache: Dict[tuple, NumberingFormat] = {}

    def format_of(self, num_id: str, ilvl: str) -> NumberingFormat:
        key = (num_id, ilvl)
        if key in self._cache:
            return self._cache[key]
        fmt = NumberingFormat.DECIMAL
        if self._numbering is not None:
            abstract_ids = self._numbering.xpath(f'./w:num[@w:numId="{num_id}"]/w:abstractNumId/@w:val')
            if abstract_ids:
                values = self._numbering.xpath(
                    f'./w:abstractNum[@w:abstractNumId="{abstract_ids[0]}"]'
                    f'/w:lvl[@w:ilvl="{ilvl}"]/w:numFmt/@w:val')
                if values:
                    fmt = NumberingFormat.from_docx(values[0])
        self._cache[key] = fmt
        return fmt


def _num_pr(paragraph: DocxParagraph):
    pPr = paragraph._p.pPr
    if pPr is not None and pPr.numPr is not None:
        return pPr.numPr
    style = paragraph.style
    while style is not None:
        style_pPr = style.element.pPr
        if style_pPr is not None and style_pPr.numPr is not None:
            return style_pPr.numPr
        style = style.base_style
    return None


def _runs(paragraph: DocxParagraph) -> List[Run]:
    runs: List[Run] = []
    for r in paragraph.runs:
        if not r.text:
            continue
        font = r.font
        runs.append(Run(
            text=r.text,
            bold=bool(r.bold),
            italic=bool(r.italic),
            underline=bool(r.underline),
            strike=bool(font.strike),
            superscript=bool(font.superscript),
            subscript=bool(font.subscript),
        ))
    return runs


def _alignment(paragraph: DocxParagraph) -> Optional[str]:
    align = paragraph.paragraph_format.alignment
    if align is None:
        return None
    return ALIGNMENT_NAMES.get(getattr(align, "name", ""), None)


def _images(paragraph: DocxParagraph) -> List[Image]:
    images: List[Image] = []
    for drawing in paragraph._p.xpath(".//w:drawing"):
        doc_pr = drawing.xpath(".//wp:docPr")
        name = doc_pr[0].get("name") if doc_pr else None
        descr = doc_pr[0].get("descr") if doc_pr else None
        data = content_type = None
        embed = drawing.xpath(".//a:blip/@r:embed")
        if embed and embed[0] in paragraph.part.related_parts:
            image_part = paragraph.part.related_parts[embed[0]]
            data, content_type = image_part.blob, image_part.content_type
        images.append(Image(name=name, description=descr, content_type=content_type, data=data))
    return images


def _paragraph(paragraph: DocxParagraph) -> Paragraph:
    return Paragraph(runs=_runs(paragraph), alignment=_alignment(paragraph))


def convert_paragraph(paragraph: DocxParagraph, numbering: NumberingDefinitions) -> List[DocumentElement]:
    out: List[DocumentElement] = []
    para = _paragraph(paragraph)
    num_pr = _num_pr(paragraph)
    num_ids = num_pr.xpath("./w:numId/@w:val") if num_pr is not None else []
    # numId 0 switches numbering off for this paragraph
    if num_ids and num_ids[0] != "0":
        ilvl_values = num_pr.xpath("./w:ilvl/@w:val")
        ilvl = ilvl_values[0] if ilvl_values else "0"
        out.append(NumberingParagraph(
            paragraph=para,
            level=ilvl,
            format=numbering.format_of(num_ids[0], ilvl),
            num_id=num_ids[0],
        ))
    elif para.runs:
        out.append(para)
    out.extend(_images(paragraph))
    return out


def convert_table(table: DocxTable) -> Table:
    rows = []
    for row in table.rows:
        rows.append([[_paragraph(p) for p in cell.paragraphs if p.text.strip()] for cell in row.cells])
    return Table(rows=rows)


def extract_elements(document) -> List[DocumentElement]:
    numbering = NumberingDefinitions(document)
    elements: List[DocumentElement] = []
    for index, block in enumerate(document.iter_inner_content()):
        try:
            if isinstance(block, DocxTable):
                elements.append(convert_table(block))
            else:
                elements.extend(convert_paragraph(block, numbering))
        except Exception:
            logger.warning("Skipping unreadable body element #%d", index, exc_info=True)
    return elements


def read_docx(docx_path: Union[str, Path]) -> ParsedDocument:
    """Reads a .docx file into elements, footer text and custom properties.

    Raises:
        DocumentSourceError: if the file is missing or not a docx package.
    """
    path = Path(docx_path)
    if not path.exists():
        raise DocumentSourceError(f"Source file not found: {path}")
    if path.suffix.lower() != ".docx":
        raise DocumentSourceError(f"Source file must be a DOCX file, got: {path.suffix}")
    try:
        document = Document(str(path))
    except (PackageNotFoundError, zipfile.BadZipFile, ValueError, KeyError) as exc:
        raise DocumentSourceError(f"Could not open {path}: {exc}") from exc

    elements = extract_elements(document)
    custom = read_custom_properties(document)
    try:
        footer = read_footer_text(path)
    except Exception:
        logger.warning("Could not read footer of %s, continuing without it", path, exc_info=True)
        footer = ""
    logger.info("Read %s: %d elements, %d custom properties", path.name, len(elements), len(custom))
    return ParsedDocument(elements=elements, footer_text=footer, custom_properties=custom, source_name=path.name)


class DocxDocumentSource:
    """Resolves document ids to .docx files (absolute paths or names under base_dir)."""

    def __init__(self, base_dir: Optional[Union[str, Path]] = None):
        self.base_dir = Path(base_dir) if base_dir else None

    def path_for(self, document_id: str) -> Path:
        p = Path(document_id)
        if self.base_dir is not None and not p.is_absolute():
            p = self.base_dir / p
        return p

    def load(self, document_id: str) -> ParsedDocument:
        return read_docx(self.path_for(document_id))
