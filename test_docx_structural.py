import tempfile
import unittest
from pathlib import Path

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import parse_xml
from docx.oxml.ns import nsdecls

from docx_structural import DocxDocumentSource, convert_paragraph, read_custom_properties, read_docx
from errors import DocumentSourceError
from models import NumberingFormat, NumberingParagraph, Paragraph, Table

CUSTOM_XML = b"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Properties xmlns="http://schemas.openxmlformats.org/officeDocument/2006/custom-properties"
            xmlns:vt="http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes">
  <property fmtid="{D5CDD505-2E9C-101B-9397-08002B2CF9AE}" pid="2" name="Aktenzeichen"><vt:lpwstr>VII ZR 10/23</vt:lpwstr></property>
  <property fmtid="{D5CDD505-2E9C-101B-9397-08002B2CF9AE}" pid="3" name="Gerichtstyp"><vt:lpwstr> BGH </vt:lpwstr></property>
</Properties>"""


class FakePart:
    def __init__(self, partname, blob):
        self.partname = partname
        self.blob = blob


class FakeDocument:
    """Just enough of python-docx's Document for read_custom_properties."""

    def __init__(self, parts):
        self.part = type("P", (), {})()
        self.part.package = type("Pkg", (), {"iter_parts": lambda _self: iter(parts)})()


class StubNumbering:
    def format_of(self, num_id, ilvl):
        return NumberingFormat.BULLET if num_id == "7" else NumberingFormat.DECIMAL


class TestDocxStructural(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.TemporaryDirectory()
        self.test_path = Path(self.test_dir.name)

    def tearDown(self):
        self.test_dir.cleanup()

    def build_docx(self):
        doc = Document()
        doc.add_paragraph("Im Namen des Volkes").alignment = WD_ALIGN_PARAGRAPH.CENTER
        p = doc.add_paragraph()
        p.add_run("Aktenzeichen: ")
        p.add_run("VII ZR 10/23").bold = True
        table = doc.add_table(rows=1, cols=2)
        table.cell(0, 0).text = "Kläger"
        table.cell(0, 1).text = "Beklagte"
        doc.add_paragraph("")
        doc.sections[0].footer.paragraphs[0].text = "ECLI:DE:BGH:2023:120523UVIIZR10.23.0"
        path = self.test_path / "urteil.docx"
        doc.save(str(path))
        return path

    def test_read_docx(self):
        parsed = read_docx(self.build_docx())
        self.assertEqual(parsed.source_name, "urteil.docx")
        kinds = [type(e) for e in parsed.elements]
        self.assertEqual(kinds, [Paragraph, Paragraph, Table])
        self.assertEqual(parsed.elements[0].alignment, "center")
        self.assertEqual(parsed.elements[1].text, "Aktenzeichen: VII ZR 10/23")
        self.assertTrue(parsed.elements[1].runs[1].bold)
        self.assertEqual(parsed.elements[2].rows[0][0][0].text, "Kläger")
        self.assertIn("ECLI:DE:BGH:2023:120523UVIIZR10.23.0", parsed.footer_text)

    def test_numbered_paragraph(self):
        doc = Document()
        p = doc.add_paragraph("Die Revision wird zurückgewiesen.")
        p._p.get_or_add_pPr().append(parse_xml(
            f'<w:numPr {nsdecls("w")}><w:ilvl w:val="1"/><w:numId w:val="7"/></w:numPr>'))
        elements = convert_paragraph(p, StubNumbering())
        self.assertEqual(len(elements), 1)
        entry = elements[0]
        self.assertIsInstance(entry, NumberingParagraph)
        self.assertEqual(entry.level, "1")
        self.assertEqual(entry.format, NumberingFormat.BULLET)
        self.assertEqual(entry.text, "Die Revision wird zurückgewiesen.")

    def test_num_id_zero_is_plain_paragraph(self):
        doc = Document()
        p = doc.add_paragraph("kein Listeneintrag")
        p._p.get_or_add_pPr().append(parse_xml(
            f'<w:numPr {nsdecls("w")}><w:ilvl w:val="0"/><w:numId w:val="0"/></w:numPr>'))
        elements = convert_paragraph(p, StubNumbering())
        self.assertEqual([type(e) for e in elements], [Paragraph])

    def test_read_custom_properties(self):
        doc = FakeDocument([FakePart("/word/document.xml", b""), FakePart("/docProps/custom.xml", CUSTOM_XML)])
        self.assertEqual(read_custom_properties(doc), {"Aktenzeichen": "VII ZR 10/23", "Gerichtstyp": "BGH"})

    def test_missing_and_wrong_files(self):
        with self.assertRaises(DocumentSourceError):
            read_docx(self.test_path / "fehlt.docx")
        txt = self.test_path / "notiz.txt"
        txt.write_text("kein docx", encoding="utf-8")
        with self.assertRaises(DocumentSourceError):
            read_docx(txt)
        broken = self.test_path / "kaputt.docx"
        broken.write_bytes(b"not a zip")
        with self.assertRaises(DocumentSourceError):
            read_docx(broken)

    def test_source_resolves_ids_under_base_dir(self):
        self.build_docx()
        source = DocxDocumentSource(self.test_path)
        self.assertEqual(source.path_for("urteil.docx"), self.test_path / "urteil.docx")
        self.assertEqual(source.load("urteil.docx").source_name, "urteil.docx")


if __name__ == '__main__':
    unittest.main()
