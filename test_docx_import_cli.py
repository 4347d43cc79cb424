import json
import tempfile
import unittest
from pathlib import Path

from docx import Document

from docx_import_cli import iter_sources, main


class TestDocxImportCli(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.TemporaryDirectory()
        self.test_path = Path(self.test_dir.name)
        self.in_dir = self.test_path / "in"
        self.in_dir.mkdir()
        self.out_dir = self.test_path / "out"

    def tearDown(self):
        self.test_dir.cleanup()

    def write_docx(self, name):
        doc = Document()
        doc.add_paragraph("Gerichtstyp: BGH")
        doc.add_paragraph("Aktenzeichen: VII ZR 10/23")
        doc.add_paragraph("Entscheidungsdatum: 12.05.2023")
        doc.add_paragraph("Die Revision wird zurückgewiesen.")
        path = self.in_dir / name
        doc.save(str(path))
        return path

    def test_converts_directory(self):
        self.write_docx("Urteil 1.docx")
        courts = self.test_path / "courts.csv"
        courts.write_text("type,location,label,is_superior_court,is_foreign_court\nBGH,,,true,\n", encoding="utf-8")
        records = self.out_dir / "records"
        records.mkdir(parents=True)
        (records / "Urteil_1.json").write_text(
            json.dumps({"id": "Urteil_1", "core_data": {"legal_effect": "Keine Angabe"}}), encoding="utf-8")

        rc = main([str(self.in_dir), "--out-dir", str(self.out_dir), "--courts", str(courts), "--log-level", "WARNING"])

        self.assertEqual(rc, 0)
        html = (self.out_dir / "Urteil_1.html").read_text(encoding="utf-8")
        self.assertIn("<p>Die Revision wird zurückgewiesen.</p>", html)
        record = json.loads((self.out_dir / "records" / "Urteil_1.json").read_text(encoding="utf-8"))
        self.assertEqual(record["core_data"]["court"]["type"], "BGH")
        self.assertEqual(record["core_data"]["legal_effect"], "Ja")
        self.assertEqual(record["core_data"]["decision_date"], "2023-05-12")
        self.assertTrue((self.out_dir / "conversion_results.jsonl").exists())
        self.assertTrue((self.out_dir / "conversion_results.csv").exists())

    def test_no_sources(self):
        self.assertEqual(main([str(self.in_dir), "--out-dir", str(self.out_dir)]), 1)

    def test_missing_reference_table(self):
        self.write_docx("a.docx")
        rc = main([str(self.in_dir), "--out-dir", str(self.out_dir), "--courts", str(self.test_path / "fehlt.csv")])
        self.assertEqual(rc, 1)

    def test_record_id_needs_single_file(self):
        self.write_docx("a.docx")
        self.write_docx("b.docx")
        self.assertEqual(main([str(self.in_dir), "--record-id", "rec-1", "--out-dir", str(self.out_dir)]), 1)

    def test_nothing_converted(self):
        (self.in_dir / "kaputt.docx").write_bytes(b"not a zip")
        self.assertEqual(main([str(self.in_dir), "--out-dir", str(self.out_dir)]), 2)

    def test_corrupt_record_does_not_stop_batch(self):
        self.write_docx("a.docx")
        self.write_docx("b.docx")
        records = self.out_dir / "records"
        records.mkdir(parents=True)
        (records / "a.json").write_text("{kaputt", encoding="utf-8")

        rc = main([str(self.in_dir), "--out-dir", str(self.out_dir), "--log-level", "WARNING"])

        self.assertEqual(rc, 0)
        self.assertFalse((self.out_dir / "a.html").exists())
        self.assertTrue((self.out_dir / "b.html").exists())
        self.assertTrue((records / "b.json").exists())

    def test_iter_sources_skips_lock_files(self):
        self.write_docx("a.docx")
        (self.in_dir / "~$a.docx").write_bytes(b"lock")
        (self.in_dir / "notes.txt").write_text("x", encoding="utf-8")
        self.assertEqual([p.name for p in iter_sources(str(self.in_dir))], ["a.docx"])


if __name__ == '__main__':
    unittest.main()
