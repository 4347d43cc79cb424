#!/usr/bin/env python3
"""CLI to convert attached decision documents and pre-fill their core data.

Usage:
  python docx_import_cli.py <file-or-dir> [--record-id ID] [--records-dir DIR]
      [--courts courts.csv] [--document-types document_types.csv]
      [--out-dir OUT] [--stdout] [--log-level INFO] [--log-file PATH]

For each .docx the rendered HTML is written to <out-dir>/<stem>.html and the
initialized core data is stored as <records-dir>/<record-id>.json. A summary
of all documents goes to conversion_results.jsonl / .csv in the output folder.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from docx_structural import DocxDocumentSource
from errors import ConversionError
from lookups import InMemoryCourtTable, InMemoryDocumentTypeTable, load_court_table, load_document_type_table
from models import ConversionResult
from pipeline import ConversionPipeline
from record_store import JsonRecordStore
from utils import ensure_output_base, safe_stem
from writers import write_html, write_results_csv, write_results_jsonl

logger = logging.getLogger("docx_import")


def setup_logging(level: int = logging.INFO, logfile: Optional[Path] = None) -> None:
    handlers = [logging.StreamHandler(sys.stdout)]
    if logfile:
        handlers.append(logging.FileHandler(logfile, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        handlers=handlers,
    )


def iter_sources(path: str) -> Iterable[Path]:
    p = Path(path)
    if p.is_dir():
        for child in sorted(p.iterdir()):
            # skip Word lock files (~$name.docx)
            if child.is_file() and child.suffix.lower() == ".docx" and not child.name.startswith("~$"):
                yield child
    elif p.exists():
        yield p


def build_pipeline(args: argparse.Namespace) -> ConversionPipeline:
    courts = load_court_table(args.courts) if args.courts else InMemoryCourtTable([])
    document_types = (load_document_type_table(args.document_types)
                      if args.document_types else InMemoryDocumentTypeTable([]))
    out_dir = Path(args.out_dir)
    records_dir = Path(args.records_dir) if args.records_dir else out_dir / "records"
    return ConversionPipeline(
        source=DocxDocumentSource(),
        courts=courts,
        document_types=document_types,
        store=JsonRecordStore(records_dir),
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="docx-import",
        description="Convert attached decision documents (.docx) to HTML and pre-fill core data",
    )
    parser.add_argument("source", help="Path to a .docx file or a directory of them")
    parser.add_argument("--record-id", help="Record to initialize (single file only; defaults to the file stem)")
    parser.add_argument("--records-dir", help="Directory holding <record-id>.json records (default: <out-dir>/records)")
    parser.add_argument("--courts", help="CSV with columns type, location, label, is_superior_court, is_foreign_court")
    parser.add_argument("--document-types", help="CSV with columns abbreviation, label")
    parser.add_argument("--out-dir", default="output", help="Directory for HTML and summary files")
    parser.add_argument("--stdout", action="store_true", help="Print the HTML of the first converted document")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-file", help="Also write the log to this file")
    args = parser.parse_args(argv)

    level = getattr(logging, args.log_level.upper(), logging.INFO)
    setup_logging(level=level, logfile=Path(args.log_file) if args.log_file else None)

    sources = list(iter_sources(args.source))
    if not sources:
        logger.error("No .docx documents found at %s", args.source)
        return 1
    if args.record_id and len(sources) > 1:
        logger.error("--record-id can only be used with a single source file")
        return 1

    for table_arg in (args.courts, args.document_types):
        if table_arg and not Path(table_arg).exists():
            logger.error("Reference table not found: %s", table_arg)
            return 1

    pipeline = build_pipeline(args)
    out_dir = ensure_output_base(args.out_dir)

    results: List[ConversionResult] = []
    for src in sources:
        record_id = args.record_id or safe_stem(src.name)
        try:
            result = pipeline.convert(str(src), record_id)
        except ConversionError as e:
            logger.error("Conversion failed for %s: %s", src, e)
            continue
        results.append(result)

        if args.stdout:
            print(result.html)
            break

        html_path = out_dir / f"{safe_stem(src.name)}.html"
        write_html(result, html_path)
        logger.info("Wrote: %s", html_path)

    if not results:
        logger.error("No documents converted.")
        return 2

    if not args.stdout:
        write_results_jsonl(results, out_dir / "conversion_results.jsonl")
        write_results_csv(results, out_dir / "conversion_results.csv")
        logger.info("Wrote summary for %d documents to %s", len(results), out_dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
