"""Batch conversion steps: legacy sources -> document JSON, document JSON -> HTML"""

from pathlib import Path

import structlog

from pageblocks.config import Settings
from pageblocks.core.document import dump_document, load_document
from pageblocks.core.parse import html_to_blocks
from pageblocks.core.serialize import blocks_to_html
from pageblocks.core.sources import discover_files, read_source


logger = structlog.get_logger()


def run_import(path: str, out_dir: Path, settings: Settings) -> list[tuple[Path, Path]]:
    """Convert HTML/Markdown sources under path to <stem>.json documents. Returns (source, output) pairs."""
    if not Path(path).exists():
        raise RuntimeError(f"Path not found: {path}")
    out_dir.mkdir(parents=True, exist_ok=True)
    results = []
    for p in discover_files(Path(path)):
        try:
            doc = html_to_blocks(read_source(p, settings.markdown_preset))
            out_file = out_dir / f"{p.stem}.json"
            out_file.write_text(dump_document(doc, indent=settings.json_indent or None), encoding='utf-8')
        except Exception as e:
            raise RuntimeError(f"Failed to import {p}: {e}") from e
        logger.info("source_imported", source=str(p), output=str(out_file), blocks=len(doc.blocks))
        results.append((p, out_file))
    return results


def run_export(path: str, out_dir: Path) -> list[tuple[Path, Path]]:
    """Render document JSON files under path to <stem>.html. Returns (document, output) pairs."""
    if not Path(path).exists():
        raise RuntimeError(f"Path not found: {path}")
    out_dir.mkdir(parents=True, exist_ok=True)
    results = []
    for p in discover_files(Path(path), {'.json'}):
        try:
            doc = load_document(p.read_text(encoding='utf-8'))
            out_file = out_dir / f"{p.stem}.html"
            out_file.write_text(blocks_to_html(doc), encoding='utf-8')
        except Exception as e:
            raise RuntimeError(f"Failed to export {p}: {e}") from e
        logger.info("document_exported", source=str(p), output=str(out_file))
        results.append((p, out_file))
    return results
