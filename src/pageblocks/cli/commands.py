"""CLI command implementations"""

from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer

from pageblocks.config import Settings, load_config
from pageblocks.core.blocks import BLOCK_FACTORIES
from pageblocks.core.document import check_invariants, dump_document, empty_document, load_document
from pageblocks.core.exceptions import DocumentLoadError
from pageblocks.core.pipeline import run_export, run_import
from pageblocks.session import EditorSession
from pageblocks.util.logging import configure_logging


class BlockKind(str, Enum):
    text = "text"
    heading = "heading"
    image = "image"
    button = "button"
    columns = "columns"
    code = "code"


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _read_document(path: Path):
    try:
        return load_document(path.read_text(encoding="utf-8"))
    except OSError as e:
        _fail(f"Cannot read {path}", e)
    except DocumentLoadError as e:
        _fail(f"Could not load {path}", e)


def main_callback(
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR")] = None,
    ):
    """Block documents for pages and emails, with legacy HTML import/export."""
    settings = _settings(overrides={"log_level": log_level.upper() if log_level else None})
    configure_logging(settings.log_level)


def import_cmd(
    path: Annotated[str, typer.Argument(help="HTML/Markdown file or directory to import")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    preset: Annotated[Optional[str], typer.Option("--markdown-preset", help="MarkdownIt preset name")] = None,
    ):
    """Convert legacy HTML or Markdown into block document JSON."""
    settings = _settings(overrides={"output_dir": out, "markdown_preset": preset})
    out_dir = Path(settings.output_dir)
    try:
        results = run_import(path, out_dir, settings)
    except RuntimeError as e:
        _fail(str(e))
    for src, out_file in results:
        typer.echo(f"  {src} -> {out_file}")
    typer.echo(f"Imported {len(results)} document(s) to {out_dir}/")


def export_cmd(
    path: Annotated[str, typer.Argument(help="Document JSON file or directory to export")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Render block document JSON to flat HTML."""
    settings = _settings(overrides={"output_dir": out})
    out_dir = Path(settings.output_dir)
    try:
        results = run_export(path, out_dir)
    except RuntimeError as e:
        _fail(str(e))
    for src, out_file in results:
        typer.echo(f"  {src} -> {out_file}")
    typer.echo(f"Exported {len(results)} document(s) to {out_dir}/")


def check_cmd(
    path: Annotated[Path, typer.Argument(help="Document JSON file to check")],
    ):
    """Load a document and report id or column-count problems."""
    doc = _read_document(path)
    problems = check_invariants(doc)
    for problem in problems:
        typer.echo(f"  {problem}", err=True)
    if problems:
        _fail(f"{len(problems)} problem(s) in {path}")
    typer.echo(f"OK: {len(doc.blocks)} block(s)")


def add_cmd(
    path: Annotated[Path, typer.Argument(help="Document JSON file (created if missing)")],
    kind: Annotated[BlockKind, typer.Argument(help="Kind of block to add")],
    index: Annotated[Optional[int], typer.Option("--index", help="Insert position; default appends")] = None,
    columns: Annotated[int, typer.Option("--columns", min=2, max=4, help="Column count for columns blocks")] = 2,
    ):
    """Add a new default block to a document file."""
    settings = _settings()
    doc = _read_document(path) if path.exists() else empty_document()
    session = EditorSession(doc)

    factory = BLOCK_FACTORIES[kind.value]
    block = factory(columns) if kind is BlockKind.columns else factory()
    session.add_block(block, index)

    path.write_text(dump_document(session.content, indent=settings.json_indent or None), encoding="utf-8")
    typer.echo(f"Added {kind.value} block {block.id} ({len(session.content.blocks)} block(s))")
