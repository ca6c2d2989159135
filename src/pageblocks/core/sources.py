"""Source discovery and loading: legacy HTML as-is, Markdown rendered to HTML first"""

import re
from pathlib import Path

from markdown_it import MarkdownIt


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
HTML_EXTENSIONS = {'.html', '.htm'}
MD_EXTENSIONS = {'.md', '.mdx'}
SOURCE_EXTENSIONS = HTML_EXTENSIONS | MD_EXTENSIONS


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def strip_frontmatter(text: str) -> str:
    """Return text with a leading YAML front matter block removed."""
    m = FRONTMATTER_RE.match(text)
    return text[m.end():] if m else text


def markdown_to_html(text: str, preset: str = 'gfm-like') -> str:
    return _make_parser(preset).render(strip_frontmatter(text))


def discover_files(path: Path, extensions: set[str] = SOURCE_EXTENSIONS) -> list[Path]:
    """Return sorted files with a matching suffix under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix.lower() in extensions else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix.lower() in extensions)


def read_source(path: Path, preset: str = 'gfm-like') -> str:
    """Return the HTML for a source file, rendering Markdown through markdown-it."""
    raw = path.read_text(encoding='utf-8')
    if path.suffix.lower() in MD_EXTENSIONS:
        return markdown_to_html(raw, preset)
    return raw
