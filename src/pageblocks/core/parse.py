"""Legacy HTML -> Document parser

Walks the top-level nodes of a parsed HTML fragment and classifies each
element through a dispatch table keyed by tag name. Elements the table does
not know, and containers without a recognized marker class, degrade to a
plain text block; nothing here raises on unexpected markup.
"""

import re
from dataclasses import dataclass, replace
from typing import Callable, Optional

import structlog
from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from pageblocks.core.blocks import (
    create_button_block,
    create_code_block,
    create_columns_block,
    create_image_block,
    create_text_block,
)
from pageblocks.core.document import empty_document
from pageblocks.core.exceptions import RichTextError
from pageblocks.core.models import DEFAULT_GAP, Block, Document, ImageData
from pageblocks.core.richtext import (
    DEFAULT_CODEC,
    HEADING_TAGS,
    RichTextCodec,
    heading_content,
    language_from_class,
    plain_text_content,
)
from pageblocks.core.serialize import COLUMNS_CLASS


logger = structlog.get_logger()

BUTTON_CLASSES = {"btn-primary", "btn-secondary", "btn", "button"}
SECONDARY_CLASS = "btn-secondary"

_COLUMN_CHILD_RE = re.compile(r"^column-\d+$")
_GRID_RE = re.compile(r"grid-template-columns:\s*repeat\(\s*(\d+)")
_GAP_RE = re.compile(r"(?<![\w-])gap:\s*(\d+)px")
_INT_RE = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True)
class _Context:
    richtext: RichTextCodec
    allow_columns: bool = True


Handler = Callable[[Tag, _Context], Optional[Block]]


def _classes(tag: Tag) -> list[str]:
    value = tag.get("class") or []
    return value.split() if isinstance(value, str) else list(value)


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Leading-digit integer parse ('120px' -> 120); None when there are no digits."""
    m = _INT_RE.match(value or "")
    return int(m.group(1)) if m else None


def _rich_text(fragment: str, ctx: _Context, fallback: dict) -> dict:
    try:
        return ctx.richtext.from_html(fragment)
    except RichTextError as e:
        logger.warning("richtext_parse_failed", error=str(e))
        return fallback


# --- handlers ---

def _text_element(tag: Tag, ctx: _Context) -> Block:
    """Headings and paragraphs share one text variant; the level lives in the payload."""
    text = tag.get_text()
    level = HEADING_TAGS.get(tag.name)
    fallback = heading_content(level, text) if level else plain_text_content(text)
    return create_text_block(_rich_text(str(tag), ctx, fallback))


def _image(tag: Tag, ctx: _Context) -> Block:
    img = tag if tag.name == "img" else tag.find("img")
    block = create_image_block(src=img.get("src") or "", alt=img.get("alt") or "")
    fields = {"src": block.data.src, "alt": block.data.alt}

    width, height = _parse_int(img.get("width")), _parse_int(img.get("height"))
    if width is not None:
        fields["width"] = width
    if height is not None:
        fields["height"] = height

    figure = img.find_parent("figure")
    if figure is not None:
        caption = figure.find("figcaption")
        if caption is not None:
            fields["caption"] = caption.get_text().strip()

    return block.model_copy(update={"data": ImageData(**fields)})


def _figure(tag: Tag, ctx: _Context) -> Optional[Block]:
    if tag.find("img") is not None:
        return _image(tag, ctx)
    return _fallback(tag, ctx)


def _is_button(tag: Tag) -> bool:
    return any(c in BUTTON_CLASSES for c in _classes(tag))


def _anchor(tag: Tag, ctx: _Context) -> Block:
    """Links styled as calls-to-action become buttons; other links stay rich text."""
    if _is_button(tag):
        variant = "secondary" if SECONDARY_CLASS in _classes(tag) else "primary"
        return create_button_block(text=tag.get_text().strip(), url=tag.get("href") or "#", variant=variant)
    return create_text_block(_rich_text(str(tag), ctx, plain_text_content(tag.get_text())))


def _pre(tag: Tag, ctx: _Context) -> Block:
    code = tag.find("code")
    return create_code_block(
        code=(code or tag).get_text(),
        language=language_from_class(code),
        inline=False,
    )


def _code(tag: Tag, ctx: _Context) -> Optional[Block]:
    if tag.parent is not None and tag.parent.name == "pre":
        return None  # consumed by _pre
    return create_code_block(code=tag.get_text(), inline=True)


def _skip(tag: Tag, ctx: _Context) -> None:
    return None


def _columns(tag: Tag, ctx: _Context) -> Block:
    style = tag.get("style") or ""
    grid, gap = _GRID_RE.search(style), _GAP_RE.search(style)
    count = min(max(int(grid.group(1)), 2), 4) if grid else 2

    nested_ctx = replace(ctx, allow_columns=False)
    children = [
        child for child in tag.find_all(recursive=False)
        if any(_COLUMN_CHILD_RE.match(c) for c in _classes(child))
    ]
    columns = [_walk(child.contents, nested_ctx) for child in children[:count]]
    while len(columns) < count:
        columns.append([])

    block = create_columns_block(count)
    data = block.data.model_copy(update={
        "gap": int(gap.group(1)) if gap else DEFAULT_GAP,
        "columns": columns,
    })
    return block.model_copy(update={"data": data})


def _fallback(tag: Tag, ctx: _Context) -> Optional[Block]:
    text = tag.get_text().strip()
    if not text:
        return None
    return create_text_block(plain_text_content(text))


HANDLERS: dict[str, Handler] = {
    **{name: _text_element for name in HEADING_TAGS},
    "p":      _text_element,
    "img":    _image,
    "figure": _figure,
    "a":      _anchor,
    "pre":    _pre,
    "code":   _code,
    "script": _skip,
    "style":  _skip,
}


# --- walk ---

def _element_to_block(tag: Tag, ctx: _Context) -> Optional[Block]:
    if ctx.allow_columns and COLUMNS_CLASS in _classes(tag):
        return _columns(tag, ctx)
    return HANDLERS.get(tag.name, _fallback)(tag, ctx)


def _walk(nodes, ctx: _Context) -> list[Block]:
    """Convert sibling nodes to blocks; loose non-blank text becomes a text block."""
    blocks: list[Block] = []
    for node in nodes:
        if isinstance(node, Tag):
            block = _element_to_block(node, ctx)
            if block is not None:
                blocks.append(block)
        elif isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            text = str(node).strip()
            if text:
                blocks.append(create_text_block(plain_text_content(text)))
    return blocks


def html_to_blocks(html: str, richtext: Optional[RichTextCodec] = None) -> Document:
    """Best-effort conversion of legacy HTML into a Document.

    Empty or whitespace-only input yields a document with no blocks. When the
    walk produces nothing, the whole input becomes one text block.
    """
    if not html or not html.strip():
        return empty_document()

    ctx = _Context(richtext=richtext or DEFAULT_CODEC)
    soup = BeautifulSoup(html, "html.parser")
    root = soup.body or soup
    blocks = _walk(root.contents, ctx)

    if not blocks:
        blocks = [create_text_block(_rich_text(html, ctx, plain_text_content(html)))]

    logger.debug("html_parsed", blocks=len(blocks))
    return Document(blocks=blocks)
