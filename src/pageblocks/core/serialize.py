"""Document -> flat HTML serializer, one block at a time"""

import html
from typing import Optional

import structlog

from pageblocks.core.exceptions import RichTextError
from pageblocks.core.models import (
    DEFAULT_GAP,
    Block,
    ButtonBlock,
    CodeBlock,
    ColumnsBlock,
    Document,
    ImageBlock,
    TextBlock,
)
from pageblocks.core.richtext import DEFAULT_CODEC, RichTextCodec


logger = structlog.get_logger()

BLOCK_SEPARATOR = "\n"
BUTTON_CLASSES = {"primary": "btn-primary", "secondary": "btn-secondary"}
COLUMNS_CLASS = "columns-container"


def escape_html(text: str) -> str:
    """Escape &, <, >, double and single quotes for element text and attribute values."""
    return html.escape(text, quote=True)


def _text_html(block: TextBlock, richtext: RichTextCodec) -> str:
    try:
        return richtext.to_html(block.data.content)
    except RichTextError as e:
        logger.error("richtext_render_failed", block_id=block.id, error=str(e))
        return ""


def _image_html(block: ImageBlock) -> str:
    data = block.data
    img = f'<img src="{escape_html(data.src)}" alt="{escape_html(data.alt or "")}"'
    if data.width:
        img += f' width="{int(data.width)}"'
    if data.height:
        img += f' height="{int(data.height)}"'
    img += " />"
    if data.caption:
        return f"<figure>{img}<figcaption>{escape_html(data.caption)}</figcaption></figure>"
    return img


def _button_html(block: ButtonBlock) -> str:
    data = block.data
    cls = BUTTON_CLASSES.get(data.variant, BUTTON_CLASSES["primary"])
    return f'<a href="{escape_html(data.url)}" class="{cls}">{escape_html(data.text)}</a>'


def _code_html(block: CodeBlock) -> str:
    data = block.data
    if data.inline:
        return f"<code>{escape_html(data.code)}</code>"
    lang = f' class="language-{escape_html(data.language)}"' if data.language else ""
    return f"<pre><code{lang}>{escape_html(data.code)}</code></pre>"


def _columns_html(block: ColumnsBlock, richtext: RichTextCodec) -> str:
    data = block.data
    gap = data.gap if data.gap is not None else DEFAULT_GAP
    style = f"display: grid; grid-template-columns: repeat({data.column_count}, 1fr); gap: {gap}px;"
    columns = "".join(
        f'<div class="column-{i}">{"".join(block_to_html(b, richtext) for b in column)}</div>'
        for i, column in enumerate(data.columns, start=1)
    )
    return f'<div class="{COLUMNS_CLASS}" style="{style}">{columns}</div>'


def block_to_html(block: Block, richtext: Optional[RichTextCodec] = None) -> str:
    """Render a single block; unknown variants render as an empty string."""
    richtext = richtext or DEFAULT_CODEC
    if isinstance(block, TextBlock):
        return _text_html(block, richtext)
    if isinstance(block, ImageBlock):
        return _image_html(block)
    if isinstance(block, ButtonBlock):
        return _button_html(block)
    if isinstance(block, CodeBlock):
        return _code_html(block)
    if isinstance(block, ColumnsBlock):
        return _columns_html(block, richtext)
    logger.warning("unhandled_block_variant", block_type=getattr(block, "type", None))
    return ""


def blocks_to_html(doc: Document, richtext: Optional[RichTextCodec] = None) -> str:
    """Render every block in order, joined by BLOCK_SEPARATOR. An empty document yields ''."""
    return BLOCK_SEPARATOR.join(block_to_html(b, richtext) for b in doc.blocks)
