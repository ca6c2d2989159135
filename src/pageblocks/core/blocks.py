"""Block constructors: one per variant, each stamping a fresh id and defaults"""

import time
from typing import Any, Literal, Optional
from uuid import uuid4

from pageblocks.core.models import (
    DEFAULT_GAP,
    ButtonBlock,
    ButtonData,
    CodeBlock,
    CodeData,
    ColumnsBlock,
    ColumnsData,
    ImageBlock,
    ImageData,
    TextBlock,
    TextData,
)
from pageblocks.core.richtext import empty_text_content, heading_content


def generate_block_id() -> str:
    """Return a unique block id: millisecond timestamp plus a random suffix."""
    return f"block-{int(time.time() * 1000)}-{uuid4().hex[:12]}"


def create_text_block(content: Optional[dict[str, Any]] = None) -> TextBlock:
    """Text block holding an empty paragraph unless a rich-text payload is given."""
    return TextBlock(
        id=generate_block_id(),
        data=TextData(content=content if content is not None else empty_text_content()),
    )


def create_heading_block(level: Literal[1, 2, 3, 4] = 1) -> TextBlock:
    """Text block whose payload starts as an empty heading of the given level."""
    return TextBlock(id=generate_block_id(), data=TextData(content=heading_content(level)))


def create_image_block(src: str = "", alt: str = "") -> ImageBlock:
    return ImageBlock(id=generate_block_id(), data=ImageData(src=src, alt=alt))


def create_button_block(
    text: str = "Click me",
    url: str = "#",
    variant: Literal["primary", "secondary"] = "primary",
    ) -> ButtonBlock:
    return ButtonBlock(id=generate_block_id(), data=ButtonData(text=text, url=url, variant=variant))


def create_columns_block(column_count: Literal[2, 3, 4] = 2) -> ColumnsBlock:
    """Columns block with column_count empty columns and the default gap."""
    return ColumnsBlock(
        id=generate_block_id(),
        data=ColumnsData(
            column_count=column_count,
            gap=DEFAULT_GAP,
            columns=[[] for _ in range(column_count)],
        ),
    )


def create_code_block(code: str = "", language: Optional[str] = None, inline: bool = False) -> CodeBlock:
    return CodeBlock(id=generate_block_id(), data=CodeData(code=code, language=language, inline=inline))


BLOCK_FACTORIES = {
    "text":    create_text_block,
    "heading": create_heading_block,
    "image":   create_image_block,
    "button":  create_button_block,
    "columns": create_columns_block,
    "code":    create_code_block,
}
