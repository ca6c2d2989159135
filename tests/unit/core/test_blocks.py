"""Unit tests for core/blocks.py"""

import pytest
from pydantic import ValidationError

from pageblocks.core.blocks import (
    BLOCK_FACTORIES,
    create_button_block,
    create_code_block,
    create_columns_block,
    create_heading_block,
    create_image_block,
    create_text_block,
    generate_block_id,
)
from pageblocks.core.models import BlockType, DEFAULT_GAP


def test_generate_block_id_is_unique():
    """A burst of ids generated in the same millisecond never collides."""
    ids = {generate_block_id() for _ in range(2000)}
    assert len(ids) == 2000
    assert all(i.startswith("block-") for i in ids)


def test_text_block_defaults_to_empty_paragraph():
    """A new text block holds a doc with one empty paragraph."""
    block = create_text_block()
    assert block.type == BlockType.text.value
    assert block.data.content == {"type": "doc", "content": [{"type": "paragraph", "content": []}]}


def test_text_block_keeps_given_payload():
    """The rich-text payload is stored as given."""
    payload = {"type": "doc", "content": [{"type": "custom"}]}
    assert create_text_block(payload).data.content == payload


def test_heading_block_is_text_variant():
    """Headings are text blocks; the level lives inside the payload."""
    block = create_heading_block(3)
    assert block.type == "text"
    assert block.data.content["content"][0] == {"type": "heading", "attrs": {"level": 3}, "content": []}


def test_image_block_defaults():
    """A new image has empty src and alt and no optional fields."""
    block = create_image_block()
    assert block.type == "image"
    assert (block.data.src, block.data.alt) == ("", "")
    assert block.data.caption is None and block.data.width is None and block.data.height is None


def test_button_block_defaults():
    """A new button reads 'Click me', points at '#', and is primary."""
    block = create_button_block()
    assert (block.data.text, block.data.url, block.data.variant) == ("Click me", "#", "primary")


def test_code_block_defaults():
    """A new code block is empty, has no language, and is not inline."""
    block = create_code_block()
    assert (block.data.code, block.data.language, block.data.inline) == ("", None, False)


@pytest.mark.parametrize("count", [2, 3, 4])
def test_columns_block_has_count_empty_columns(count):
    """columnCount always equals the number of column sequences."""
    block = create_columns_block(count)
    assert block.data.column_count == count
    assert block.data.columns == [[] for _ in range(count)]
    assert block.data.gap == DEFAULT_GAP


def test_every_constructor_stamps_a_fresh_id():
    """Two blocks from the same constructor never share an id."""
    for factory in BLOCK_FACTORIES.values():
        assert factory().id != factory().id


def test_blocks_are_immutable():
    """Snapshots cannot be edited in place."""
    block = create_button_block()
    with pytest.raises(ValidationError):
        block.data.text = "changed"
