"""Shared fixtures for core unit tests"""

import pytest

from pageblocks.core.blocks import (
    create_button_block,
    create_code_block,
    create_columns_block,
    create_image_block,
    create_text_block,
)
from pageblocks.core.models import Document
from pageblocks.core.operations import add_block_to_column
from pageblocks.core.richtext import plain_text_content


@pytest.fixture(name="text_block")
def text_block_fixture():
    return create_text_block(plain_text_content("Hello world"))


@pytest.fixture(name="two_block_doc")
def two_block_doc_fixture(text_block):
    return Document(blocks=[text_block, create_image_block("https://example.com/a.png", "A")])


@pytest.fixture(name="columns_doc")
def columns_doc_fixture():
    """A 3-column block with one nested block per column, between two top-level blocks."""
    columns = create_columns_block(3)
    doc = Document(blocks=[create_text_block(), columns, create_button_block()])
    doc = add_block_to_column(doc, columns.id, 0, create_text_block(plain_text_content("left")))
    doc = add_block_to_column(doc, columns.id, 1, create_code_block("x = 1", "python"))
    doc = add_block_to_column(doc, columns.id, 2, create_image_block("right.png", "right"))
    return doc


class StubCodec:
    """Rich-text stand-in that records fragments instead of understanding them."""

    def to_html(self, content):
        return f"<stub>{content['stub']}</stub>"

    def from_html(self, fragment):
        return {"stub": fragment}


@pytest.fixture(name="stub_codec")
def stub_codec_fixture():
    return StubCodec()
