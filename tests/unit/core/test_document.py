"""Unit tests for core/document.py"""

import json

import pytest

from pageblocks.core.blocks import create_code_block, create_columns_block, create_text_block
from pageblocks.core.document import (
    check_invariants,
    document_to_dict,
    dump_document,
    empty_document,
    iter_blocks,
    load_document,
)
from pageblocks.core.exceptions import DocumentLoadError
from pageblocks.core.models import ColumnsBlock, Document


def test_empty_document():
    """The empty document is version 1.0 with no blocks."""
    assert document_to_dict(empty_document()) == {"version": "1.0", "blocks": []}


def test_dump_uses_persisted_field_names(columns_doc):
    """columnCount is camelCase and unset optionals are omitted."""
    data = json.loads(dump_document(columns_doc))
    columns = data["blocks"][1]
    assert columns["type"] == "columns"
    assert columns["data"]["columnCount"] == 3
    assert "column_count" not in columns["data"]
    nested_code = columns["data"]["columns"][1][0]
    assert nested_code["data"] == {"code": "x = 1", "language": "python", "inline": False}
    assert "caption" not in columns["data"]["columns"][2][0]["data"]


def test_load_round_trips_dump(columns_doc):
    """Loading a dumped document gives an equal document."""
    assert load_document(dump_document(columns_doc, indent=2)) == columns_doc


def test_load_accepts_mapping_and_bytes(two_block_doc):
    """Already-decoded data and raw bytes load too."""
    assert load_document(document_to_dict(two_block_doc)) == two_block_doc
    assert load_document(dump_document(two_block_doc).encode("utf-8")) == two_block_doc


def test_load_missing_version_defaults():
    """A document without a version tag is read as 1.0."""
    assert load_document('{"blocks": []}').version == "1.0"


def test_load_rewrites_legacy_paragraph_tag():
    """Older documents tag text blocks as 'paragraph', including inside columns."""
    raw = {
        "version": "1.0",
        "blocks": [
            {"id": "a", "type": "paragraph", "data": {"content": {"type": "doc", "content": []}}},
            {"id": "b", "type": "columns", "data": {"columnCount": 2, "gap": 16, "columns": [
                [{"id": "c", "type": "paragraph", "data": {"content": {"type": "doc"}}}], [],
            ]}},
        ],
    }
    doc = load_document(raw)
    assert [b.type for b in iter_blocks(doc)] == ["text", "columns", "text"]


@pytest.mark.parametrize("raw", [
    "{not json",
    "[]",
    '{"version": "1.0"}',
    '{"version": "1.0", "blocks": {}}',
    '{"version": "2.0", "blocks": []}',
    '{"blocks": [{"id": "x", "type": "video", "data": {}}]}',
    '{"blocks": [{"id": "x", "type": "button", "data": {"text": "t"}}]}',
    '{"blocks": [{"id": "x", "type": "columns", "data": {"columnCount": 3, "columns": [[], []]}}]}',
    '{"blocks": [{"id": "x", "type": "columns", "data": {"columnCount": 5, "columns": [[], [], [], [], []]}}]}',
])
def test_load_rejects_invalid_documents(raw):
    """Malformed JSON, structure, version or blocks raise DocumentLoadError."""
    with pytest.raises(DocumentLoadError):
        load_document(raw)


def test_load_rejects_nested_columns():
    """Columns blocks cannot appear inside a column."""
    inner = {"id": "i", "type": "columns", "data": {"columnCount": 2, "columns": [[], []]}}
    raw = {"blocks": [{"id": "o", "type": "columns", "data": {"columnCount": 2, "columns": [[inner], []]}}]}
    with pytest.raises(DocumentLoadError):
        load_document(raw)


def test_iter_blocks_includes_nested(columns_doc):
    """Nested column blocks follow their container."""
    types = [b.type for b in iter_blocks(columns_doc)]
    assert types == ["text", "columns", "text", "code", "image", "button"]


def test_check_invariants_clean(columns_doc):
    """A well-formed document has no violations."""
    assert check_invariants(columns_doc) == []


def test_check_invariants_duplicate_ids():
    """Repeated ids are reported, nested ones included."""
    block = create_text_block()
    columns = create_columns_block(2)
    columns = columns.model_copy(update={"data": columns.data.model_copy(update={"columns": [[block], []]})})
    problems = check_invariants(Document(blocks=[block, columns]))
    assert problems == [f"duplicate block id: {block.id}"]


def test_check_invariants_column_count_mismatch():
    """A columns list that disagrees with columnCount is reported."""
    columns = create_columns_block(3)
    broken = columns.model_copy(update={"data": columns.data.model_copy(update={"columns": [[]]})})
    problems = check_invariants(Document(blocks=[broken, create_code_block()]))
    assert len(problems) == 1
    assert "1 columns but columnCount is 3" in problems[0]
    assert isinstance(broken, ColumnsBlock)
