"""Persisted document boundary: load/dump JSON, traversal, invariant checks"""

import json
from collections.abc import Iterator, Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from pageblocks.core.exceptions import DocumentLoadError
from pageblocks.core.models import DOCUMENT_VERSION, BlockType, ColumnsBlock, Document


LEGACY_TYPE_ALIASES = {"paragraph": BlockType.text.value}


def empty_document() -> Document:
    return Document(version=DOCUMENT_VERSION, blocks=[])


def _normalize_block(raw: Any) -> Any:
    """Rewrite legacy block tags, descending one level into columns."""
    if not isinstance(raw, Mapping):
        return raw
    block = dict(raw)
    block["type"] = LEGACY_TYPE_ALIASES.get(block.get("type"), block.get("type"))
    data = block.get("data")
    if block["type"] == BlockType.columns.value and isinstance(data, Mapping):
        columns = data.get("columns")
        if isinstance(columns, list):
            block["data"] = {
                **data,
                "columns": [
                    [_normalize_block(b) for b in col] if isinstance(col, list) else col
                    for col in columns
                ],
            }
    return block


def load_document(raw: Union[str, bytes, Mapping[str, Any]]) -> Document:
    """Parse a persisted document. Raises DocumentLoadError if it is not a valid v1.0 document."""
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise DocumentLoadError(f"Invalid document JSON: {e}") from e

    if not isinstance(raw, Mapping):
        raise DocumentLoadError(f"Invalid document: expected an object, got {type(raw).__name__}")
    blocks = raw.get("blocks")
    if not isinstance(blocks, list):
        raise DocumentLoadError("Invalid document: missing 'blocks' array")
    version = raw.get("version", DOCUMENT_VERSION)
    if version != DOCUMENT_VERSION:
        raise DocumentLoadError(f"Unsupported document version: {version!r}")

    try:
        return Document.model_validate({"version": version, "blocks": [_normalize_block(b) for b in blocks]})
    except ValidationError as e:
        raise DocumentLoadError(f"Invalid document blocks: {e}") from e


def document_to_dict(doc: Document) -> dict[str, Any]:
    return doc.model_dump(mode="json", by_alias=True, exclude_none=True)


def dump_document(doc: Document, indent: Optional[int] = None) -> str:
    """Return the persisted JSON form of doc (camelCase keys, unset optionals omitted)."""
    return json.dumps(document_to_dict(doc), indent=indent, ensure_ascii=False)


def iter_blocks(doc: Document) -> Iterator:
    """Yield every block in document order, nested column blocks after their container."""
    for block in doc.blocks:
        yield block
        if isinstance(block, ColumnsBlock):
            for column in block.data.columns:
                yield from column


def check_invariants(doc: Document) -> list[str]:
    """Return violations of id uniqueness and the column-count rule; empty when valid."""
    problems: list[str] = []
    seen: set[str] = set()
    for block in iter_blocks(doc):
        if block.id in seen:
            problems.append(f"duplicate block id: {block.id}")
        seen.add(block.id)

    for block in doc.blocks:
        if not isinstance(block, ColumnsBlock):
            continue
        count = block.data.column_count
        if count not in (2, 3, 4):
            problems.append(f"{block.id}: columnCount {count} outside 2..4")
        if len(block.data.columns) != count:
            problems.append(f"{block.id}: {len(block.data.columns)} columns but columnCount is {count}")
        for column in block.data.columns:
            for nested in column:
                if isinstance(nested, ColumnsBlock):
                    problems.append(f"{block.id}: nested columns block {nested.id}")
    return problems
