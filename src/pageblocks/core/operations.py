"""Pure document operations: each returns a new Document and never edits its input

A target id that matches nothing leaves the document unchanged. Column
operations only touch the block whose id matches and whose type is columns.
"""

from typing import Any, Callable, Literal, Optional

from pydantic import TypeAdapter

from pageblocks.core.blocks import generate_block_id
from pageblocks.core.models import Block, ColumnsBlock, Document


_BLOCK_ADAPTER: TypeAdapter = TypeAdapter(Block)


def _with_blocks(doc: Document, blocks: list) -> Document:
    return doc.model_copy(update={"blocks": blocks})


def _find_index(doc: Document, block_id: str) -> Optional[int]:
    for i, block in enumerate(doc.blocks):
        if block.id == block_id:
            return i
    return None


def _map_columns_block(doc: Document, columns_block_id: str, fn: Callable[[ColumnsBlock], ColumnsBlock]) -> Document:
    """Apply fn to the columns block with the given id; everything else passes through."""
    if not any(isinstance(b, ColumnsBlock) and b.id == columns_block_id for b in doc.blocks):
        return doc
    return _with_blocks(doc, [
        fn(b) if isinstance(b, ColumnsBlock) and b.id == columns_block_id else b
        for b in doc.blocks
    ])


def _with_columns(block: ColumnsBlock, columns: list[list], **updates: Any) -> ColumnsBlock:
    data = block.data.model_copy(update={"columns": columns, **updates})
    return block.model_copy(update={"data": data})


def add_block(doc: Document, block: Block, index: Optional[int] = None) -> Document:
    """Insert block at index; append when index is None or outside [0, len]."""
    blocks = list(doc.blocks)
    if index is not None and 0 <= index <= len(blocks):
        blocks.insert(index, block)
    else:
        blocks.append(block)
    return _with_blocks(doc, blocks)


def remove_block(doc: Document, block_id: str) -> Document:
    """Remove the top-level block with block_id. Nested column blocks are not searched."""
    if _find_index(doc, block_id) is None:
        return doc
    return _with_blocks(doc, [b for b in doc.blocks if b.id != block_id])


def update_block(doc: Document, block_id: str, updates: dict[str, Any]) -> Document:
    """Shallow-merge updates["data"] into the block's data and apply other top-level overrides.

    Keys may use persisted (camelCase) or attribute names. Overriding ``type`` is
    not a supported edit; the merged block is re-validated as whatever variant it
    then claims to be.
    """
    index = _find_index(doc, block_id)
    if index is None:
        return doc

    target = doc.blocks[index]
    current = target.model_dump()
    merged = {**current, **{k: v for k, v in updates.items() if k != "data"}}
    if updates.get("data"):
        aliases = {f.alias: name for name, f in type(target.data).model_fields.items() if f.alias}
        data_updates = {aliases.get(k, k): v for k, v in updates["data"].items()}
        merged["data"] = {**current["data"], **data_updates}
    blocks = list(doc.blocks)
    blocks[index] = _BLOCK_ADAPTER.validate_python(merged)
    return _with_blocks(doc, blocks)


def reorder_blocks(doc: Document, from_index: int, to_index: int) -> Document:
    """Move the block at from_index so it lands at to_index (splice out, splice in).

    An out-of-range from_index is a no-op; to_index is clamped to the shortened sequence.
    """
    if not 0 <= from_index < len(doc.blocks):
        return doc
    blocks = list(doc.blocks)
    moved = blocks.pop(from_index)
    blocks.insert(min(max(to_index, 0), len(blocks)), moved)
    return _with_blocks(doc, blocks)


def _clone_with_fresh_ids(block: Block) -> Block:
    clone = block.model_copy(deep=True, update={"id": generate_block_id()})
    if isinstance(clone, ColumnsBlock):
        columns = [
            [nested.model_copy(update={"id": generate_block_id()}) for nested in column]
            for column in clone.data.columns
        ]
        clone = _with_columns(clone, columns)
    return clone


def duplicate_block(doc: Document, block_id: str) -> Document:
    """Insert a deep copy with fresh ids (nested column blocks included) right after the original."""
    index = _find_index(doc, block_id)
    if index is None:
        return doc
    return add_block(doc, _clone_with_fresh_ids(doc.blocks[index]), index + 1)


def add_block_to_column(doc: Document, columns_block_id: str, column_index: int, block: Block) -> Document:
    """Append block to one column of a columns block.

    A column index inside columnCount but past the stored columns creates that
    column (padding any gap with empty columns). Indexes outside columnCount
    are a no-op, so columns always matches columnCount.
    """
    if isinstance(block, ColumnsBlock):
        return doc

    def _add(target: ColumnsBlock) -> ColumnsBlock:
        if not 0 <= column_index < target.data.column_count:
            return target
        columns = [list(c) for c in target.data.columns]
        while len(columns) <= column_index:
            columns.append([])
        columns[column_index].append(block)
        return _with_columns(target, columns)

    return _map_columns_block(doc, columns_block_id, _add)


def remove_block_from_column(doc: Document, columns_block_id: str, column_index: int, block_id: str) -> Document:
    """Filter block_id out of one column. Any miss leaves that part unchanged."""
    def _remove(target: ColumnsBlock) -> ColumnsBlock:
        if not 0 <= column_index < len(target.data.columns):
            return target
        columns = list(target.data.columns)
        columns[column_index] = [b for b in columns[column_index] if b.id != block_id]
        return _with_columns(target, columns)

    return _map_columns_block(doc, columns_block_id, _remove)


def update_column_count(doc: Document, columns_block_id: str, new_count: Literal[2, 3, 4]) -> Document:
    """Resize a columns block. Growing appends empty columns; shrinking drops trailing columns and their blocks."""
    def _resize(target: ColumnsBlock) -> ColumnsBlock:
        columns = list(target.data.columns[:new_count])
        while len(columns) < new_count:
            columns.append([])
        return _with_columns(target, columns, column_count=new_count)

    return _map_columns_block(doc, columns_block_id, _resize)
