"""Editing session: holds the current document snapshot and applies operations to it

The editing surface calls one method per operation; each call replaces the
snapshot and notifies the host with the JSON document. Edits are applied in
the order they arrive, to whatever snapshot is current.
"""

from collections.abc import Awaitable, Mapping
from typing import Any, Callable, Literal, Optional, Union

import structlog

from pageblocks.core import operations
from pageblocks.core.document import dump_document, empty_document, load_document
from pageblocks.core.exceptions import DocumentLoadError
from pageblocks.core.models import Block, Document
from pageblocks.core.parse import html_to_blocks
from pageblocks.core.richtext import RichTextCodec
from pageblocks.core.serialize import blocks_to_html


logger = structlog.get_logger()

Snapshot = Union[Document, Mapping[str, Any], str, bytes]
Uploader = Callable[[Any], Awaitable[Mapping[str, Any]]]


def _load(raw: Snapshot) -> Document:
    return raw if isinstance(raw, Document) else load_document(raw)


class EditorSession:
    """Current-document holder for one editor; single writer, last edit wins."""

    def __init__(
        self,
        initial: Optional[Snapshot] = None,
        on_change: Optional[Callable[[str], None]] = None,
        richtext: Optional[RichTextCodec] = None,
        ):
        self._on_change = on_change
        self._richtext = richtext
        self._content = empty_document()
        if initial:
            try:
                self._content = _load(initial)
            except DocumentLoadError as e:
                logger.warning("document_load_failed", error=str(e))

    @classmethod
    def from_html(
        cls,
        html: str,
        on_change: Optional[Callable[[str], None]] = None,
        richtext: Optional[RichTextCodec] = None,
        ) -> "EditorSession":
        """Start a session from legacy markup."""
        return cls(html_to_blocks(html, richtext), on_change=on_change, richtext=richtext)

    @property
    def content(self) -> Document:
        return self._content

    def to_json(self, indent: Optional[int] = None) -> str:
        return dump_document(self._content, indent=indent)

    def to_html(self) -> str:
        return blocks_to_html(self._content, self._richtext)

    def replace(self, raw: Snapshot) -> bool:
        """Adopt an externally supplied snapshot; invalid input is ignored. Returns True if adopted."""
        try:
            self._content = _load(raw)
        except DocumentLoadError as e:
            logger.warning("document_replace_ignored", error=str(e))
            return False
        return True

    def _commit(self, content: Document, op: str) -> Document:
        self._content = content
        logger.debug("document_changed", op=op, blocks=len(content.blocks))
        if self._on_change is not None:
            self._on_change(dump_document(content))
        return content

    # --- operations ---

    def add_block(self, block: Block, index: Optional[int] = None) -> Document:
        return self._commit(operations.add_block(self._content, block, index), "add_block")

    def remove_block(self, block_id: str) -> Document:
        return self._commit(operations.remove_block(self._content, block_id), "remove_block")

    def update_block(self, block_id: str, updates: dict[str, Any]) -> Document:
        return self._commit(operations.update_block(self._content, block_id, updates), "update_block")

    def reorder_blocks(self, from_index: int, to_index: int) -> Document:
        return self._commit(operations.reorder_blocks(self._content, from_index, to_index), "reorder_blocks")

    def duplicate_block(self, block_id: str) -> Document:
        return self._commit(operations.duplicate_block(self._content, block_id), "duplicate_block")

    def add_block_to_column(self, columns_block_id: str, column_index: int, block: Block) -> Document:
        return self._commit(
            operations.add_block_to_column(self._content, columns_block_id, column_index, block),
            "add_block_to_column",
        )

    def remove_block_from_column(self, columns_block_id: str, column_index: int, block_id: str) -> Document:
        return self._commit(
            operations.remove_block_from_column(self._content, columns_block_id, column_index, block_id),
            "remove_block_from_column",
        )

    def update_column_count(self, columns_block_id: str, new_count: Literal[2, 3, 4]) -> Document:
        return self._commit(
            operations.update_column_count(self._content, columns_block_id, new_count),
            "update_column_count",
        )

    async def upload_image(self, block_id: str, file: Any, uploader: Uploader) -> Document:
        """Upload file through the host's uploader, then point the image block at the returned url.

        Uploader failures propagate and leave the document untouched.
        """
        result = await uploader(file)
        return self.update_block(block_id, {"data": {"src": result["url"]}})
