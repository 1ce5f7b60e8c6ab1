"""List operations for a block document.

This module provides the mutations the editor performs on the ordered
block list:
- Inserting, deleting and reordering blocks
- Updating content, type, checklist state and image url

Every mutator returns whether the document changed. Operations that would
break an invariant (deleting the last block, checking a non-checklist
block) are silent no-ops that return False.
"""

from __future__ import annotations

import logging
from typing import Iterator

from .blocks_models import Block, BlockType, create_block
from .markdown_parser import parse_markdown
from .markdown_renderer import render_markdown

logger = logging.getLogger(__name__)


class BlockDocument:
    """An ordered, never-empty sequence of blocks."""

    def __init__(self, blocks: list[Block] | None = None) -> None:
        self._blocks: list[Block] = list(blocks) if blocks else [create_block()]

    @classmethod
    def from_markdown(cls, markdown: str, *, detect_callouts: bool = False) -> BlockDocument:
        """Build a document from markup text."""
        return cls(parse_markdown(markdown, detect_callouts=detect_callouts))

    def to_markdown(self) -> str:
        return render_markdown(self._blocks)

    # =========================================================================
    # Lookup
    # =========================================================================

    @property
    def blocks(self) -> list[Block]:
        """Snapshot of the blocks in order (the list is a copy)."""
        return list(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(list(self._blocks))

    def __getitem__(self, index: int) -> Block:
        return self._blocks[index]

    def index_of(self, block_id: str) -> int | None:
        for i, block in enumerate(self._blocks):
            if block.id == block_id:
                return i
        return None

    def get(self, block_id: str) -> Block | None:
        index = self.index_of(block_id)
        return self._blocks[index] if index is not None else None

    # =========================================================================
    # Structural Operations
    # =========================================================================

    def insert_after(
        self,
        index: int,
        block_type: BlockType = BlockType.TEXT,
        content: str = "",
    ) -> Block:
        """Insert a new block after ``index``.

        Args:
            index: Position of the block to insert after; -1 inserts at the front.
            block_type: Type of the new block.
            content: Content of the new block.

        Returns:
            The inserted block.
        """
        block = create_block(block_type, content)
        position = max(0, min(index + 1, len(self._blocks)))
        self._blocks.insert(position, block)
        logger.debug("Inserted %s block %s at %d", block.type.value, block.id, position)
        return block

    def delete(self, block_id: str) -> bool:
        """Remove a block, unless it is the only one left."""
        if len(self._blocks) <= 1:
            return False
        index = self.index_of(block_id)
        if index is None:
            return False
        del self._blocks[index]
        logger.debug("Deleted block %s", block_id)
        return True

    def reorder(self, source_index: int, dest_index: int) -> bool:
        """Move the block at ``source_index`` so it ends up at ``dest_index``."""
        count = len(self._blocks)
        if source_index == dest_index:
            return False
        if not (0 <= source_index < count and 0 <= dest_index < count):
            return False
        moved = self._blocks.pop(source_index)
        self._blocks.insert(dest_index, moved)
        return True

    # =========================================================================
    # Block Updates
    # =========================================================================

    def update_content(self, block_id: str, content: str) -> bool:
        block = self.get(block_id)
        if block is None or block.content == content:
            return False
        block.content = content
        return True

    def update_type(self, block_id: str, block_type: BlockType) -> bool:
        """Change a block's type, resetting checked/url per the new type."""
        block = self.get(block_id)
        if block is None:
            return False
        before = (block.type, block.checked, block.url)
        block.retype(block_type)
        return before != (block.type, block.checked, block.url)

    def toggle_check(self, block_id: str) -> bool:
        block = self.get(block_id)
        if block is None or block.type != BlockType.CHECKLIST:
            return False
        block.checked = not block.checked
        return True

    def set_url(self, block_id: str, url: str) -> bool:
        """Attach an image location; a no-op if the block is gone or no longer an image."""
        block = self.get(block_id)
        if block is None or block.type != BlockType.IMAGE:
            return False
        block.url = url
        return True
