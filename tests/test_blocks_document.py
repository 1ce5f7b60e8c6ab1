"""Tests for blocks_document.py - List operations over a block document.

Tests:
- Insert/delete with the never-empty invariant
- Content/type/check/url updates
- Reordering
"""

from __future__ import annotations

import pytest

from blockpad.editor.blocks_document import BlockDocument
from blockpad.editor.blocks_models import BlockType


@pytest.fixture
def doc() -> BlockDocument:
    return BlockDocument.from_markdown("# Title\nfirst\nsecond")


# =============================================================================
# Structural Operation Tests
# =============================================================================


class TestInsertDelete:
    """Test inserting and deleting blocks."""

    def test_empty_document_has_one_block(self) -> None:
        doc = BlockDocument()

        assert len(doc) == 1
        assert doc[0].type == BlockType.TEXT

    def test_insert_after_index(self, doc: BlockDocument) -> None:
        """The new block lands right after the given index."""
        block = doc.insert_after(0, BlockType.BULLET_LIST, "item")

        assert doc.index_of(block.id) == 1
        assert [b.content for b in doc] == ["Title", "item", "first", "second"]

    def test_insert_at_front_and_end(self, doc: BlockDocument) -> None:
        """-1 inserts at the front; large indices append."""
        front = doc.insert_after(-1)
        end = doc.insert_after(100)

        assert doc.index_of(front.id) == 0
        assert doc.index_of(end.id) == len(doc) - 1

    def test_insert_checklist_unchecked(self, doc: BlockDocument) -> None:
        block = doc.insert_after(0, BlockType.CHECKLIST)

        assert block.checked is False

    def test_delete_block(self, doc: BlockDocument) -> None:
        target = doc[1]

        assert doc.delete(target.id) is True
        assert doc.get(target.id) is None
        assert len(doc) == 2

    def test_delete_unknown_block_is_noop(self, doc: BlockDocument) -> None:
        assert doc.delete("missing") is False
        assert len(doc) == 3

    def test_delete_last_block_is_noop(self) -> None:
        """The only block cannot be deleted."""
        doc = BlockDocument.from_markdown("only")
        only = doc[0]

        assert doc.delete(only.id) is False
        assert doc.blocks == [only]

    def test_repeated_deletes_keep_one_block(self, doc: BlockDocument) -> None:
        """No sequence of deletes empties the document."""
        for _ in range(5):
            for block in doc.blocks:
                doc.delete(block.id)
                assert len(doc) >= 1

        assert len(doc) == 1

    def test_blocks_is_a_snapshot(self, doc: BlockDocument) -> None:
        """Mutating the returned list does not touch the document."""
        snapshot = doc.blocks
        snapshot.clear()

        assert len(doc) == 3


class TestReorder:
    """Test moving blocks."""

    def test_move_down(self, doc: BlockDocument) -> None:
        assert doc.reorder(0, 2) is True
        assert [b.content for b in doc] == ["first", "second", "Title"]

    def test_move_up(self, doc: BlockDocument) -> None:
        assert doc.reorder(2, 0) is True
        assert [b.content for b in doc] == ["second", "Title", "first"]

    def test_same_index_is_noop(self, doc: BlockDocument) -> None:
        assert doc.reorder(1, 1) is False

    def test_out_of_range_is_noop(self, doc: BlockDocument) -> None:
        assert doc.reorder(0, 3) is False
        assert doc.reorder(-1, 0) is False
        assert [b.content for b in doc] == ["Title", "first", "second"]


# =============================================================================
# Update Tests
# =============================================================================


class TestUpdates:
    """Test in-place block updates."""

    def test_update_content(self, doc: BlockDocument) -> None:
        block = doc[1]

        assert doc.update_content(block.id, "changed") is True
        assert doc.update_content(block.id, "changed") is False
        assert block.content == "changed"

    @pytest.mark.parametrize("block_type", list(BlockType))
    def test_update_type_checked_hygiene(self, doc: BlockDocument, block_type: BlockType) -> None:
        """checked is defined iff the block is a checklist, after any update_type."""
        block = doc[1]
        doc.update_type(block.id, BlockType.CHECKLIST)
        doc.toggle_check(block.id)

        doc.update_type(block.id, block_type)

        for b in doc:
            assert (b.checked is not None) == (b.type == BlockType.CHECKLIST)

    def test_update_type_same_type_reports_no_change(self, doc: BlockDocument) -> None:
        assert doc.update_type(doc[0].id, BlockType.HEADING_1) is False

    def test_toggle_check(self) -> None:
        doc = BlockDocument.from_markdown("- [ ] task")
        block = doc[0]

        assert doc.toggle_check(block.id) is True
        assert block.checked is True
        assert doc.to_markdown() == "- [x] task"

    def test_toggle_check_ignores_non_checklist(self, doc: BlockDocument) -> None:
        block = doc[1]

        assert doc.toggle_check(block.id) is False
        assert block.checked is None

    def test_set_url_on_image(self) -> None:
        doc = BlockDocument.from_markdown("![cat]()")

        assert doc.set_url(doc[0].id, "https://img/cat.png") is True
        assert doc.to_markdown() == "![cat](https://img/cat.png)"

    def test_set_url_on_missing_block_is_noop(self, doc: BlockDocument) -> None:
        assert doc.set_url("gone", "https://img/cat.png") is False

    def test_set_url_on_non_image_is_noop(self, doc: BlockDocument) -> None:
        assert doc.set_url(doc[1].id, "https://img/cat.png") is False
        assert doc[1].url is None
