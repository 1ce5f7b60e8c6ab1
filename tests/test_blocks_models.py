"""Tests for blocks_models.py - Block value type and invariants."""

from __future__ import annotations

import pytest

from blockpad.editor.blocks_models import (
    CONTINUABLE_TYPES,
    Block,
    BlockType,
    create_block,
    placeholder_for,
)
from blockpad.errors import ValidationError


class TestCreateBlock:
    """Test the block constructor."""

    def test_defaults_to_empty_text(self) -> None:
        """A bare create_block is an empty text block."""
        block = create_block()

        assert block.type == BlockType.TEXT
        assert block.content == ""
        assert block.checked is None
        assert block.url is None

    def test_checklist_starts_unchecked(self) -> None:
        """Checklist blocks get checked=False."""
        block = create_block(BlockType.CHECKLIST, "Buy milk")

        assert block.checked is False
        assert block.content == "Buy milk"

    def test_ids_are_unique(self) -> None:
        """Every block gets a fresh id."""
        ids = {create_block().id for _ in range(50)}

        assert len(ids) == 50

    def test_accepts_type_string(self) -> None:
        """Type values can be passed as strings."""
        block = create_block("heading2", "Sub")

        assert block.type == BlockType.HEADING_2


class TestRetype:
    """Test the checked/url reset rules."""

    @pytest.mark.parametrize("block_type", list(BlockType))
    def test_checked_defined_iff_checklist(self, block_type: BlockType) -> None:
        """checked is set exactly when the new type is checklist."""
        block = create_block(BlockType.CHECKLIST)
        block.checked = True

        block.retype(block_type)

        if block_type == BlockType.CHECKLIST:
            assert block.checked is False
        else:
            assert block.checked is None

    def test_retype_to_image_keeps_existing_url(self) -> None:
        """An image keeps its url when retyped to image again."""
        block = Block(id="b1", type=BlockType.IMAGE, content="cat", url="https://x/cat.png")

        block.retype(BlockType.IMAGE)

        assert block.url == "https://x/cat.png"

    def test_retype_to_image_sets_empty_url(self) -> None:
        """A new image has an empty url until upload finishes."""
        block = create_block(BlockType.TEXT, "caption")

        block.retype(BlockType.IMAGE)

        assert block.url == ""

    def test_retype_away_from_image_clears_url(self) -> None:
        """Leaving the image type drops the url."""
        block = Block(id="b1", type=BlockType.IMAGE, url="https://x/cat.png")

        block.retype(BlockType.TEXT)

        assert block.url is None

    def test_retype_away_from_code_clears_language(self) -> None:
        """Only code blocks carry a language."""
        block = Block(id="b1", type=BlockType.CODE, content="x = 1", language="python")

        block.retype(BlockType.CODE)
        assert block.language == "python"

        block.retype(BlockType.TEXT)
        assert block.language is None
        assert "language" not in block.to_dict()


class TestSerialization:
    """Test to_dict/from_dict."""

    def test_to_dict_omits_unset_fields(self) -> None:
        """Only set optional fields appear."""
        data = create_block(BlockType.QUOTE, "wise words").to_dict()

        assert data["type"] == "quote"
        assert data["content"] == "wise words"
        assert "checked" not in data
        assert "url" not in data

    def test_from_dict_round_trip(self) -> None:
        """A dict from to_dict rebuilds the same block."""
        block = Block(id="b1", type=BlockType.CODE, content="x = 1", language="python")

        assert Block.from_dict(block.to_dict()) == block

    def test_from_dict_normalizes_checked(self) -> None:
        """checked is dropped from non-checklist payloads and defaulted on checklists."""
        text = Block.from_dict({"id": "a", "type": "text", "checked": True})
        todo = Block.from_dict({"id": "b", "type": "checklist"})

        assert text.checked is None
        assert todo.checked is False

    def test_from_dict_unknown_type_raises(self) -> None:
        """Unknown types are a validation error."""
        with pytest.raises(ValidationError) as exc_info:
            Block.from_dict({"id": "a", "type": "table"})

        assert exc_info.value.field == "type"


class TestPlaceholders:
    """Test placeholder text lookup."""

    def test_english_placeholder(self) -> None:
        assert placeholder_for(BlockType.CHECKLIST) == "To-do"

    def test_korean_placeholder(self) -> None:
        assert placeholder_for(BlockType.HEADING_1, "ko") == "제목 1"

    def test_unknown_locale_falls_back_to_english(self) -> None:
        assert placeholder_for(BlockType.QUOTE, "fr") == "Type a quote"

    def test_continuable_types(self) -> None:
        """Only list types continue on Enter."""
        assert CONTINUABLE_TYPES == {
            BlockType.BULLET_LIST,
            BlockType.NUMBERED_LIST,
            BlockType.CHECKLIST,
        }
