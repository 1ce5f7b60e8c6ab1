"""Data models for the block editor.

This module defines the block value type and its invariants. A document
is a flat, ordered list of blocks; there is no nesting.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..errors import ValidationError


class BlockType(str, Enum):
    """Closed set of block kinds."""

    # Text blocks
    TEXT = "text"
    HEADING_1 = "heading1"
    HEADING_2 = "heading2"
    HEADING_3 = "heading3"

    # List blocks
    BULLET_LIST = "bullet-list"
    NUMBERED_LIST = "numbered-list"
    CHECKLIST = "checklist"

    # Special blocks
    QUOTE = "quote"
    CALLOUT = "callout"
    CODE = "code"
    DIVIDER = "divider"
    IMAGE = "image"


# Enter on a non-empty item of these types continues the list
CONTINUABLE_TYPES = frozenset({
    BlockType.BULLET_LIST,
    BlockType.NUMBERED_LIST,
    BlockType.CHECKLIST,
})

HEADING_LEVELS = {
    BlockType.HEADING_1: 1,
    BlockType.HEADING_2: 2,
    BlockType.HEADING_3: 3,
}


PLACEHOLDERS: dict[BlockType, dict[str, str]] = {
    BlockType.TEXT: {
        "en": "Type something or press '/' for commands",
        "ko": "텍스트를 입력하거나 '/'를 눌러 블록을 추가하세요",
    },
    BlockType.HEADING_1: {"en": "Heading 1", "ko": "제목 1"},
    BlockType.HEADING_2: {"en": "Heading 2", "ko": "제목 2"},
    BlockType.HEADING_3: {"en": "Heading 3", "ko": "제목 3"},
    BlockType.BULLET_LIST: {"en": "List item", "ko": "목록 항목"},
    BlockType.NUMBERED_LIST: {"en": "List item", "ko": "목록 항목"},
    BlockType.CHECKLIST: {"en": "To-do", "ko": "할 일"},
    BlockType.QUOTE: {"en": "Type a quote", "ko": "인용문을 입력하세요"},
    BlockType.CALLOUT: {"en": "Callout content", "ko": "콜아웃 내용"},
    BlockType.CODE: {"en": "Type code here", "ko": "코드를 입력하세요"},
    BlockType.DIVIDER: {"en": "", "ko": ""},
    BlockType.IMAGE: {"en": "Image alt text", "ko": "이미지 설명"},
}


def placeholder_for(block_type: BlockType, locale: str = "en") -> str:
    """Get the hint shown inside an empty block of the given type."""
    texts = PLACEHOLDERS[BlockType(block_type)]
    return texts.get(locale, texts["en"])


def new_block_id() -> str:
    """Generate an opaque, unique block id."""
    return f"block_{uuid.uuid4().hex[:12]}"


@dataclass
class Block:
    """A single block of a document.

    ``checked`` is only set on checklist blocks and ``url`` only on image
    blocks; :meth:`retype` keeps both in line when the type changes.
    """

    id: str
    type: BlockType = BlockType.TEXT
    content: str = ""

    # Type-specific fields
    checked: bool | None = None
    language: str | None = None
    url: str | None = None

    def retype(self, block_type: BlockType) -> None:
        """Change the block type, resetting type-specific fields."""
        block_type = BlockType(block_type)
        self.checked = False if block_type == BlockType.CHECKLIST else None
        if block_type == BlockType.IMAGE:
            self.url = self.url or ""
        else:
            self.url = None
        if block_type != BlockType.CODE:
            self.language = None
        self.type = block_type

    def is_empty(self) -> bool:
        return not self.content

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization, omitting unset fields."""
        result: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "content": self.content,
        }
        if self.checked is not None:
            result["checked"] = self.checked
        if self.language is not None:
            result["language"] = self.language
        if self.url is not None:
            result["url"] = self.url
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Block:
        """Create from dictionary.

        Raises:
            ValidationError: If the type is not a known block type.
        """
        raw_type = data.get("type", BlockType.TEXT.value)
        try:
            block_type = BlockType(raw_type)
        except ValueError as e:
            raise ValidationError(
                f"Unknown block type: {raw_type}", field="type", value=raw_type
            ) from e

        checked = None
        if block_type == BlockType.CHECKLIST:
            checked = bool(data.get("checked", False))

        url = None
        if block_type == BlockType.IMAGE:
            url = data.get("url")

        return cls(
            id=data.get("id") or new_block_id(),
            type=block_type,
            content=data.get("content", ""),
            checked=checked,
            language=data.get("language"),
            url=url,
        )


def create_block(block_type: BlockType = BlockType.TEXT, content: str = "") -> Block:
    """Create a new block with a fresh id.

    Args:
        block_type: Type of the new block.
        content: Initial text content.

    Returns:
        The new block; checklist blocks start unchecked.
    """
    block_type = BlockType(block_type)
    return Block(
        id=new_block_id(),
        type=block_type,
        content=content,
        checked=False if block_type == BlockType.CHECKLIST else None,
    )
