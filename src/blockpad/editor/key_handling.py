"""Caret-aware key handling for the block editor.

Maps a key press in one block, plus the caret facts of that block, to a
mutation of the document:
- Enter splits the block (or ends a list on an empty item)
- Backspace at the start strips formatting, then merges into the previous block
- ArrowUp/ArrowDown at the edges move focus between blocks
- Tab turns a text block into a bullet item

The outcome tells the host whether to suppress the native key action and
which block should receive focus next.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .blocks_document import BlockDocument
from .blocks_models import CONTINUABLE_TYPES, Block, BlockType

logger = logging.getLogger(__name__)


class Key(str, Enum):
    """Keys the editor reacts to."""

    ENTER = "Enter"
    BACKSPACE = "Backspace"
    ARROW_UP = "ArrowUp"
    ARROW_DOWN = "ArrowDown"
    TAB = "Tab"
    ESCAPE = "Escape"


@dataclass(frozen=True)
class KeyPress:
    """A key event as delivered by the host."""

    key: str
    shift: bool = False

    @classmethod
    def of(cls, key: str | KeyPress) -> KeyPress:
        if isinstance(key, KeyPress):
            return key
        return cls(key=str(key.value if isinstance(key, Key) else key))


@dataclass(frozen=True)
class CaretState:
    """Caret facts for one block.

    ``offset`` is the selection start; ``text_after`` is everything from
    the selection start on, so a non-collapsed selection is carried along
    when the block is split.
    """

    offset: int
    collapsed: bool = True
    text_before: str = ""
    text_after: str = ""

    @classmethod
    def at(cls, text: str, offset: int, end: int | None = None) -> CaretState:
        """Build caret facts for ``text`` with the selection [offset, end]."""
        offset = max(0, min(offset, len(text)))
        collapsed = end is None or end == offset
        return cls(
            offset=offset,
            collapsed=collapsed,
            text_before=text[:offset],
            text_after=text[offset:],
        )


@dataclass(frozen=True)
class FocusRequest:
    """Where focus should go after a key was handled.

    ``offset`` wins over ``at_end`` when set.
    """

    block_id: str
    at_end: bool = False
    offset: int | None = None


@dataclass(frozen=True)
class KeyOutcome:
    handled: bool = False
    changed: bool = False
    focus: FocusRequest | None = None


IGNORED = KeyOutcome()


def handle_key(
    document: BlockDocument,
    block_id: str,
    key: str | KeyPress,
    caret: CaretState,
) -> KeyOutcome:
    """Apply a key press in ``block_id`` to the document.

    Args:
        document: The document to mutate.
        block_id: The block the key was pressed in.
        key: Key name or KeyPress.
        caret: Caret facts for that block.

    Returns:
        KeyOutcome; ``handled`` False means the host should let the key
        through unchanged.
    """
    press = KeyPress.of(key)
    index = document.index_of(block_id)
    if index is None:
        return IGNORED
    block = document[index]

    if press.key == Key.ENTER and not press.shift:
        return _handle_enter(document, block, index, caret)
    if press.key == Key.BACKSPACE:
        return _handle_backspace(document, block, index, caret)
    if press.key == Key.ARROW_UP:
        if caret.collapsed and caret.offset == 0 and index > 0:
            return KeyOutcome(handled=True, focus=FocusRequest(document[index - 1].id, at_end=True))
        return IGNORED
    if press.key == Key.ARROW_DOWN:
        at_end = caret.offset == len(block.content)
        if caret.collapsed and at_end and index < len(document) - 1:
            return KeyOutcome(handled=True, focus=FocusRequest(document[index + 1].id, at_end=False))
        return IGNORED
    if press.key == Key.TAB:
        # Tab never moves focus out of the editor
        changed = False
        if block.type == BlockType.TEXT:
            changed = document.update_type(block.id, BlockType.BULLET_LIST)
        return KeyOutcome(handled=True, changed=changed)

    return IGNORED


def _handle_enter(
    document: BlockDocument,
    block: Block,
    index: int,
    caret: CaretState,
) -> KeyOutcome:
    """Split the block at the caret, continuing lists."""
    if block.type == BlockType.CODE:
        return IGNORED

    before, after = caret.text_before, caret.text_after

    if block.type in CONTINUABLE_TYPES:
        if not before.strip():
            # Enter on an empty item ends the list
            document.update_content(block.id, before)
            document.update_type(block.id, BlockType.TEXT)
            return KeyOutcome(handled=True, changed=True)
        new_type = block.type
    else:
        new_type = BlockType.TEXT

    document.update_content(block.id, before)
    new_block = document.insert_after(index, new_type, after)
    return KeyOutcome(handled=True, changed=True, focus=FocusRequest(new_block.id, at_end=False))


def _handle_backspace(
    document: BlockDocument,
    block: Block,
    index: int,
    caret: CaretState,
) -> KeyOutcome:
    """Strip formatting, then merge into the previous block."""
    if not (caret.collapsed and caret.offset == 0):
        return IGNORED

    if block.type != BlockType.TEXT:
        document.update_type(block.id, BlockType.TEXT)
        return KeyOutcome(handled=True, changed=True)

    if index == 0:
        return IGNORED

    prev = document[index - 1]
    if prev.type == BlockType.DIVIDER:
        document.delete(prev.id)
        return KeyOutcome(handled=True, changed=True)

    merge_point = len(prev.content)
    document.update_content(prev.id, prev.content + block.content)
    document.delete(block.id)
    logger.debug("Merged block %s into %s at %d", block.id, prev.id, merge_point)
    return KeyOutcome(
        handled=True,
        changed=True,
        focus=FocusRequest(prev.id, offset=merge_point),
    )
