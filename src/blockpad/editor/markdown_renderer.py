"""Render blocks to markup.

This module converts Block objects back to markup text for persistence,
and offers two read-only views built on the same markup: an HTML preview
and a heading outline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import mistletoe

from .blocks_models import CONTINUABLE_TYPES, HEADING_LEVELS, Block, BlockType


def render_markdown(blocks: Sequence[Block]) -> str:
    """Render a list of blocks to markup, one chunk per block.

    Args:
        blocks: Blocks in document order.

    Returns:
        Markup text, blocks joined by a single newline.
    """
    return "\n".join(_render_block(blocks, i) for i in range(len(blocks)))


def numbered_ordinal(blocks: Sequence[Block], index: int) -> int:
    """Get the display number of the numbered-list block at ``index``.

    Ordinals are not stored; they count the run of numbered-list blocks
    immediately preceding this one.
    """
    num = 1
    for j in range(index - 1, -1, -1):
        if blocks[j].type != BlockType.NUMBERED_LIST:
            break
        num += 1
    return num


def _render_block(blocks: Sequence[Block], index: int) -> str:
    """Render a single block to its markup line(s)."""
    block = blocks[index]
    block_type = block.type

    if block_type in HEADING_LEVELS:
        return f"{'#' * HEADING_LEVELS[block_type]} {block.content}"
    elif block_type == BlockType.BULLET_LIST:
        return f"- {block.content}"
    elif block_type == BlockType.NUMBERED_LIST:
        return f"{numbered_ordinal(blocks, index)}. {block.content}"
    elif block_type == BlockType.CHECKLIST:
        checkbox = "[x]" if block.checked else "[ ]"
        return f"- {checkbox} {block.content}"
    elif block_type in (BlockType.QUOTE, BlockType.CALLOUT):
        return f"> {block.content}"
    elif block_type == BlockType.CODE:
        return f"```{block.language or ''}\n{block.content}\n```"
    elif block_type == BlockType.DIVIDER:
        return "---"
    elif block_type == BlockType.IMAGE:
        return f"![{block.content}]({block.url or ''})"
    else:
        return block.content


# =============================================================================
# Read-only Views
# =============================================================================


def render_html(blocks: Sequence[Block]) -> str:
    """Render a document to HTML for the read-only preview.

    Runs of list items of the same type stay adjacent so they render as a
    single list; every other block is separated by a blank line so it
    renders as its own element.

    Args:
        blocks: Blocks in document order.

    Returns:
        HTML produced by mistletoe.
    """
    parts: list[str] = []
    for i, block in enumerate(blocks):
        if i > 0:
            prev = blocks[i - 1]
            same_list = prev.type == block.type and block.type in CONTINUABLE_TYPES
            parts.append("\n" if same_list else "\n\n")
        parts.append(_render_block(blocks, i))
    return mistletoe.markdown("".join(parts))


@dataclass(frozen=True)
class HeadingEntry:
    """One entry of a document outline."""

    block_id: str
    level: int
    text: str


def extract_headings(blocks: Sequence[Block]) -> list[HeadingEntry]:
    """Collect the heading blocks of a document as an outline.

    Bold markers are dropped from the text; empty headings are skipped.
    """
    entries = []
    for block in blocks:
        level = HEADING_LEVELS.get(block.type)
        if level is None:
            continue
        text = block.content.replace("**", "").strip()
        if text:
            entries.append(HeadingEntry(block_id=block.id, level=level, text=text))
    return entries
