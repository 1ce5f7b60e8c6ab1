"""Parse markup text into blocks.

The markup is line oriented: every non-blank line becomes one block,
except fenced code which spans lines. Rules are tried in a fixed order
and the first match wins, so parsing is deterministic and never fails;
anything unrecognized becomes a plain text block.
"""

from __future__ import annotations

import logging
import re

from .blocks_models import Block, BlockType, create_block

logger = logging.getLogger(__name__)

FENCE = "```"

_DIVIDER_RE = re.compile(r"^---+$")
_CHECKLIST_RE = re.compile(r"^- \[([ x])\] ")
_NUMBERED_RE = re.compile(r"^\d+\. ")
_IMAGE_RE = re.compile(r"^!\[([^\]]*)\]\((.*)\)$")

# A "> " line containing one of these is a callout candidate
CALLOUT_EMOJI = (
    "\U0001F4A1",  # light bulb
    "⚠",      # warning
    "ℹ",      # information
    "\U0001F525",  # fire
    "✅",      # check mark
    "❌",      # cross mark
    "\U0001F4CC",  # pushpin
)

# Longest prefix first
_HEADING_PREFIXES = (
    ("### ", BlockType.HEADING_3),
    ("## ", BlockType.HEADING_2),
    ("# ", BlockType.HEADING_1),
)


def parse_markdown(markdown: str, *, detect_callouts: bool = False) -> list[Block]:
    """Parse markup text into a list of blocks.

    Args:
        markdown: The markup text to parse.
        detect_callouts: Check for callout emoji before the quote rule.
            Off by default, in which case every "> " line is a quote.

    Returns:
        A non-empty list of blocks. Empty input yields one empty text block.
    """
    if not markdown or not markdown.strip():
        return [create_block()]

    lines = markdown.replace("\r\n", "\n").split("\n")
    blocks: list[Block] = []
    i = 0

    while i < len(lines):
        line = lines[i]

        if line.startswith(FENCE):
            language = line[len(FENCE):].strip() or None
            code_lines = []
            i += 1
            while i < len(lines) and not lines[i].startswith(FENCE):
                code_lines.append(lines[i])
                i += 1
            block = create_block(BlockType.CODE, "\n".join(code_lines))
            block.language = language
            blocks.append(block)
            i += 1  # closing fence
            continue

        block = _parse_line(line, detect_callouts=detect_callouts)
        if block is not None:
            blocks.append(block)
        i += 1

    if not blocks:
        return [create_block()]

    logger.debug("Parsed %d lines into %d blocks", len(lines), len(blocks))
    return blocks


def _parse_line(line: str, *, detect_callouts: bool) -> Block | None:
    """Convert a single non-fence line, or None for a blank line."""
    if _DIVIDER_RE.match(line.strip()):
        return create_block(BlockType.DIVIDER)

    for prefix, block_type in _HEADING_PREFIXES:
        if line.startswith(prefix):
            return create_block(block_type, line[len(prefix):])

    checklist_match = _CHECKLIST_RE.match(line)
    if checklist_match:
        block = create_block(BlockType.CHECKLIST, line[checklist_match.end():])
        block.checked = checklist_match.group(1) == "x"
        return block

    if line.startswith("- "):
        return create_block(BlockType.BULLET_LIST, line[2:])

    numbered_match = _NUMBERED_RE.match(line)
    if numbered_match:
        return create_block(BlockType.NUMBERED_LIST, line[numbered_match.end():])

    if line.startswith("> "):
        if detect_callouts and _is_callout(line):
            return create_block(BlockType.CALLOUT, line[2:])
        return create_block(BlockType.QUOTE, line[2:])

    if not line.strip():
        return None

    image_match = _IMAGE_RE.match(line.rstrip())
    if image_match:
        block = create_block(BlockType.IMAGE, image_match.group(1))
        block.url = image_match.group(2)
        return block

    return create_block(BlockType.TEXT, line)


def _is_callout(line: str) -> bool:
    """Check whether a quote line carries one of the callout emoji."""
    return any(emoji in line for emoji in CALLOUT_EMOJI)
