"""Block editor engine.

This package implements a Notion-style block editor over a flat markup
document, independent of any UI toolkit.

Key components:
- blocks_models: Block, BlockType and the block invariants
- markdown_parser: Markup -> Blocks conversion
- markdown_renderer: Blocks -> Markup export, HTML preview, outline
- blocks_document: List operations (insert, delete, reorder, update)
- key_handling: Caret-aware Enter/Backspace/Arrow/Tab handling
- slash_menu: Slash command registry, filtering and menu state
- focus: Block id -> text surface mapping and caret placement
- session: The editing session tying it all together
- uploads: HTTP image upload collaborator
"""

from .blocks_document import BlockDocument
from .blocks_models import Block, BlockType, create_block, placeholder_for
from .focus import BufferSurface, FocusCoordinator, TextSurface
from .key_handling import CaretState, FocusRequest, Key, KeyOutcome, KeyPress, handle_key
from .markdown_parser import parse_markdown
from .markdown_renderer import (
    HeadingEntry,
    extract_headings,
    numbered_ordinal,
    render_html,
    render_markdown,
)
from .session import EditorSession, ImageUploaded, ImageUploadFailed
from .slash_menu import (
    CLOSED,
    SLASH_COMMANDS,
    MenuClosed,
    MenuOpen,
    SlashCommand,
    filter_commands,
)
from .uploads import HttpImageUploader, ImageFile

__all__ = [
    "Block",
    "BlockType",
    "create_block",
    "placeholder_for",
    "BlockDocument",
    "parse_markdown",
    "render_markdown",
    "render_html",
    "extract_headings",
    "numbered_ordinal",
    "HeadingEntry",
    "CaretState",
    "FocusRequest",
    "Key",
    "KeyOutcome",
    "KeyPress",
    "handle_key",
    "CLOSED",
    "SLASH_COMMANDS",
    "MenuClosed",
    "MenuOpen",
    "SlashCommand",
    "filter_commands",
    "BufferSurface",
    "FocusCoordinator",
    "TextSurface",
    "EditorSession",
    "ImageUploaded",
    "ImageUploadFailed",
    "HttpImageUploader",
    "ImageFile",
]
