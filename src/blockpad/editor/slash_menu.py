"""Slash command menu: registry, filtering and menu state.

Typing "/" at the end of a block opens the menu; the text after the slash
filters the commands. The menu state is an explicit tagged union
(MenuClosed | MenuOpen) and every transition is a pure function returning
the next state, so the session only has to store the current value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Union

from .blocks_models import BlockType

SLASH_TRIGGER_RE = re.compile(r"/(\S*)$")


@dataclass(frozen=True)
class SlashCommand:
    """A "convert to block type" entry of the menu."""

    id: BlockType
    label: str
    label_ko: str
    description: str
    description_ko: str
    keywords: tuple[str, ...]

    def label_for(self, locale: str) -> str:
        return self.label_ko if locale == "ko" else self.label

    def description_for(self, locale: str) -> str:
        return self.description_ko if locale == "ko" else self.description

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against labels and keywords."""
        if not query:
            return True
        q = query.lower()
        return (
            q in self.label.lower()
            or q in self.label_ko.lower()
            or any(q in keyword.lower() for keyword in self.keywords)
        )


SLASH_COMMANDS: tuple[SlashCommand, ...] = (
    SlashCommand(
        BlockType.TEXT, "Text", "텍스트",
        "Plain text block", "일반 텍스트",
        ("text", "paragraph", "텍스트", "문단"),
    ),
    SlashCommand(
        BlockType.HEADING_1, "Heading 1", "제목 1",
        "Large section heading", "큰 섹션 제목",
        ("h1", "heading", "title", "제목", "큰제목"),
    ),
    SlashCommand(
        BlockType.HEADING_2, "Heading 2", "제목 2",
        "Medium section heading", "중간 섹션 제목",
        ("h2", "heading", "subtitle", "소제목"),
    ),
    SlashCommand(
        BlockType.HEADING_3, "Heading 3", "제목 3",
        "Small section heading", "작은 섹션 제목",
        ("h3", "heading", "작은제목"),
    ),
    SlashCommand(
        BlockType.BULLET_LIST, "Bullet List", "글머리 기호",
        "Unordered list", "순서 없는 목록",
        ("bullet", "list", "ul", "목록", "글머리"),
    ),
    SlashCommand(
        BlockType.NUMBERED_LIST, "Numbered List", "번호 목록",
        "Ordered list", "순서 있는 목록",
        ("number", "list", "ol", "ordered", "번호", "순서"),
    ),
    SlashCommand(
        BlockType.CHECKLIST, "Checklist", "체크리스트",
        "To-do checklist", "할 일 체크리스트",
        ("check", "todo", "checkbox", "체크", "할일"),
    ),
    SlashCommand(
        BlockType.QUOTE, "Quote", "인용",
        "Quote or callout", "인용문",
        ("quote", "blockquote", "인용", "인용문"),
    ),
    SlashCommand(
        BlockType.CALLOUT, "Callout", "콜아웃",
        "Highlighted callout box", "강조 박스",
        ("callout", "alert", "info", "콜아웃", "알림", "강조"),
    ),
    SlashCommand(
        BlockType.IMAGE, "Image", "이미지",
        "Upload or embed image", "이미지 업로드 또는 삽입",
        ("image", "picture", "upload", "이미지", "사진", "업로드"),
    ),
    SlashCommand(
        BlockType.CODE, "Code", "코드",
        "Code block", "코드 블록",
        ("code", "snippet", "코드"),
    ),
    SlashCommand(
        BlockType.DIVIDER, "Divider", "구분선",
        "Horizontal divider", "수평 구분선",
        ("divider", "line", "hr", "구분선", "줄"),
    ),
)


def filter_commands(
    query: str,
    commands: tuple[SlashCommand, ...] = SLASH_COMMANDS,
) -> list[SlashCommand]:
    """Commands matching ``query``, in registry order."""
    return [cmd for cmd in commands if cmd.matches(query)]


def strip_trigger(content: str) -> str:
    """Remove the trailing "/query" (or lone "/") that opened the menu."""
    content = SLASH_TRIGGER_RE.sub("", content)
    if content.endswith("/"):
        content = content[:-1]
    return content.strip()


# =============================================================================
# Menu State
# =============================================================================


@dataclass(frozen=True)
class MenuClosed:
    pass


@dataclass(frozen=True)
class MenuOpen:
    """The menu is showing for ``block_id``.

    ``anchor`` is the offset of the triggering slash within the block
    content, for hosts that position the menu at the caret.
    """

    block_id: str
    query: str = ""
    selected_index: int = 0
    anchor: int = 0

    @property
    def commands(self) -> list[SlashCommand]:
        return filter_commands(self.query)

    @property
    def selected(self) -> SlashCommand | None:
        commands = self.commands
        if 0 <= self.selected_index < len(commands):
            return commands[self.selected_index]
        return None


MenuState = Union[MenuClosed, MenuOpen]

CLOSED = MenuClosed()


def menu_after_edit(state: MenuState, block_id: str, content: str) -> MenuState:
    """Open, refresh or close the menu after ``block_id`` got new content."""
    match = SLASH_TRIGGER_RE.search(content)
    if match:
        return MenuOpen(
            block_id=block_id,
            query=match.group(1),
            selected_index=0,
            anchor=match.start(),
        )
    if isinstance(state, MenuOpen) and state.block_id == block_id:
        return CLOSED
    return state


def move_selection(state: MenuState, delta: int) -> MenuState:
    """Move the highlight by ``delta``, clamped to the filtered list."""
    if not isinstance(state, MenuOpen):
        return state
    last = max(len(state.commands) - 1, 0)
    index = max(0, min(state.selected_index + delta, last))
    return replace(state, selected_index=index)
