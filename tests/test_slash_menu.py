"""Tests for slash_menu.py - Command registry, filtering and menu state."""

from __future__ import annotations

import pytest

from blockpad.editor.blocks_models import BlockType
from blockpad.editor.slash_menu import (
    CLOSED,
    SLASH_COMMANDS,
    MenuClosed,
    MenuOpen,
    filter_commands,
    menu_after_edit,
    move_selection,
    strip_trigger,
)


class TestRegistry:
    """Test the command table."""

    def test_one_command_per_block_type(self) -> None:
        """Every block type is reachable from the menu exactly once."""
        ids = [cmd.id for cmd in SLASH_COMMANDS]

        assert len(ids) == len(set(ids))
        assert set(ids) == set(BlockType)

    def test_menu_order(self) -> None:
        assert [cmd.label for cmd in SLASH_COMMANDS][:4] == [
            "Text",
            "Heading 1",
            "Heading 2",
            "Heading 3",
        ]
        assert SLASH_COMMANDS[-1].id == BlockType.DIVIDER

    def test_localized_labels(self) -> None:
        quote = next(cmd for cmd in SLASH_COMMANDS if cmd.id == BlockType.QUOTE)

        assert quote.label_for("en") == "Quote"
        assert quote.label_for("ko") == "인용"
        assert quote.description_for("ko") == "인용문"


class TestFilterCommands:
    """Test query filtering."""

    def test_empty_query_returns_all(self) -> None:
        assert filter_commands("") == list(SLASH_COMMANDS)

    def test_heading_query_keeps_order(self) -> None:
        """"head" matches the three headings in menu order."""
        assert [cmd.id for cmd in filter_commands("head")] == [
            BlockType.HEADING_1,
            BlockType.HEADING_2,
            BlockType.HEADING_3,
        ]

    def test_query_is_case_insensitive(self) -> None:
        assert [cmd.id for cmd in filter_commands("QUOTE")] == [BlockType.QUOTE]

    def test_keyword_match(self) -> None:
        assert [cmd.id for cmd in filter_commands("todo")] == [BlockType.CHECKLIST]

    def test_korean_query(self) -> None:
        """Korean labels and keywords are searchable."""
        assert [cmd.id for cmd in filter_commands("구분")] == [BlockType.DIVIDER]
        assert [cmd.id for cmd in filter_commands("사진")] == [BlockType.IMAGE]

    def test_no_match(self) -> None:
        assert filter_commands("zzz") == []


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("/", ""),
        ("/head", ""),
        ("Intro /h1", "Intro"),
        ("path/to", "path"),
        ("keep  ", "keep"),
    ],
)
def test_strip_trigger(content: str, expected: str) -> None:
    """The trailing trigger is removed and whitespace trimmed."""
    assert strip_trigger(content) == expected


# =============================================================================
# Menu State Tests
# =============================================================================


class TestMenuState:
    """Test menu transitions."""

    def test_slash_opens_menu(self) -> None:
        state = menu_after_edit(CLOSED, "b1", "Notes /")

        assert state == MenuOpen(block_id="b1", query="", selected_index=0, anchor=6)

    def test_typing_refreshes_query_and_resets_selection(self) -> None:
        state = MenuOpen(block_id="b1", query="", selected_index=3)

        state = menu_after_edit(state, "b1", "/hea")

        assert isinstance(state, MenuOpen)
        assert state.query == "hea"
        assert state.selected_index == 0

    def test_deleting_slash_closes_menu(self) -> None:
        state = menu_after_edit(MenuOpen(block_id="b1"), "b1", "plain")

        assert state is CLOSED

    def test_space_after_query_closes_menu(self) -> None:
        """A space ends the trigger word."""
        state = menu_after_edit(MenuOpen(block_id="b1", query="h"), "b1", "/h ")

        assert isinstance(state, MenuClosed)

    def test_edit_in_other_block_leaves_menu_open(self) -> None:
        state = MenuOpen(block_id="b1", query="h")

        assert menu_after_edit(state, "b2", "plain") is state

    def test_selected_command(self) -> None:
        state = MenuOpen(block_id="b1", query="head", selected_index=1)

        assert state.selected is not None
        assert state.selected.id == BlockType.HEADING_2

    def test_selected_is_none_without_matches(self) -> None:
        assert MenuOpen(block_id="b1", query="zzz").selected is None


class TestMoveSelection:
    """Test keyboard highlight movement."""

    def test_move_down_and_up(self) -> None:
        state = MenuOpen(block_id="b1", query="head")

        state = move_selection(state, 1)
        state = move_selection(state, 1)
        assert state.selected_index == 2

        state = move_selection(state, -1)
        assert state.selected_index == 1

    def test_clamped_at_bounds(self) -> None:
        """The highlight stops at the first and last entries."""
        state = MenuOpen(block_id="b1", query="head")

        assert move_selection(state, -1).selected_index == 0
        assert move_selection(state, 10).selected_index == 2

    def test_clamped_when_empty(self) -> None:
        state = MenuOpen(block_id="b1", query="zzz")

        assert move_selection(state, 1).selected_index == 0

    def test_closed_menu_is_unchanged(self) -> None:
        assert move_selection(CLOSED, 1) is CLOSED
