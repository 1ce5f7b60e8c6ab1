"""Caret and focus coordination.

The editing engine never touches a text widget. It asks for caret facts
(CaretState) and answers with focus requests; this module maps block ids
to whatever focusable text surface the host provides and translates in
both directions.

Surfaces live in an arena: block ids map to handle indices into a list of
surfaces, and the mapping is private to the coordinator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol

from .blocks_models import Block
from .key_handling import CaretState, FocusRequest

logger = logging.getLogger(__name__)


class TextSurface(Protocol):
    """A focusable text input for one block."""

    @property
    def text(self) -> str: ...

    def set_text(self, text: str) -> None: ...

    def focus(self) -> None: ...

    def select(self, start: int, end: int | None = None) -> None:
        """Set the selection; ``end`` None collapses it at ``start``."""
        ...

    def selection(self) -> tuple[int, int]:
        """Current selection as (start, end) offsets into ``text``."""
        ...


@dataclass
class BufferSurface:
    """Headless in-memory TextSurface."""

    text: str = ""
    start: int = 0
    end: int = 0
    focused: bool = False

    def set_text(self, text: str) -> None:
        self.text = text
        self.start = min(self.start, len(text))
        self.end = min(self.end, len(text))

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def select(self, start: int, end: int | None = None) -> None:
        self.start = max(0, min(start, len(self.text)))
        self.end = self.start if end is None else max(self.start, min(end, len(self.text)))

    def selection(self) -> tuple[int, int]:
        return self.start, self.end


class FocusCoordinator:
    """Maps block ids to text surfaces and places the caret."""

    def __init__(self) -> None:
        self._surfaces: list[TextSurface | None] = []
        self._handles: dict[str, int] = {}
        self._focused_id: str | None = None

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, block_id: str, surface: TextSurface) -> int:
        """Attach a surface to a block, replacing any previous one.

        Returns:
            The handle index of the surface.
        """
        handle = self._handles.get(block_id)
        if handle is not None:
            self._surfaces[handle] = surface
            return handle
        handle = len(self._surfaces)
        self._surfaces.append(surface)
        self._handles[block_id] = handle
        return handle

    def unregister(self, block_id: str) -> None:
        handle = self._handles.pop(block_id, None)
        if handle is not None:
            self._surfaces[handle] = None
        if self._focused_id == block_id:
            self._focused_id = None

    def has_surface(self, block_id: str) -> bool:
        return self._surface(block_id) is not None

    @property
    def focused_id(self) -> str | None:
        return self._focused_id

    def _surface(self, block_id: str) -> TextSurface | None:
        handle = self._handles.get(block_id)
        if handle is None:
            return None
        return self._surfaces[handle]

    def sync(self, blocks: Iterable[Block]) -> None:
        """Push block content into surfaces and drop surfaces of deleted blocks."""
        live = set()
        for block in blocks:
            live.add(block.id)
            surface = self._surface(block.id)
            if surface is not None and surface.text != block.content:
                surface.set_text(block.content)
        for block_id in [bid for bid in self._handles if bid not in live]:
            self.unregister(block_id)

    # =========================================================================
    # Focus Commands
    # =========================================================================

    def focus(self, block_id: str, at_end: bool = True) -> bool:
        """Focus a block's surface with the caret at its end or start.

        The caret only goes to the end when the surface has content.
        """
        surface = self._surface(block_id)
        if surface is None:
            logger.debug("No surface registered for block %s", block_id)
            return False
        surface.focus()
        if at_end and surface.text:
            surface.select(len(surface.text))
        else:
            surface.select(0)
        self._focused_id = block_id
        return True

    def place_caret(self, block_id: str, offset: int) -> bool:
        """Focus a block's surface with a collapsed caret at ``offset``."""
        surface = self._surface(block_id)
        if surface is None:
            return False
        surface.focus()
        surface.select(max(0, min(offset, len(surface.text))))
        self._focused_id = block_id
        return True

    def apply(self, request: FocusRequest) -> bool:
        if request.offset is not None:
            return self.place_caret(request.block_id, request.offset)
        return self.focus(request.block_id, at_end=request.at_end)

    def note_focus(self, block_id: str) -> None:
        """Record that the host moved focus into ``block_id`` (e.g. a click)."""
        self._focused_id = block_id

    # =========================================================================
    # Caret Queries
    # =========================================================================

    def caret(self, block_id: str) -> CaretState | None:
        surface = self._surface(block_id)
        if surface is None:
            return None
        start, end = surface.selection()
        return CaretState.at(surface.text, start, end)

    def caret_offset(self, block_id: str) -> int | None:
        caret = self.caret(block_id)
        return caret.offset if caret else None

    def is_collapsed(self, block_id: str) -> bool:
        caret = self.caret(block_id)
        return caret.collapsed if caret else True

    def text_before(self, block_id: str) -> str:
        caret = self.caret(block_id)
        return caret.text_before if caret else ""

    def text_after(self, block_id: str) -> str:
        caret = self.caret(block_id)
        return caret.text_after if caret else ""
