from __future__ import annotations

from collections.abc import Callable

import pytest

from blockpad.editor.focus import BufferSurface
from blockpad.editor.session import EditorSession


class ChangeRecorder:
    """Collects the markup handed to on_change."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def __call__(self, markdown: str) -> None:
        self.calls.append(markdown)

    @property
    def last(self) -> str | None:
        return self.calls[-1] if self.calls else None


@pytest.fixture
def changes() -> ChangeRecorder:
    return ChangeRecorder()


def _attach_surfaces(session: EditorSession) -> dict[str, BufferSurface]:
    """Register a headless surface for every block that has none yet."""
    surfaces = {}
    for block in session.blocks:
        if not session.coordinator.has_surface(block.id):
            surface = BufferSurface()
            session.register_surface(block.id, surface)
            surfaces[block.id] = surface
    return surfaces


@pytest.fixture
def attach_surfaces() -> Callable[[EditorSession], dict[str, BufferSurface]]:
    """Attach surfaces to blocks created after the session was built."""
    return _attach_surfaces


@pytest.fixture
def make_session(changes: ChangeRecorder) -> Callable[..., EditorSession]:
    """Build a session with surfaces attached to every initial block."""

    def _make(markdown: str = "", **kwargs) -> EditorSession:
        kwargs.setdefault("locale", "en")
        session = EditorSession(markdown, on_change=changes, **kwargs)
        _attach_surfaces(session)
        return session

    return _make
