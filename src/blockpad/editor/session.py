"""Editor session: the single owner of an open document.

The session holds the block document, the slash menu state and the focus
coordinator, and is the only entry point for mutating them. Every change
is serialized and handed to the ``on_change`` collaborator.

Image uploads are the one asynchronous path. An upload runs as an asyncio
task; its result comes back as an event (ImageUploaded/ImageUploadFailed)
through :meth:`EditorSession.dispatch`, keyed by block id, so a block
deleted in the meantime simply drops the update.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from ..errors import ConfigurationError, ValidationError
from ..settings import SUPPORTED_LOCALES, settings
from .blocks_document import BlockDocument
from .blocks_models import Block, BlockType, placeholder_for
from .focus import FocusCoordinator, TextSurface
from .key_handling import CaretState, FocusRequest, Key, KeyPress, handle_key
from .slash_menu import (
    CLOSED,
    MenuOpen,
    MenuState,
    SlashCommand,
    menu_after_edit,
    move_selection,
    strip_trigger,
)

logger = logging.getLogger(__name__)

UploadImage = Callable[[Any], Awaitable[str]]
PickImage = Callable[[], Any]


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class ImageUploaded:
    block_id: str
    url: str


@dataclass(frozen=True)
class ImageUploadFailed:
    block_id: str
    error: str


EditorEvent = Union[ImageUploaded, ImageUploadFailed]


class EditorSession:
    """One editing session over one document.

    Example:
        session = EditorSession("# Notes", on_change=store.save)
        session.register_surface(block_id, surface)
        session.handle_input(block_id, "# Notes/")
        session.handle_key(block_id, "Enter")
    """

    def __init__(
        self,
        initial_content: str = "",
        on_change: Callable[[str], None] | None = None,
        *,
        upload_image: UploadImage | None = None,
        pick_image: PickImage | None = None,
        coordinator: FocusCoordinator | None = None,
        locale: str | None = None,
        detect_callouts: bool = False,
    ) -> None:
        """Open a session.

        Args:
            initial_content: Markup of the stored document.
            on_change: Receives the serialized markup after every change.
            upload_image: Async callable turning an image file into a URL.
            pick_image: Asks the user for an image file; returns None if cancelled.
            coordinator: Focus coordinator; a fresh one by default.
            locale: UI locale for labels and placeholders. Defaults to settings.locale.
            detect_callouts: Import "> " lines with callout emoji as callouts.

        Raises:
            ConfigurationError: If the locale is not supported.
        """
        locale = locale or settings.locale
        if locale not in SUPPORTED_LOCALES:
            raise ConfigurationError(
                f"Unsupported locale: {locale}",
                setting="locale",
                expected=", ".join(SUPPORTED_LOCALES),
            )
        self.locale = locale
        self.document = BlockDocument.from_markdown(initial_content, detect_callouts=detect_callouts)
        self.coordinator = coordinator or FocusCoordinator()
        self.menu: MenuState = CLOSED

        self._on_change = on_change
        self._upload_image = upload_image
        self._pick_image = pick_image
        self._drag_index: int | None = None
        self._upload_files: dict[str, Any] = {}
        self._failed_uploads: dict[str, str] = {}
        self._tasks: set[asyncio.Task] = set()

    # =========================================================================
    # Views
    # =========================================================================

    @property
    def blocks(self) -> list[Block]:
        return self.document.blocks

    @property
    def markdown(self) -> str:
        return self.document.to_markdown()

    @property
    def is_blank(self) -> bool:
        """True for a document of one empty block (the "press /" hint)."""
        return len(self.document) == 1 and self.document[0].is_empty()

    @property
    def visible_commands(self) -> list[SlashCommand]:
        if isinstance(self.menu, MenuOpen):
            return self.menu.commands
        return []

    @property
    def failed_uploads(self) -> dict[str, str]:
        """Block id -> error message of uploads that failed."""
        return dict(self._failed_uploads)

    def is_upload_pending(self, block_id: str) -> bool:
        block = self.document.get(block_id)
        return block is not None and block.type == BlockType.IMAGE and not block.url

    def placeholder(self, block_id: str) -> str:
        block = self.document.get(block_id)
        if block is None or block.content:
            return ""
        return placeholder_for(block.type, self.locale)

    # =========================================================================
    # Surfaces and Focus
    # =========================================================================

    def register_surface(self, block_id: str, surface: TextSurface) -> int:
        handle = self.coordinator.register(block_id, surface)
        block = self.document.get(block_id)
        if block is not None and surface.text != block.content:
            surface.set_text(block.content)
        return handle

    def focus(self, block_id: str, at_end: bool = True) -> bool:
        return self.coordinator.focus(block_id, at_end=at_end)

    def _commit(self, focus: FocusRequest | None = None) -> None:
        """Propagate a document change to surfaces, focus and on_change."""
        if isinstance(self.menu, MenuOpen) and self.document.get(self.menu.block_id) is None:
            self.menu = CLOSED
        self.coordinator.sync(self.document.blocks)
        if focus is not None:
            self.coordinator.apply(focus)
        if self._on_change is not None:
            self._on_change(self.document.to_markdown())

    # =========================================================================
    # Input and Keys
    # =========================================================================

    def handle_input(self, block_id: str, content: str) -> None:
        """The user edited the text of ``block_id``."""
        changed = self.document.update_content(block_id, content)
        if self.document.get(block_id) is not None:
            self.menu = menu_after_edit(self.menu, block_id, content)
        if changed:
            self._commit()

    def handle_key(
        self,
        block_id: str,
        key: str | KeyPress,
        caret: CaretState | None = None,
    ) -> bool:
        """Handle a key press in ``block_id``.

        The slash menu sees the key first while it is open.

        Args:
            block_id: Block the key was pressed in.
            key: Key name or KeyPress.
            caret: Caret facts; read from the block's surface when omitted.

        Returns:
            True if the host should suppress the key's native action.
        """
        press = KeyPress.of(key)
        if isinstance(self.menu, MenuOpen) and self._handle_menu_key(press):
            return True

        if caret is None:
            caret = self.coordinator.caret(block_id)
        if caret is None:
            return False

        outcome = handle_key(self.document, block_id, press, caret)
        if outcome.changed:
            self._commit(outcome.focus)
        elif outcome.focus is not None:
            self.coordinator.apply(outcome.focus)
        return outcome.handled

    def _handle_menu_key(self, press: KeyPress) -> bool:
        menu = self.menu
        if press.key == Key.ARROW_DOWN:
            self.menu = move_selection(menu, 1)
            return True
        if press.key == Key.ARROW_UP:
            self.menu = move_selection(menu, -1)
            return True
        if press.key == Key.ENTER:
            command = menu.selected if isinstance(menu, MenuOpen) else None
            if command is not None:
                self.select_command(command.id)
            return True
        if press.key == Key.ESCAPE:
            self.menu = CLOSED
            return True
        return False

    # =========================================================================
    # Slash Menu
    # =========================================================================

    def close_menu(self) -> None:
        self.menu = CLOSED

    def select_command(
        self,
        block_type: BlockType | str,
        image_file: Any = None,
    ) -> asyncio.Task | None:
        """Commit a menu entry for the block the menu is open on.

        Args:
            block_type: Type of the chosen command.
            image_file: Image to upload for the image command; asked from
                ``pick_image`` when omitted.

        Returns:
            The upload task for the image command, otherwise None.

        Raises:
            ValidationError: If ``block_type`` is not a block type.
        """
        try:
            block_type = BlockType(block_type)
        except ValueError as e:
            raise ValidationError(
                f"Unknown block type: {block_type}", field="block_type", value=block_type
            ) from e

        menu = self.menu
        self.menu = CLOSED
        if not isinstance(menu, MenuOpen):
            return None
        block = self.document.get(menu.block_id)
        if block is None:
            return None

        self.document.update_content(block.id, strip_trigger(block.content))
        self.document.update_type(block.id, block_type)

        if block_type == BlockType.IMAGE:
            self._commit()
            if image_file is None and self._pick_image is not None:
                image_file = self._pick_image()
            if image_file is None:
                return None
            return self._start_upload(block.id, image_file)

        if block_type == BlockType.DIVIDER:
            index = self.document.index_of(block.id)
            new_block = self.document.insert_after(index, BlockType.TEXT)
            self._commit(FocusRequest(new_block.id))
        else:
            self._commit(FocusRequest(block.id, at_end=True))
        return None

    # =========================================================================
    # Block Operations
    # =========================================================================

    def insert_after(
        self,
        index: int,
        block_type: BlockType = BlockType.TEXT,
        content: str = "",
    ) -> str:
        """Insert a block after ``index`` and focus its start; returns its id."""
        block = self.document.insert_after(index, block_type, content)
        self._commit(FocusRequest(block.id))
        return block.id

    def insert_block_below(self, index: int) -> str:
        """The "+" affordance next to a block."""
        return self.insert_after(index)

    def delete_block(self, block_id: str) -> bool:
        if not self.document.delete(block_id):
            return False
        self._commit()
        return True

    def change_type(self, block_id: str, block_type: BlockType) -> bool:
        if not self.document.update_type(block_id, block_type):
            return False
        self._commit()
        return True

    def toggle_check(self, block_id: str) -> bool:
        if not self.document.toggle_check(block_id):
            return False
        self._commit()
        return True

    # =========================================================================
    # Drag and Drop
    # =========================================================================

    def begin_drag(self, index: int) -> None:
        self._drag_index = index

    def drag_over(self, index: int) -> bool:
        """Move the dragged block to ``index`` while the pointer is over it.

        The dragged block's index follows every move, so repeated calls
        shuffle it along live rather than once on drop.
        """
        if self._drag_index is None or self._drag_index == index:
            return False
        if not self.document.reorder(self._drag_index, index):
            return False
        self._drag_index = index
        self._commit()
        return True

    def end_drag(self) -> None:
        self._drag_index = None

    # =========================================================================
    # Uploads and Events
    # =========================================================================

    def dispatch(self, event: EditorEvent) -> bool:
        """Apply an asynchronous result to the document.

        Returns:
            True if the document changed.
        """
        if isinstance(event, ImageUploaded):
            self._upload_files.pop(event.block_id, None)
            self._failed_uploads.pop(event.block_id, None)
            if not self.document.set_url(event.block_id, event.url):
                logger.debug("Dropping upload result for missing block %s", event.block_id)
                return False
            self._commit()
            return True

        if isinstance(event, ImageUploadFailed):
            logger.warning("Image upload failed for block %s: %s", event.block_id, event.error)
            if self.document.get(event.block_id) is None:
                self._upload_files.pop(event.block_id, None)
            else:
                self._failed_uploads[event.block_id] = event.error
            return False

        raise ValidationError(f"Unknown editor event: {type(event).__name__}", field="event")

    def retry_upload(self, block_id: str) -> asyncio.Task | None:
        """Re-issue a failed upload for an image block that still exists."""
        block = self.document.get(block_id)
        image_file = self._upload_files.get(block_id)
        if block is None or block.type != BlockType.IMAGE or image_file is None:
            return None
        if block_id not in self._failed_uploads:
            return None
        return self._start_upload(block_id, image_file)

    def _start_upload(self, block_id: str, image_file: Any) -> asyncio.Task | None:
        if self._upload_image is None:
            logger.warning("No image uploader configured; block %s stays pending", block_id)
            return None
        self._upload_files[block_id] = image_file
        self._failed_uploads.pop(block_id, None)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.dispatch(ImageUploadFailed(block_id=block_id, error="no running event loop"))
            return None
        task = loop.create_task(self._run_upload(block_id, image_file))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_upload(self, block_id: str, image_file: Any) -> None:
        try:
            url = await self._upload_image(image_file)
        except Exception as e:
            self.dispatch(ImageUploadFailed(block_id=block_id, error=str(e) or type(e).__name__))
        else:
            self.dispatch(ImageUploaded(block_id=block_id, url=url))
