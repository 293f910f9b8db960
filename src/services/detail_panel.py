"""Detail panel state - image carousel, lightbox and copy-phone acknowledgment."""

import asyncio
from typing import Callable, Optional, Sequence

from src.utils.logging import get_structured_logger, mask_phone

logger = get_structured_logger(__name__)

COPY_ACK_SECONDS = 2.0


def has_carousel_controls(images: Sequence[str]) -> bool:
    """Prev/next controls only make sense with more than one image."""
    return len(images) > 1


class DetailPanel:
    """Carousel index, lightbox toggle and the transient "copied" flag."""

    def __init__(self, copy_ack_seconds: float = COPY_ACK_SECONDS):
        self.current_image_index = 0
        self.is_maximized = False
        self.is_copied = False
        self.copy_ack_seconds = copy_ack_seconds
        self._copy_timer: Optional[asyncio.Task] = None

    def reset(self) -> None:
        """Called whenever a different listing is opened."""
        self.current_image_index = 0
        self.is_maximized = False

    def next(self, images: Sequence[str]) -> int:
        if has_carousel_controls(images):
            self.current_image_index = (self.current_image_index + 1) % len(images)
        return self.current_image_index

    def previous(self, images: Sequence[str]) -> int:
        if has_carousel_controls(images):
            self.current_image_index = (self.current_image_index - 1) % len(images)
        return self.current_image_index

    def maximize(self, images: Sequence[str]) -> None:
        if images:
            self.is_maximized = True

    def minimize(self) -> None:
        self.is_maximized = False

    def copy_phone(self, phone_number: Optional[str], clipboard: Callable[[str], None]) -> bool:
        """
        Put the owner's number on the clipboard and raise the "copied" flag.

        The flag drops back after ``copy_ack_seconds``; copying again
        restarts the countdown. Must be called from a running event loop.
        """
        if not phone_number:
            return False

        clipboard(phone_number)
        self.is_copied = True
        logger.debug("Phone number copied", phone=mask_phone(phone_number))

        if self._copy_timer is not None and not self._copy_timer.done():
            self._copy_timer.cancel()
        self._copy_timer = asyncio.get_running_loop().create_task(self._revert_copied())
        return True

    async def _revert_copied(self) -> None:
        await asyncio.sleep(self.copy_ack_seconds)
        self.is_copied = False

    def dispose(self) -> None:
        if self._copy_timer is not None and not self._copy_timer.done():
            self._copy_timer.cancel()
        self._copy_timer = None
