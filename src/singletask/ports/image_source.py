"""Image source interface."""

from typing import Protocol

from singletask.core.images import Image


class ImageSource(Protocol):
    """Interface for fetching a background image."""

    async def random_image(self) -> Image:
        """Fetch a random image (or a fixed stub when no credential is configured)."""
        ...
