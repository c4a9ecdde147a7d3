"""Unsplash API adapter - random background photo."""

import asyncio
import logging

import requests

from singletask.core.images import STUB_IMAGE, Image
from singletask.errors import DecodeError, TransportError

logger = logging.getLogger(__name__)

RANDOM_PHOTO_URL = "https://api.unsplash.com/photos/random?query=nature"


class UnsplashAdapter:
    """
    Unsplash API adapter.

    Implements ImageSource protocol. Without an API key (non-production
    environments) it always returns STUB_IMAGE and makes no requests.
    """

    def __init__(self, api_key: str | None = None, timeout: float | None = None):
        self.api_key = api_key or None
        self.timeout = timeout
        self._session = requests.Session()

    def _get_random(self) -> Image:
        try:
            resp = self._session.get(
                RANDOM_PHOTO_URL,
                headers={
                    "Accept-Version": "v1",
                    "Authorization": f"Client-ID {self.api_key}",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(str(e), method="GET", url=RANDOM_PHOTO_URL) from e

        if not resp.ok:
            raise TransportError.from_response("GET", RANDOM_PHOTO_URL, {}, resp.text)

        try:
            return Image.from_api(resp.json())
        except (ValueError, KeyError, TypeError) as e:
            raise DecodeError(f"Malformed Unsplash response: {e!r}") from e

    async def random_image(self) -> Image:
        """Fetch a random photo, or the stub when no key is configured."""
        if not self.api_key:
            return STUB_IMAGE
        return await asyncio.to_thread(self._get_random)
