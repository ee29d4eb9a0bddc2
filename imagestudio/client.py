"""Python caller for the ImageStudio HTTP API.

Mirrors what the browser page does: post a prompt, turn the returned base64
body into a PNG data URI, keep a most-recent-first history and save images to
disk on request. Failures are never retried; callers re-submit the prompt.
"""

from __future__ import annotations

import base64
import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import httpx

logger = logging.getLogger(__name__)

PNG_DATA_URI_PREFIX = "data:image/png;base64,"
DEFAULT_ERROR_MESSAGE = "Failed to generate image"
_FILENAME_UNSAFE = re.compile(r"[^a-zA-Z0-9]")


class ImageStudioClientError(Exception):
    """Raised when a generation request fails; ``message`` is user-facing."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def download_filename(prompt: str) -> str:
    stem = _FILENAME_UNSAFE.sub("_", prompt[:30]) or "generated-image"
    return f"{stem}.png"


@dataclass
class GeneratedImage:
    prompt: str
    image_b64: str
    created_at: float = field(default_factory=time.time)

    @property
    def data_url(self) -> str:
        return PNG_DATA_URI_PREFIX + self.image_b64

    def download(self, directory: str | Path = ".") -> Path:
        """Decode the image and write it as a PNG into ``directory``."""
        target = Path(directory) / download_filename(self.prompt)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(base64.b64decode(self.image_b64))
        logger.info("Image saved to %s", target)
        return target


class ImageStudioClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self._http = http_client or httpx.Client(base_url=base_url)
        self._owns_http = http_client is None
        self.history: List[GeneratedImage] = []

    @property
    def current(self) -> Optional[GeneratedImage]:
        return self.history[0] if self.history else None

    def generate(self, prompt: str) -> GeneratedImage:
        if not prompt.strip():
            raise ImageStudioClientError("Please enter a prompt")

        response = self._http.post("/generate-image", json={"prompt": prompt})
        try:
            body = response.json()
        except ValueError:
            body = {}

        if not isinstance(body, dict):
            body = {}

        if not response.is_success:
            raise ImageStudioClientError(body.get("error") or DEFAULT_ERROR_MESSAGE, response.status_code)

        if not body.get("imageUrl"):
            raise ImageStudioClientError(DEFAULT_ERROR_MESSAGE, response.status_code)

        image = GeneratedImage(prompt=prompt, image_b64=body["imageUrl"])
        self.history.insert(0, image)
        return image

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "ImageStudioClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
