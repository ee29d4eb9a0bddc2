"""Domain logic for turning ImageStudio requests into upstream image calls."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any, Optional

from fastapi import status

from .aiservices.imagegenerationclient import ImageGenerationClient
from .aiservices.openaiimagegenerationclient import OpenAIImageGenerationClient
from .config import Settings, get_settings
from .errors import (
    INVALID_RESPONSE_MESSAGE,
    RATE_LIMIT_MESSAGE,
    ConfigurationError,
    PromptValidationError,
    UpstreamFailure,
    UpstreamRejection,
)
from .prompts import get_image_generation_request

logger = logging.getLogger(__name__)


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _upstream_status(exc: Exception) -> Optional[int]:
    code = getattr(exc, "status_code", None)
    if code is None:
        code = getattr(exc, "status", None)
    return code if isinstance(code, int) else None


class ImageStudioService:
    """Validates prompts and adapts them to the hosted image provider."""

    def __init__(
        self,
        settings: Settings | None = None,
        image_client: ImageGenerationClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._image_client = image_client

    @property
    def image_client(self) -> ImageGenerationClient:
        # Built lazily so a missing key surfaces as a per-request 500.
        if self._image_client is None:
            self._image_client = OpenAIImageGenerationClient(self.settings)
        return self._image_client

    # ------------------------------------------------------------------
    # Image Generation
    # ------------------------------------------------------------------
    def generate_image(self, prompt: Optional[str]) -> str:
        """Generate a single image from a text prompt and return it as base64."""
        if not self.settings.has_image_api_key:
            raise ConfigurationError()

        if not isinstance(prompt, str) or not prompt.strip():
            raise PromptValidationError()

        request = get_image_generation_request(prompt)
        try:
            response = self.image_client.generate(request)
        except Exception as exc:
            logger.exception("Error generating image")
            code = _upstream_status(exc)
            if code == status.HTTP_400_BAD_REQUEST:
                raise UpstreamRejection(status_code=status.HTTP_400_BAD_REQUEST) from exc
            if code == status.HTTP_429_TOO_MANY_REQUESTS:
                raise UpstreamRejection(
                    RATE_LIMIT_MESSAGE, status_code=status.HTTP_429_TOO_MANY_REQUESTS
                ) from exc
            raise UpstreamFailure() from exc

        logger.info("Image generated: %r", response)
        return self._extract_image(response)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _extract_image(response: Any) -> str:
        data = _field(response, "data")
        if not isinstance(data, Sequence) or isinstance(data, (str, bytes)) or not data:
            raise UpstreamFailure(INVALID_RESPONSE_MESSAGE)

        image = _field(data[0], "b64_json")
        if not isinstance(image, str) or not image:
            raise UpstreamFailure(INVALID_RESPONSE_MESSAGE)
        return image


@lru_cache
def get_image_studio_service() -> ImageStudioService:
    return ImageStudioService(get_settings())
