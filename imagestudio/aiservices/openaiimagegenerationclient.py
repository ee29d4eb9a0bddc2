# aiservices/openaiimagegenerationclient.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from openai import OpenAI

from ..config import Settings, get_settings
from .imagegenerationclient import ImageGenerationClient

logger = logging.getLogger(__name__)

# Parameters the OpenAI SDK accepts as keyword arguments; everything else is
# provider specific and travels in ``extra_body``.
_NATIVE_PARAMS = frozenset({"model", "prompt", "response_format"})


class OpenAIImageGenerationClient(ImageGenerationClient):
    """
    Works with any OpenAI-compatible images endpoint:
      - Nebius AI Studio (default base_url)
      - api.openai.com, vLLM, LiteLLM, etc. (set base_url)
    """

    def __init__(self, settings: Optional[Settings] = None, client: Any = None) -> None:
        self.settings = settings or get_settings()

        if client is not None:
            self._client = client
        else:
            self._client = OpenAI(
                api_key=self.settings.image_api_key.get_secret_value(),
                base_url=self.settings.image_api_base_url,
            )

    def generate(self, request: Dict[str, Any]) -> Any:
        native, extra = self._split_params(request)
        logger.debug("Requesting image from %s (model=%s)", self.settings.image_api_base_url, native.get("model"))
        return self._client.images.generate(**native, extra_body=extra)

    # --- Internals ------------------------------------------------------------

    @staticmethod
    def _split_params(request: Dict[str, Any]) -> tuple[Dict[str, Any], Dict[str, Any]]:
        native = {k: v for k, v in request.items() if k in _NATIVE_PARAMS}
        extra = {k: v for k, v in request.items() if k not in _NATIVE_PARAMS}
        return native, extra
