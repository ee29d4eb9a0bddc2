from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

# Abstract interface for image generation clients so the hosted provider can be
# swapped for a fake in tests.


class ImageGenerationClient(ABC):
    """Abstract interface for an image generation client.

    Implementations perform one blocking round trip per call and let provider
    errors propagate unchanged; the service layer maps them.
    """

    @abstractmethod
    def generate(self, request: Dict[str, Any]) -> Any:
        """Send ``request`` to the provider and return its raw reply.

        The reply exposes a ``data`` collection whose first entry carries a
        ``b64_json`` body, either as attributes or as mapping keys.
        """
