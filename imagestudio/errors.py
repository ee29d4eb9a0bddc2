"""Error taxonomy for the image generation proxy.

Every error carries the HTTP status and the public message returned to the
caller as ``{"error": message}``. Upstream details are logged, never exposed.
"""

from __future__ import annotations

from fastapi import status


class ImageStudioError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Failed to generate image. Please try again."

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ConfigurationError(ImageStudioError):
    """The upstream credential is missing."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Image API key is not configured"


class PromptValidationError(ImageStudioError):
    """The prompt is missing or blank."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Prompt is required"


class UpstreamRejection(ImageStudioError):
    """The provider refused the request (bad prompt or rate limited)."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid prompt or request"


class UpstreamFailure(ImageStudioError):
    """Any other provider or network error, or an unusable reply."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to generate image. Please try again."


INVALID_RESPONSE_MESSAGE = "Image generation failed or response is invalid"
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
