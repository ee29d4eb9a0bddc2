"""FastAPI entry point exposing the ImageStudio REST API."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.concurrency import run_in_threadpool

from .config import get_settings
from .errors import (
    ConfigurationError,
    ImageStudioError,
    PromptValidationError,
    UpstreamFailure,
)
from .prompts import IMAGE_MODEL_ID
from .schemas import (
    ErrorResponse,
    GenerationRequest,
    GenerationResponse,
    HealthResponse,
    ThemeRequest,
    ThemeResponse,
)
from .service import ImageStudioService, get_image_studio_service
from .storageservice.storageservice import PreferenceStore, get_preference_store

logger = logging.getLogger(__name__)

GENERATE_IMAGE_PATH = "/generate-image"
STATIC_DIR = Path(__file__).resolve().parent / "static"
THEME_KEY = "theme"
DEFAULT_THEME = "light"

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_429_TOO_MANY_REQUESTS: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}

app = FastAPI(title="ImageStudio Backend", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ImageStudioError)
async def image_studio_error_handler(request: Request, exc: ImageStudioError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def _malformed_generation_error(request: Request, exc: RequestValidationError) -> ImageStudioError:
    provider = request.app.dependency_overrides.get(get_image_studio_service, get_image_studio_service)
    if not provider().settings.has_image_api_key:
        return ConfigurationError()
    if any(err.get("type") == "json_invalid" for err in exc.errors()):
        return UpstreamFailure()
    return PromptValidationError()


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed generation bodies follow the {"error": ...} contract instead of FastAPI's 422.
    if request.url.path == GENERATE_IMAGE_PATH:
        logger.warning("Rejected malformed generation request: %s", exc.errors())
        error = _malformed_generation_error(request, exc)
        return JSONResponse(status_code=error.status_code, content={"error": error.message})
    return await request_validation_exception_handler(request, exc)


@app.get("/", response_class=HTMLResponse, summary="Serve the image generator page")
async def index() -> HTMLResponse:
    index_path = STATIC_DIR / "index.html"
    if index_path.exists():
        return HTMLResponse(content=index_path.read_text(encoding="utf-8"))
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="index.html not found")


@app.get("/health", response_model=HealthResponse, summary="Health Check Endpoint")
async def healthcheck():
    settings = get_settings()
    return HealthResponse(
        status="ok",
        imageModel=IMAGE_MODEL_ID,
        credentialConfigured=settings.has_image_api_key,
    )


@app.post(
    GENERATE_IMAGE_PATH,
    response_model=GenerationResponse,
    responses=_ERROR_RESPONSES,
    summary="Generate an image from a text prompt",
)
async def generate_image(
    payload: GenerationRequest | None = None,
    service: ImageStudioService = Depends(get_image_studio_service),
):
    prompt = payload.prompt if payload is not None else None
    image = await run_in_threadpool(service.generate_image, prompt)
    return GenerationResponse(imageUrl=image)


@app.get(
    "/preferences/{client_id}/theme",
    response_model=ThemeResponse,
    summary="Read the stored UI theme for a client",
)
async def get_theme(
    client_id: str,
    store: PreferenceStore = Depends(get_preference_store),
):
    value = await run_in_threadpool(store.get, client_id, THEME_KEY, DEFAULT_THEME)
    if value not in ("light", "dark"):
        logger.warning("Ignoring unknown theme %r stored for client %s", value, client_id)
        value = DEFAULT_THEME
    return ThemeResponse(theme=value)


@app.put(
    "/preferences/{client_id}/theme",
    response_model=ThemeResponse,
    summary="Persist the UI theme for a client",
)
async def set_theme(
    client_id: str,
    payload: ThemeRequest,
    store: PreferenceStore = Depends(get_preference_store),
):
    await run_in_threadpool(store.set, client_id, THEME_KEY, payload.theme)
    return ThemeResponse(theme=payload.theme)


@app.delete(
    "/preferences/{client_id}/theme",
    response_model=ThemeResponse,
    summary="Reset the UI theme for a client to the default",
)
async def reset_theme(
    client_id: str,
    store: PreferenceStore = Depends(get_preference_store),
):
    await run_in_threadpool(store.delete, client_id, THEME_KEY)
    return ThemeResponse(theme=DEFAULT_THEME)


def main() -> None:
    """Launch the uvicorn server with the configured host, port and log level."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("imagestudio.main:app", host=settings.host, port=settings.port)


__all__ = ["app", "main"]


if __name__ == "__main__":  # pragma: no cover - convenience entry point
    main()
