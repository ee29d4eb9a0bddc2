from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the ImageStudio backend."""

    #----------------------------------------------------------
    # External image API settings
    #----------------------------------------------------------
    image_api_key: SecretStr = Field(
        default="",
        validation_alias=AliasChoices("IMAGESTUDIO_IMAGE_API_KEY", "NEBIUS_API_KEY"),
        description="API key for authenticating with the external image generation service.",
    )

    image_api_base_url: str = Field(
        default="https://api.studio.nebius.com/v1/",
        description="Base URL of the OpenAI-compatible image generation endpoint.",
    )

    #----------------------------------------------------------
    # Storage settings
    #----------------------------------------------------------
    preferences_db_path: str = Field(
        default="imagestudio.db",
        description="SQLite file holding per-client UI preferences (theme).",
    )

    #----------------------------------------------------------
    # Server settings
    #----------------------------------------------------------
    cors_allow_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser.",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level applied by the console entry point.",
    )
    host: str = Field(default="0.0.0.0", description="Bind address for uvicorn.")
    port: int = Field(default=8000, description="Bind port for uvicorn.")

    model_config = SettingsConfigDict(
        env_prefix="IMAGESTUDIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def has_image_api_key(self) -> bool:
        return bool(self.image_api_key.get_secret_value().strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
