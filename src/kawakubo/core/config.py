"""Configuration management for the Kawakubo AI Designer.

This module provides centralized configuration management using Pydantic Settings.
Configuration is loaded from environment variables with the KAWAKUBO_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (KAWAKUBO_* prefix)
2. .env file in the project root
3. Default values defined in KawakuboConfig

The provider credential is the one exception to the prefix rule: it is read
from ``KAWAKUBO_OPENAI_API_KEY`` or, failing that, the conventional
``OPENAI_API_KEY`` used by the OpenAI SDK.

Example .env file:
    OPENAI_API_KEY=sk-...
    KAWAKUBO_IMAGE_QUALITY=hd
    KAWAKUBO_SERVER_PORT=7860

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
It is loaded once at process start and treated as read-only afterwards; the
FastAPI lifespan hands it to the generation handler, which never mutates it.

Usage Example
-------------
    from kawakubo.core.config import config

    if config.provider_configured:
        print(config.image_model, config.image_size)
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Templates and static assets ship inside the package.
_PACKAGE_DIR = Path(__file__).resolve().parent.parent


class KawakuboConfig(BaseSettings):
    """Main configuration for the Kawakubo AI Designer.

    Attributes
    ----------
    Provider Settings:
        openai_api_key : SecretStr | None
            Credential for the image provider.  ``None`` means generation
            requests are rejected with a configuration error.
        openai_base_url : str | None
            Optional override of the provider API base URL.

    Generation Settings:
        image_model : str
            Provider model identifier (``dall-e-3``).
        image_size : Literal["1024x1024", "1792x1024", "1024x1792"]
            Fixed target resolution for every request.
        image_quality : Literal["standard", "hd"]
            Quality tier (``hd`` is the highest).
        image_style : Literal["natural", "vivid"]
            Style preference passed to the provider.
        max_reference_image_bytes : int
            Largest accepted reference image, measured on decoded bytes.

    Server Settings:
        server_host : str
            Bind address for uvicorn.
        server_port : int
            Port for uvicorn (1024-65535).
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
            Root logging level applied by ``main()``.

    Paths:
        static_dir : Path
            Directory served at ``/static``.
        templates_dir : Path
            Directory holding ``index.html``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KAWAKUBO_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Provider settings
    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "KAWAKUBO_OPENAI_API_KEY",
            "OPENAI_API_KEY",
        ),
        description="API key for the image provider",
    )
    openai_base_url: str | None = Field(
        default=None,
        description="Optional provider API base URL override",
    )

    # Generation settings (fixed per deployment, never per request)
    image_model: str = Field(
        default="dall-e-3",
        description="Provider image model identifier",
    )
    image_size: Literal["1024x1024", "1792x1024", "1024x1792"] = Field(
        default="1024x1024",
        description="Target resolution for generated images",
    )
    image_quality: Literal["standard", "hd"] = Field(
        default="hd",
        description="Provider quality tier",
    )
    image_style: Literal["natural", "vivid"] = Field(
        default="natural",
        description="Provider style preference",
    )
    max_reference_image_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum decoded size of an uploaded reference image",
        ge=1,
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root logging level",
    )

    # Paths
    static_dir: Path = Field(
        default=_PACKAGE_DIR / "static",
        description="Directory served at /static",
    )
    templates_dir: Path = Field(
        default=_PACKAGE_DIR / "templates",
        description="Directory containing index.html",
    )

    @property
    def provider_configured(self) -> bool:
        """Whether a non-blank provider API key is available."""
        if self.openai_api_key is None:
            return False
        return bool(self.openai_api_key.get_secret_value().strip())


# Global configuration instance
# Loaded from environment variables (KAWAKUBO_* prefix, plus OPENAI_API_KEY)
# and the .env file when the module is first imported.
config = KawakuboConfig()
