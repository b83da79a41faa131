"""Relay configuration with environment variable loading.

Pydantic-based configuration for the upstream model call.
Supports OpenAI and OpenAI-compatible APIs via custom base URL.
The provider credential lives here only; clients never send or receive it.
"""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from streamchat.models.schemas import DEFAULT_MODEL, SUPPORTED_MODELS

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def resolve_model(requested: str | None, default: str = DEFAULT_MODEL) -> str:
    """Map a requested model identifier onto a supported one.

    Unknown or missing identifiers fall back to ``default`` instead of
    failing the request.

    Args:
        requested: Identifier sent by the client, possibly None.
        default: Identifier to substitute.

    Returns:
        A supported model identifier.
    """
    if requested in SUPPORTED_MODELS:
        return requested
    logger.info(f"Substituting default model {default!r} for {requested!r}")
    return default


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class RelayConfig(BaseModel):
    """Configuration for the stream relay.

    Attributes:
        api_key: Server-held API key for model access.
        base_url: API base URL (None for OpenAI default).
        model_name: Default model used when a request names an unknown one.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
    """

    model_config = ConfigDict(validate_default=True)

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "")),
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", DEFAULT_MODEL),
        description="Default model",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=1024,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )
        return v.strip()

    @field_validator("model_name")
    @classmethod
    def validate_model_name(cls, v: str) -> str:
        """Fall back to the built-in default for unsupported models."""
        return resolve_model(v)


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Returns:
        Configured RelayConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return RelayConfig()


def get_cors_origins() -> list[str]:
    """Read allowed CORS origins without requiring the API key."""
    return _split_origins(os.getenv("CORS_ORIGINS", "*"))
