"""Stream client configuration.

Tells the client where the relay lives. Absent API_BASE_URL, the client
talks to a relay on the local loopback address.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()


class ClientConfig(BaseModel):
    """Configuration for the stream client.

    Attributes:
        api_base_url: Base URL of the relay, without trailing slash.
        timeout: Seconds to wait on connect and between body chunks.
    """

    model_config = ConfigDict(validate_default=True)

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Relay base URL",
    )
    timeout: float = Field(default=120.0, gt=0.0, description="Request timeout in seconds")

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("api_base_url must not be empty")
        return v

    @property
    def chat_url(self) -> str:
        return f"{self.api_base_url}/api/chat"


def get_client_config() -> ClientConfig:
    return ClientConfig()
