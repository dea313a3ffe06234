"""iotform configuration: loads from environment variables and an optional .env file."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings: populated from env vars or .env file."""

    # App
    app_name: str = "iotform"
    app_version: str = "0.1.0"
    debug: bool = False

    # AWS: unset values fall through to the boto3 default credential chain
    region: Optional[str] = None
    profile: Optional[str] = None
    endpoint_url: Optional[str] = None

    # Delays (seconds) slept after each failed mutation attempt; one attempt per entry
    retry_schedule: list[float] = Field(default_factory=lambda: [1, 2, 5, 8, 10, 0])

    # Forwarded as AmznClientToken on Greengrass version creation
    client_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AMZN_CLIENT_TOKEN", "IOTFORM_CLIENT_TOKEN"),
    )

    # State
    home: Path = Path(".iotform")
    database_url: str = ""

    model_config = {
        "env_prefix": "IOTFORM_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @property
    def log_dir(self) -> Path:
        return self.home / "logs"

    @property
    def effective_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.home / 'state.db'}"


settings = Settings()
