"""Configuration settings for actiondispatch.

Values are read from the environment (and a local ``.env`` file) through
pydantic-settings, mirroring the per-service config pattern used across the
stack.
"""

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from actiondispatch.__about__ import __version__
from actiondispatch.commons.constants import Environment, LogLevel

load_dotenv()


class AppConfig(BaseSettings):
    """Application configuration for the dispatcher."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    # App Info
    name: str = __version__.split("@")[0]
    version: str = __version__.split("@")[-1]
    description: str = "Request-dispatch layer routing named requests to actions"

    env: Environment = Field(default=Environment.DEVELOPMENT, alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: LogLevel = Field(default=LogLevel.INFO, alias="LOG_LEVEL")

    # Registry
    freeze_registry_on_boot: bool = Field(
        default=True,
        alias="FREEZE_REGISTRY_ON_BOOT",
        description="Seal the action/validator registries once the default server is built",
    )

    # Posting rules
    post_min_length: int = Field(
        default=1, alias="POST_MIN_LENGTH", ge=0, description="Minimum post message length"
    )
    post_max_length: int = Field(
        default=65535, alias="POST_MAX_LENGTH", ge=1, description="Maximum post message length"
    )


# Global settings instance
app_settings = AppConfig()

settings = app_settings
