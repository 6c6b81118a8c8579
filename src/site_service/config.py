from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENVIRONMENT: Literal["development", "production", "test"] = "production"
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    CORS_ORIGINS: list[str] = ["*"]

    LBRY_DAEMON_URL: str = "http://daemon.lbry.tech"
    LBRY_DAEMON_IMAGES_URL: str = "http://daemon.lbry.tech/images.php"
    LBRY_DAEMON_ACCESS_TOKEN: str | None = None
    LBRY_DAEMON_IMAGES_PATH: str = ""

    REDIS_URL: str | None = Field(
        default=None,
        validation_alias=AliasChoices("REDIS_URL", "REDISCLOUD_URL"),
    )

    FEED_KEY: str = "events"
    FEED_MAX_EVENTS: int = 50
    FEED_RENDER_COUNT: int = 10
    FEED_FETCH_COUNT: int = 20
    FEED_REFRESH_INTERVAL: float = 300.0
    FEED_DISPLAY_UTC_OFFSET_HOURS: int = -4

    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_ORG: str = "lbryio"
    GITHUB_OAUTH_TOKEN: str | None = None

    NEWSLETTER_URL: str = "https://api.lbry.io/list/subscribe"

    SLACK_WEBHOOK_URL: str | None = None

    # None disables outbound timeouts
    HTTP_TIMEOUT_SECONDS: float | None = None

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
