"""Dashboard configuration."""

import logging
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)
load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # Stream endpoint: <scheme>://<host><path>
    stream_scheme: str = Field(default="https", alias="STREAM_SCHEME")
    stream_path: str = Field(default="/events", alias="STREAM_PATH")
    stream_connect_timeout: float = Field(default=10.0, alias="STREAM_CONNECT_TIMEOUT")

    # Reconnect backoff
    reconnect_base_delay: float = 1.0
    reconnect_multiplier: float = 2.0
    reconnect_max_delay: float = 30.0
    max_reconnect_attempts: int = Field(default=0, alias="MAX_RECONNECT_ATTEMPTS")  # 0 = forever

    # Display
    dashboard_title: str = Field(default="Jamulus stream", alias="DASHBOARD_TITLE")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")

    def stream_url(self, host: str) -> str:
        """Build the event-stream endpoint for a server host."""
        host = host.strip().rstrip("/")
        path = self.stream_path if self.stream_path.startswith("/") else f"/{self.stream_path}"
        if "://" in host:
            return f"{host}{path}"
        return f"{self.stream_scheme}://{host}{path}"

    @property
    def retries_forever(self) -> bool:
        return self.max_reconnect_attempts <= 0


settings = Settings()
