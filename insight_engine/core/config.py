"""System configuration"""

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # Request limits
    max_request_rows: int = 50000
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: Path = Path("./logs/app.log")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
