"""
Configuration module for the rental booking engine.
Loads environment variables and provides typed configuration.
"""

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Booking API
    booking_api_url: str = "http://localhost:3000/api"
    api_timeout: float = Field(default=10.0, gt=0)
    api_max_retries: int = Field(default=3, ge=1)  # attempts for GET requests
    api_retry_delay: float = Field(default=1.0, ge=0)  # seconds, doubled per attempt
    api_auth_token: str = ""  # sent as the "token" cookie when set

    # Dashboard
    dashboard_page_size: int = Field(default=10, ge=1)

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = False

    environment: str = "development"  # development, staging, production

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def validate_all_required(self) -> None:
        """
        Validate settings that have no usable default in production.

        Raises:
            ValueError: If required values are missing or invalid
        """
        problems = []
        if not self.booking_api_url.startswith(("http://", "https://")):
            problems.append("booking_api_url")
        if self.is_production and not self.api_auth_token:
            problems.append("api_auth_token")

        if problems:
            raise ValueError(
                f"Missing or invalid required configuration: "
                f"{', '.join(problems)}. "
                f"Please check your .env file."
            )


# Global settings instance
settings = Settings()
