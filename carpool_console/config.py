from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Carpool platform API (source of truth for every entity)
    PLATFORM_API_URL: str = "http://localhost:3000"
    PLATFORM_API_TIMEOUT: float = 15.0

    # JWT Authentication (shared with the platform's auth service)
    SECRET_KEY: str

    # Application
    APP_NAME: str = "Carpool Enterprise Console"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = ""
    CORS_ALLOW_CREDENTIALS: bool = True

    # Console behaviour
    ALERT_REFRESH_SECONDS: float = 30.0
    MODEL_HEALTH_REFRESH_SECONDS: float = 30.0
    RECENT_ENTERPRISE_COUNT: int = 3
    BATCH_INVITE_LIMIT: int = 50
    DEFAULT_COST_TIME_RANGE: str = "30d"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS from comma-separated string"""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
