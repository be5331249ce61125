from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)

    ENVIRONMENT: str = "dev"

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    # Open streams never finish on their own; cancel them after this delay
    SHUTDOWN_TIMEOUT_SECONDS: int = 5

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: str = "logs/logging_errors.log"
    LOG_CONSOLE_FORMAT: str = "human"
    LOG_EXCLUDED_PATHS: list[str] = ["/metrics", "/health"]

    # Loki settings
    LOKI_ENABLED: bool = False
    LOKI_URL: str = "http://loki:3100"
    LOKI_VERSION: str = "1"


app_settings = Settings()
