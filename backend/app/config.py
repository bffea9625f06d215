from pydantic_settings import BaseSettings, SettingsConfigDict

APP_VERSION = "0.1.0"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # App
    environment: str = "development"
    log_level: str = "INFO"
    backend_host: str = "0.0.0.0"
    backend_port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    # Demurrage
    demurrage_warning_days: int = 2
    clearance_entry_alert_days: int = 3

    # Manual status overrides
    status_override_min_reason_length: int = 10

    # Sentry (optional)
    sentry_dsn: str = ""


settings = Settings()
