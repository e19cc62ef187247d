from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./shiftdesk.db"

    # Backend client
    API_BASE_URL: str = "http://localhost:8000/api/v1"
    API_TIMEOUT_SECONDS: float = 30.0

    # Wizard defaults
    DEFAULT_SHIFT_START: str = "08:00"
    DEFAULT_SHIFT_END: str = "17:00"
    DEFAULT_SLOT_DURATION_MINUTES: int = 60
    DEFAULT_SLOT_CAPACITY: int = 1

    # Interactive scheduler
    DEFAULT_EVENT_DURATION_MINUTES: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
