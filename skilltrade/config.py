from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str

    # Bearer token verification (tokens are minted by the identity provider)
    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # Application
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:8000,http://127.0.0.1:8000"

    # Page sizes
    MATCH_PAGE_SIZE: int = 10
    UPCOMING_SESSIONS_LIMIT: int = 5
    RECENT_MESSAGES_LIMIT: int = 20

    # Meeting rooms
    MEETING_BASE_URL: str = "https://meet.jit.si"
    MEETING_ROOM_PREFIX: str = "skilltrade"

    # Real-time channel
    REALTIME_QUEUE_SIZE: int = 100
    REALTIME_PATH: str = "/ws"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
