from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str

    # CORS origins for the dashboard frontend
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    LOG_LEVEL: str = "INFO"

    # Display currency for reports and exports
    CURRENCY_CODE: str = "MMK"

    # Write endpoints (POST/PUT/DELETE), per client address
    WRITE_RATE_LIMIT: int = 100
    WRITE_RATE_WINDOW_SECONDS: int = 60

    RECENT_ACTIVITY_LIMIT: int = 8


settings = Settings()  # type: ignore[call-arg]
