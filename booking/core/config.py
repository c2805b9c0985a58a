from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BUSINESS_TIMEZONE: str = "Africa/Casablanca"
    DISPLAY_LOCALE: str = "fr"
    CURRENCY: str = "MAD"
    PRESELECT_TODAY: bool = True

    AVAILABILITY_API_BASE_URL: str | None = None
    AVAILABILITY_API_TOKEN: str | None = None
    AVAILABILITY_TIMEOUT_SECONDS: float = 10.0

    SESSION_LIMIT: int = 500


settings = Settings()
