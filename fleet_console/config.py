from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "Fleet Console"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    # Fleet backend the console reads from and writes to
    UPSTREAM_API_URL: str = "http://localhost:5001/api"
    UPSTREAM_TIMEOUT_SECONDS: float = 15.0
    # JWT issued by the backend; the console only decodes it
    SECRET_KEY: str = "replace-me"
    JWT_ALGORITHM: str = "HS256"
    # Listing defaults
    DEFAULT_PAGE_SIZE: int = 10
    SEARCH_DEBOUNCE_SECONDS: float = 0.3
    ROUTE_SEARCH_LIMIT: int = 10
    # How long the client should wait before sending the user to /login
    LOGIN_REDIRECT_DELAY_MS: int = 2000
    SENTRY_DSN: str = ""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
