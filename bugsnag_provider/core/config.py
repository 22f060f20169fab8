from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://api.bugsnag.com/organizations"


class Settings(BaseSettings):
    # Bugsnag credentials; provider configuration values take precedence
    BUGSNAG_API_TOKEN: str | None = None
    BUGSNAG_ORGANIZATION_ID: str | None = None

    BUGSNAG_API_BASE_URL: str = DEFAULT_API_BASE_URL
    BUGSNAG_HTTP_TIMEOUT: float = 10.0

    # Provider host surface
    PROVIDER_HOST: str = "127.0.0.1"
    PROVIDER_PORT: int = 8787

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


def get_settings() -> Settings:
    """每次调用都重新读取环境变量，不缓存"""
    return Settings()
