from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "DASHTACT"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite+pysqlite:///./dashtact.db"
    DEFAULT_TENANT_NAME: str = "Default Tenant"
    SUPERADMIN_USERNAME: str = "superadmin"
    SUPERADMIN_EMAIL: str = "superadmin@example.com"
    SUPERADMIN_PASSWORD: str = "change-me"
    FEATURE_SETTINGS_CACHE_TTL_SEC: int = 300
    METRICS_ENABLED: bool = True
    LOG_LEVEL: str = "INFO"

settings = Settings()
