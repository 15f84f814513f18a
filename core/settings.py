from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_NAME: str = "siteadmin"
    DATABASE_USER: str = "siteadmin"
    DATABASE_PASSWORD: str = "siteadmin"
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432

    @property
    def DATABASE_URL(self) -> str:
        return (
            f"postgresql+psycopg2://{self.DATABASE_USER}:"
            f"{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}:"
            f"{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    # Multi-tenancy: sites are told apart either by a folder segment or by host name
    MULTI_TENANT_MODE: str = "folder_name"  # "folder_name" or "host_name"
    SITE_FOLDER_HEADER: str = "X-Site-Folder"

    # Site admin UI options
    DEFAULT_PAGE_SIZE_SITE_LIST: int = 10
    ALLOW_DELETE_CHILD_SITES: bool = True
    AVAILABLE_THEMES: str = "default,minimal"
    SUPPORTED_CULTURES: str = "en-US"
    SUPPORTED_UI_CULTURES: str = "en-US"

    # Standalone auth
    JWT_SECRET_KEY: str | None = None
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False
    DB_LOG_ENABLED: bool = True
    DB_LOG_MIN_LEVEL: str = "WARNING"

    # Sentry error tracking
    SENTRY_DSN: str | None = None
    SENTRY_ENVIRONMENT: str = "development"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8"
    }

    @property
    def uses_folder_names(self) -> bool:
        return self.MULTI_TENANT_MODE == "folder_name"

    @property
    def uses_host_names(self) -> bool:
        return self.MULTI_TENANT_MODE == "host_name"

    @staticmethod
    def split_csv(value: str) -> list[str]:
        return [item.strip() for item in value.split(",") if item.strip()]


settings = Settings()
