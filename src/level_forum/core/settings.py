"""Application settings and configuration.

This module defines all configuration options for the Level Forum service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Level Forum", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./level_forum.db",
        alias="DATABASE_URL",
    )
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Reputation and leveling
    exp_per_upvote: int = Field(default=100, ge=0, alias="EXP_PER_UPVOTE")
    level_base: float = Field(default=2.0, alias="LEVEL_BASE")
    level_scale: float = Field(default=100.0, alias="LEVEL_SCALE")

    # Read-side limits
    notification_window_days: int = Field(default=7, ge=1, alias="NOTIFICATION_WINDOW_DAYS")
    sidebar_topic_limit: int = Field(default=15, ge=1, alias="SIDEBAR_TOPIC_LIMIT")
    report_snippet_length: int = Field(default=320, ge=1, alias="REPORT_SNIPPET_LENGTH")
    default_page_size: int = Field(default=20, ge=1, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, ge=1, alias="MAX_PAGE_SIZE")
    comment_page_size: int = Field(default=200, ge=1, alias="COMMENT_PAGE_SIZE")

    # Account rules
    min_username_length: int = Field(default=4, ge=1, alias="MIN_USERNAME_LENGTH")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("level_base")
    @classmethod
    def _validate_level_base(cls, value: float) -> float:
        if value <= 1:
            raise ValueError("LEVEL_BASE must be greater than 1")
        return value

    @field_validator("level_scale")
    @classmethod
    def _validate_level_scale(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("LEVEL_SCALE must be positive")
        return value

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
