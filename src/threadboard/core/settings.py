"""Application settings and configuration.

This module defines all configuration options for the Threadboard forum.
Settings are loaded from environment variables with sensible defaults.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or a `.env` file.
    """

    # Application metadata
    app_name: str = Field(default="Threadboard", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server binding
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")

    # Database configuration
    database_url: str = Field(default="sqlite:///./forum.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Static files and image uploads
    static_dir: Path = Field(default=Path("static"), alias="STATIC_DIR")
    upload_subdir: str = Field(default="uploads", alias="UPLOAD_SUBDIR")
    max_upload_bytes: int = Field(default=5 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")

    # Session cookie
    session_ttl_hours: int = Field(default=24, alias="SESSION_TTL_HOURS")
    session_cookie_name: str = Field(default="session_id", alias="SESSION_COOKIE_NAME")
    session_cookie_secure: bool = Field(default=False, alias="SESSION_COOKIE_SECURE")
    session_cookie_httponly: bool = Field(default=True, alias="SESSION_COOKIE_HTTPONLY")

    # Password hashing schemes understood by passlib; the first one hashes new passwords.
    password_schemes: list[str] = Field(default=["argon2"], alias="PASSWORD_SCHEMES")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def upload_dir(self) -> Path:
        """Directory that receives post images."""
        return self.static_dir / self.upload_subdir

    @property
    def upload_url_prefix(self) -> str:
        """URL prefix under which stored images are served."""
        return f"/static/{self.upload_subdir}"


settings = Settings()
