"""Settings for the PhotoVault API, read from the environment or ``.env``."""

from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

INSECURE_JWT_SECRET = "dev-insecure-key-change-me"

# S3 refuses presigned URLs valid for longer than seven days.
MAX_PRESIGN_SECONDS = 7 * 24 * 3600


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class ConfigurationError(Exception):
    """Raised when application configuration is invalid for the environment."""
    pass


class Settings(BaseSettings):
    """
    Process-wide configuration.

    ``jwt_secret_key`` is the token verification key. It is read once at
    start-up and handed to the auth dependency; nothing else holds a copy.
    S3 credentials may be left unset to fall back to the boto3 default chain
    (instance profile, ``~/.aws``).
    """

    environment: Environment = Field(default=Environment.DEVELOPMENT)
    cors_allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated origins of the web client"
    )

    # Relational store
    database_url: str = Field(default="sqlite:///./photovault.db")
    db_pool_size: int = Field(default=5, description="Persistent connections (PostgreSQL only)")
    db_max_overflow: int = Field(default=10, description="Burst connections above the pool size")
    db_pool_timeout: int = Field(default=30, description="Seconds to wait for a free connection")
    db_pool_recycle: int = Field(default=1800, description="Connection lifetime in seconds")

    # Tokens
    jwt_secret_key: str = Field(default=INSECURE_JWT_SECRET)
    jwt_algorithm: str = Field(default="HS256")
    token_expire_hours: int = Field(default=24, gt=0)

    # Blob store
    s3_bucket_name: str = Field(default="", description="Bucket holding the photo objects")
    s3_region: str = Field(default="us-west-2")
    s3_endpoint_url: Optional[str] = Field(
        default=None,
        description="Endpoint of an S3-compatible store such as MinIO; unset for AWS"
    )
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)
    presigned_url_expire_seconds: int = Field(default=300)

    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json", description="'json' or 'text'")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v_upper

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return v

    @field_validator('presigned_url_expire_seconds')
    @classmethod
    def validate_presign_expiry(cls, v: int) -> int:
        if not 1 <= v <= MAX_PRESIGN_SECONDS:
            raise ValueError(f"Presigned URL lifetime must be between 1 and {MAX_PRESIGN_SECONDS} seconds")
        return v

    def get_cors_origins(self) -> List[str]:
        """Origins as a list. A wildcard is refused since credentials are allowed."""
        origins = [origin.strip() for origin in self.cors_allowed_origins.split(',') if origin.strip()]
        if "*" in origins:
            raise ValueError(
                "Wildcard CORS (*) not allowed. "
                "Specify explicit origins in CORS_ALLOWED_ORIGINS"
            )
        return origins

    def validate_production_config(self) -> None:
        """Refuse to start in production with development defaults.

        Raises:
            ConfigurationError: listing every offending setting.
        """
        if self.environment != Environment.PRODUCTION:
            return

        problems: List[str] = []
        if self.jwt_secret_key == INSECURE_JWT_SECRET:
            problems.append("JWT_SECRET_KEY is the development default; generate one with: openssl rand -hex 32")
        if not self.s3_bucket_name:
            problems.append("S3_BUCKET_NAME is not set")
        if self.database_url.startswith("sqlite"):
            problems.append("DATABASE_URL points at SQLite; use PostgreSQL in production")
        local = [o for o in self.get_cors_origins() if "localhost" in o or "127.0.0.1" in o]
        if local:
            problems.append(f"CORS_ALLOWED_ORIGINS contains local origins: {local}")

        if problems:
            raise ConfigurationError(
                "Production configuration is insecure:\n  - " + "\n  - ".join(problems)
            )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


settings = Settings()
