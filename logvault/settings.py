from pathlib import Path
from typing import Literal, Self

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logvault.exceptions import InvalidSettingsError

__all__ = ("Settings",)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LOGVAULT_", env_file=".env", extra="ignore")

    SOURCE_DIR: Path = Path("/var/lib/jenkins/jobs")
    """Directory holding one subdirectory per job."""
    BUILDS_DIRNAME: str = "builds"
    """Directory between a job and its builds. Empty when builds sit directly under the job."""
    LOG_FILENAMES: list[str] = Field(default_factory=lambda: ["log"])
    """Recognized log file names inside a build directory."""

    BUCKET: str = "log-storage-cost-optimization"
    PREFIX: str = ""
    """Optional key prefix inside the bucket."""

    STATE_FILE: Path = Path("/var/log/uploaded_logs_meta.txt")
    RUN_LOG: Path | None = Path("/var/log/s3-log-upload.log")

    NOTIFY: str | None = None
    """Email address or webhook URL notified about failures."""
    NOTIFY_FROM: str = "logvault@localhost"
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 25

    TRANSITION_DAYS: int = Field(default=30, gt=0)
    EXPIRATION_DAYS: int = Field(default=365, gt=0)
    STORAGE_CLASS: str = "GLACIER"

    AWS_REGION: str = "us-east-1"
    AWS_S3_ENDPOINT_URL: str | None = None
    AWS_ACCESS_KEY_ID: str | None = None
    AWS_SECRET_ACCESS_KEY: str | None = None

    CONNECT_TIMEOUT: int = Field(default=10, gt=0)
    READ_TIMEOUT: int = Field(default=60, gt=0)
    MAX_ATTEMPTS: int = Field(default=3, ge=1)

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("NOTIFY", mode="after")
    @classmethod
    def validate_notify(cls, value: str | None):
        if value and not (value.startswith(("http://", "https://")) or "@" in value):
            raise ValueError("must be an email address or an http(s) URL")
        return value or None

    @model_validator(mode="after")
    def validate_lifecycle_days(self) -> Self:
        if self.EXPIRATION_DAYS <= self.TRANSITION_DAYS:
            raise ValueError("EXPIRATION_DAYS must be greater than TRANSITION_DAYS")
        return self

    def __init__(self, **kwargs):
        try:
            super().__init__(**kwargs)
        except ValidationError as e:
            prefix = self.model_config["env_prefix"]
            errors = []
            for error in e.errors():
                if error["loc"]:
                    errors.append(f"{prefix}{error['loc'][0]}: {error['msg']}")
                else:
                    errors.append(error["msg"])
            raise InvalidSettingsError(errors) from e
