from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, computed_field

__all__ = ("SEPARATOR", "LogRecord", "RunSummary", "LifecycleOutcome")

SEPARATOR = "-"
"""Joins job name and build number into a log identifier."""


class LogRecord(BaseModel):
    """A completed build log found in the source tree."""

    class Config:
        frozen = True

    job_name: str
    build_number: str
    path: Path
    modified_at: datetime

    @property
    def identifier(self) -> str:
        return f"{self.job_name}{SEPARATOR}{self.build_number}"

    def object_key(self, prefix: str = "") -> str:
        """Destination key of the log, e.g. ``build-api/12.log`` or ``jenkins/build-api/12.log``."""
        key = f"{self.job_name}/{self.build_number}.log"
        prefix = prefix.strip("/")
        return f"{prefix}/{key}" if prefix else key


class RunSummary(BaseModel):
    """Counters of a single transfer run."""

    uploaded: int = 0
    skipped: int = 0
    failed: int = 0
    failed_identifiers: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def total(self) -> int:
        return self.uploaded + self.skipped + self.failed

    def describe(self) -> str:
        return f"{self.uploaded} logs uploaded, {self.skipped} skipped, {self.failed} failed."


class LifecycleOutcome(str, Enum):
    ALREADY_APPLIED = "already_applied"
    APPLIED = "applied"
    FAILED = "failed"
