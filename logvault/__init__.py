from logvault.engine import TransferEngine, transfer_logs
from logvault.lifecycle import build_lifecycle_configuration, ensure_lifecycle_policy
from logvault.preconditions import check_preconditions
from logvault.runner import run
from logvault.schema import LifecycleOutcome, LogRecord, RunSummary
from logvault.settings import Settings
from logvault.source import SourceLayout, walk_source

__all__ = (
    "LifecycleOutcome",
    "LogRecord",
    "RunSummary",
    "Settings",
    "SourceLayout",
    "TransferEngine",
    "build_lifecycle_configuration",
    "check_preconditions",
    "ensure_lifecycle_policy",
    "run",
    "transfer_logs",
    "walk_source",
)
