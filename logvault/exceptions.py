__all__ = (
    "LogVaultError",
    "PreconditionError",
    "SourceUnavailableError",
    "StorageUnavailableError",
    "StateUnavailableError",
    "RunLogUnavailableError",
    "UploadError",
    "LifecycleError",
    "InvalidSettingsError",
)


class LogVaultError(Exception):
    """Base class for all logvault errors."""

    pass


class PreconditionError(LogVaultError):
    """Raised when the environment is not usable. Fatal for the run."""

    reason: str = "precondition failed"


class SourceUnavailableError(PreconditionError):
    reason = "source unavailable"

    def __init__(self, path):
        self.path = path
        super().__init__(f"Log source directory not found: {str(path)!r}")


class StorageUnavailableError(PreconditionError):
    reason = "storage client unavailable"


class StateUnavailableError(PreconditionError):
    reason = "state unavailable"

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"Transfer state file {str(path)!r} is not usable: {message}")


class RunLogUnavailableError(PreconditionError):
    reason = "run log unavailable"

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"Run log {str(path)!r} cannot be opened: {message}")


class UploadError(LogVaultError):
    """Raised when a single object upload fails. The log is retried on the next run."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Failed to upload {key!r}: {message}")


class LifecycleError(LogVaultError):
    """Raised when the bucket lifecycle configuration cannot be read or written."""

    pass


class InvalidSettingsError(LogVaultError):
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Invalid settings: {'; '.join(errors)}")
