from pathlib import Path

from logvault.exceptions import SourceUnavailableError
from logvault.logging import LoggerType, get_logger
from logvault.source import FileSystem, LocalFileSystem
from logvault.storage import ObjectStorageInterface

__all__ = ("check_preconditions",)


def check_preconditions(
    source_dir: str | Path,
    storage: ObjectStorageInterface,
    fs: FileSystem | None = None,
    logger: LoggerType | None = None,
) -> None:
    """
    Fail fast when the log source or the storage client is not usable.

    Raises:
        SourceUnavailableError: If `source_dir` is not an existing directory.
        StorageUnavailableError: If the storage does not answer its probe.
    """
    fs = fs or LocalFileSystem()
    logger = logger or get_logger(__name__)

    source_dir = Path(source_dir)
    if not fs.is_dir(source_dir):
        raise SourceUnavailableError(source_dir)

    storage.probe()
    logger.debug("preconditions-met", source_dir=str(source_dir), bucket=storage.bucket)
