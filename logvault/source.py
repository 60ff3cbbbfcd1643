"""Enumeration of completed build logs in a CI server's job tree.

The expected layout is the one Jenkins uses::

    <source>/<job>/builds/<build>/log

The builds directory name and the recognized log file names are configurable
through :class:`SourceLayout`.
"""

from collections.abc import Iterable, Iterator
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel

from logvault.schema import LogRecord

__all__ = ("FileSystem", "LocalFileSystem", "SourceLayout", "walk_source")


class FileSystem(Protocol):
    """Read-only view of the file system the walker needs."""

    def is_dir(self, path: Path) -> bool: ...

    def is_file(self, path: Path) -> bool: ...

    def is_symlink(self, path: Path) -> bool: ...

    def iterdir(self, path: Path) -> Iterable[Path]: ...

    def mtime(self, path: Path) -> float: ...


class LocalFileSystem:
    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def is_symlink(self, path: Path) -> bool:
        return path.is_symlink()

    def iterdir(self, path: Path) -> Iterable[Path]:
        # sorted for readable run logs only
        return sorted(path.iterdir())

    def mtime(self, path: Path) -> float:
        return path.stat().st_mtime


class SourceLayout(BaseModel):
    builds_dirname: str = "builds"
    """Directory between a job and its builds. Empty when builds sit directly under the job."""
    log_filenames: tuple[str, ...] = ("log",)
    """Recognized log file names, the first one present in a build directory wins."""
    numeric_builds_only: bool = True
    """Only treat all-digit directory names as builds."""


def _subdirectories(fs: FileSystem, path: Path) -> Iterator[Path]:
    for child in fs.iterdir(path):
        # symlinks like lastSuccessfulBuild point at real build directories
        if fs.is_symlink(child) or not fs.is_dir(child):
            continue
        yield child


def walk_source(
    root: str | Path,
    layout: SourceLayout | None = None,
    fs: FileSystem | None = None,
) -> Iterator[LogRecord]:
    """
    Lazily yield every build log found under `root`.

    Args:
        root: Directory with one subdirectory per job.
        layout: Layout of the job tree. Defaults to the Jenkins layout.
        fs: File system to read from. Defaults to the local file system.

    Yields:
        LogRecord: One record per build directory that holds a recognized log file.
    """
    root = Path(root)
    layout = layout or SourceLayout()
    fs = fs or LocalFileSystem()

    for job_dir in _subdirectories(fs, root):
        builds_root = job_dir / layout.builds_dirname if layout.builds_dirname else job_dir
        if fs.is_symlink(builds_root) or not fs.is_dir(builds_root):
            continue

        for build_dir in _subdirectories(fs, builds_root):
            if layout.numeric_builds_only and not (build_dir.name.isascii() and build_dir.name.isdigit()):
                continue

            log_path = next(
                (build_dir / name for name in layout.log_filenames if fs.is_file(build_dir / name)),
                None,
            )
            if log_path is None:
                continue

            yield LogRecord(
                job_name=job_dir.name,
                build_number=build_dir.name,
                path=log_path,
                modified_at=datetime.fromtimestamp(fs.mtime(log_path), tz=timezone.utc),
            )
