"""Shared test fixtures and configuration."""

import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pytest

from logvault.exceptions import LifecycleError, UploadError
from logvault.storage import ObjectStorageInterface


class InMemoryFileSystem:
    """File system fabricated from a mapping of paths, for walker tests."""

    def __init__(self, files: dict[str, float] | None = None, dirs: Iterable[str] = (), symlinks: Iterable[str] = ()):
        self.files = {Path(p): mtime for p, mtime in (files or {}).items()}
        self.symlinks = {Path(p) for p in symlinks}
        self.dirs = {Path(p) for p in dirs}
        for path in [*self.files, *self.dirs, *self.symlinks]:
            self.dirs.update(path.parents)

    def is_dir(self, path: Path) -> bool:
        return path in self.dirs or path in self.symlinks

    def is_file(self, path: Path) -> bool:
        return path in self.files

    def is_symlink(self, path: Path) -> bool:
        return path in self.symlinks

    def iterdir(self, path: Path) -> Iterable[Path]:
        entries = {p for p in [*self.files, *self.dirs, *self.symlinks] if p.parent == path and p != path}
        return sorted(entries)

    def mtime(self, path: Path) -> float:
        return self.files[path]


class FakeObjectStorage(ObjectStorageInterface):
    """Object storage double recording uploads and lifecycle calls."""

    def __init__(
        self,
        bucket: str = "test-bucket",
        *,
        lifecycle: dict[str, Any] | None = None,
        fail_keys: Iterable[str] = (),
        probe_error: Exception | None = None,
        lifecycle_error: Exception | None = None,
    ):
        self.bucket = bucket
        self.lifecycle = lifecycle
        self.fail_keys = set(fail_keys)
        self.probe_error = probe_error
        self.lifecycle_error = lifecycle_error
        self.objects: dict[str, bytes] = {}
        self.put_calls: list[str] = []
        self.lifecycle_puts: list[dict[str, Any]] = []

    def probe(self) -> None:
        if self.probe_error is not None:
            raise self.probe_error

    def put_object(self, key: str, path: Path) -> None:
        self.put_calls.append(key)
        if key in self.fail_keys:
            raise UploadError(key, "simulated failure")
        self.objects[key] = Path(path).read_bytes()

    def get_lifecycle_configuration(self) -> dict[str, Any] | None:
        if self.lifecycle_error is not None:
            raise self.lifecycle_error
        return self.lifecycle

    def put_lifecycle_configuration(self, configuration: dict[str, Any]) -> None:
        if self.lifecycle_error is not None:
            raise self.lifecycle_error
        self.lifecycle_puts.append(configuration)
        self.lifecycle = configuration


def make_build_log(root: Path, job: str, build: str, content: str | None = None) -> Path:
    """Create `root/job/builds/build/log` the way Jenkins lays it out."""
    build_dir = root / job / "builds" / build
    build_dir.mkdir(parents=True, exist_ok=True)
    log = build_dir / "log"
    log.write_text(content if content is not None else f"{job} #{build}\nFinished: SUCCESS\n")
    return log


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep LOGVAULT_* variables and .env files of the host out of the tests."""
    for key in list(os.environ):
        if key.startswith("LOGVAULT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def storage():
    return FakeObjectStorage()


@pytest.fixture
def source_dir(tmp_path):
    """Source tree with jobs build-api (12, 13) and deploy-web (5)."""
    root = tmp_path / "jobs"
    make_build_log(root, "build-api", "12")
    make_build_log(root, "build-api", "13")
    make_build_log(root, "deploy-web", "5")
    return root


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "state" / "uploaded_logs_meta.txt"


@pytest.fixture
def make_fs():
    """Build an in-memory file system from paths."""
    return InMemoryFileSystem


@pytest.fixture
def make_log():
    """Create a Jenkins build log under a source root."""
    return make_build_log


@pytest.fixture
def lifecycle_error():
    return LifecycleError("simulated lifecycle failure")


@pytest.fixture
def mock_s3_client(mocker):
    """Mock S3 client to avoid AWS calls."""
    return mocker.patch("boto3.client")
