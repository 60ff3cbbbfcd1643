"""Tests for the fail-fast precondition checks."""

import pytest

from logvault.exceptions import PreconditionError, SourceUnavailableError, StorageUnavailableError
from logvault.preconditions import check_preconditions


class TestCheckPreconditions:
    def test_all_available(self, source_dir, storage):
        check_preconditions(source_dir, storage)

    def test_missing_source(self, tmp_path, storage, mocker):
        """Test a missing source fails before the storage is contacted."""
        probe = mocker.spy(storage, "probe")
        with pytest.raises(SourceUnavailableError) as exc_info:
            check_preconditions(tmp_path / "missing", storage)
        assert exc_info.value.reason == "source unavailable"
        probe.assert_not_called()

    def test_source_is_a_file(self, tmp_path, storage):
        path = tmp_path / "jobs"
        path.write_text("")
        with pytest.raises(SourceUnavailableError):
            check_preconditions(path, storage)

    def test_storage_unavailable(self, source_dir, storage):
        """Test a failing probe is a precondition failure with a distinct reason."""
        storage.probe_error = StorageUnavailableError("Bucket 'test-bucket' is not accessible (403)")
        with pytest.raises(PreconditionError) as exc_info:
            check_preconditions(source_dir, storage)
        assert exc_info.value.reason == "storage client unavailable"

    def test_in_memory_source(self, make_fs, storage):
        fs = make_fs(dirs=["/ci"])
        check_preconditions("/ci", storage, fs=fs)
        with pytest.raises(SourceUnavailableError):
            check_preconditions("/elsewhere", storage, fs=fs)
