import os
from pathlib import Path

from logvault.exceptions import StateUnavailableError
from logvault.logging import LoggerType, get_logger

from .interface import TransferStateInterface, validate_identifier


def read_identifiers(path: str | Path) -> set[str]:
    """Read the identifiers recorded in a state file without opening it for writing."""
    return _parse(Path(path).read_text(encoding="utf-8"))


def _parse(content: str) -> set[str]:
    return {line.strip() for line in content.splitlines() if line.strip()}


class FileTransferState(TransferStateInterface):
    """
    Transfer state kept in a text file with one identifier per line.

    The file is read in full on `load`. Each `add` appends one line with a
    single write followed by fsync, the file is never rewritten in place.
    Duplicate lines are harmless since only membership matters.
    """

    def __init__(self, path: str | Path, logger: LoggerType | None = None):
        self.path = Path(path)
        self.logger = logger or get_logger(__name__)
        self._identifiers: set[str] = set()
        self._fd: int | None = None
        self._needs_newline = False

    def load(self) -> None:
        """
        Open the state file for appending and read its identifiers.

        Raises:
            StateUnavailableError: If the file cannot be created, opened or decoded.
        """
        self.close()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fd = os.open(self.path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self.close()
            raise StateUnavailableError(self.path, str(e)) from e

        self._identifiers = _parse(content)
        # a torn last write leaves the file without a trailing newline
        self._needs_newline = bool(content) and not content.endswith("\n")
        self.logger.debug("state-loaded", path=str(self.path), count=len(self._identifiers))

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._identifiers

    def add(self, identifier: str) -> None:
        if self._fd is None:
            raise RuntimeError("Transfer state is not loaded")

        line = validate_identifier(identifier) + "\n"
        if self._needs_newline:
            line = "\n" + line

        data = line.encode("utf-8")
        written = os.write(self._fd, data)
        if written != len(data):
            raise OSError(f"Short write to {str(self.path)!r}: {written} of {len(data)} bytes")
        os.fsync(self._fd)

        self._needs_newline = False
        self._identifiers.add(identifier)

    def __len__(self) -> int:
        return len(self._identifiers)

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None
