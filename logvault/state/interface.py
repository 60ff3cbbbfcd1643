from abc import ABC, abstractmethod
from typing import Self


class TransferStateInterface(ABC):
    """
    Durable, append-only set of identifiers of logs already uploaded.

    Entries are never removed or rewritten. `add` returns only once the
    identifier is durable.
    """

    @abstractmethod
    def load(self) -> None:
        """Read the persisted identifiers. Must be called before use."""
        pass

    @abstractmethod
    def __contains__(self, identifier: object) -> bool:
        pass

    @abstractmethod
    def add(self, identifier: str) -> None:
        """Durably record `identifier` as uploaded."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    def close(self) -> None:
        """Release resources held by the store."""
        pass

    def __enter__(self) -> Self:
        self.load()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def validate_identifier(identifier: str) -> str:
    """Check `identifier` can be stored as one line of a UTF-8 state file and read back unchanged."""
    if not identifier or identifier != identifier.strip():
        raise ValueError(f"Invalid identifier: {identifier!r}")
    if "\n" in identifier or "\r" in identifier:
        raise ValueError(f"Identifier must not contain line breaks: {identifier!r}")
    try:
        identifier.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError(f"Identifier is not valid UTF-8: {identifier!r}") from None
    return identifier
