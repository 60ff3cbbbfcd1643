from .interface import TransferStateInterface, validate_identifier


class InMemoryTransferState(TransferStateInterface):
    """In-memory transfer state. Not durable across processes."""

    def __init__(self, identifiers=()):
        self._identifiers: set[str] = set(identifiers)

    def load(self) -> None:
        pass

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._identifiers

    def add(self, identifier: str) -> None:
        self._identifiers.add(validate_identifier(identifier))

    def __len__(self) -> int:
        return len(self._identifiers)
