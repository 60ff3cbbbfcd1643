from .factory import create_state
from .file import FileTransferState, read_identifiers
from .interface import TransferStateInterface, validate_identifier
from .memory import InMemoryTransferState

__all__ = [
    "TransferStateInterface",
    "FileTransferState",
    "InMemoryTransferState",
    "create_state",
    "read_identifiers",
    "validate_identifier",
]
