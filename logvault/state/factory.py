from .file import FileTransferState
from .interface import TransferStateInterface
from .memory import InMemoryTransferState


def create_state(backend_type: str, **kwargs) -> TransferStateInterface:
    """Create transfer state instance based on backend type."""
    if backend_type == "file":
        if "path" not in kwargs:
            raise ValueError("File backend requires a 'path'")
        return FileTransferState(**kwargs)
    elif backend_type == "memory":
        return InMemoryTransferState(**kwargs)
    else:
        raise ValueError(f"Unknown backend type: {backend_type}")
