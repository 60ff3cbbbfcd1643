from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class ObjectStorageInterface(ABC):
    """Abstract interface for the object storage logs are offloaded to."""

    bucket: str

    @abstractmethod
    def probe(self) -> None:
        """
        Check the storage client is usable.

        Raises:
            StorageUnavailableError: If the storage does not respond.
        """
        pass

    @abstractmethod
    def put_object(self, key: str, path: Path) -> None:
        """
        Upload the file at `path` to `key`, overwriting any existing object.

        Raises:
            UploadError: If the upload fails for any reason.
        """
        pass

    @abstractmethod
    def get_lifecycle_configuration(self) -> dict[str, Any] | None:
        """
        Get the lifecycle configuration of the bucket.

        Returns:
            The configuration, or None if the bucket has none.

        Raises:
            LifecycleError: If the configuration cannot be queried.
        """
        pass

    @abstractmethod
    def put_lifecycle_configuration(self, configuration: dict[str, Any]) -> None:
        """
        Install a lifecycle configuration on the bucket.

        Raises:
            LifecycleError: If the configuration cannot be installed.
        """
        pass
