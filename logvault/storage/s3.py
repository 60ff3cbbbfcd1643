from pathlib import Path
from typing import Any

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from logvault.exceptions import LifecycleError, StorageUnavailableError, UploadError
from logvault.logging import LoggerType, get_logger

from .interface import ObjectStorageInterface

NO_LIFECYCLE_ERROR_CODE = "NoSuchLifecycleConfiguration"


class S3ObjectStorage(ObjectStorageInterface):
    """S3-compatible object storage backed by a boto3 client."""

    def __init__(self, s3_client, bucket: str, logger: LoggerType | None = None):
        self.s3_client = s3_client
        self.bucket = bucket
        self.logger = logger or get_logger(__name__)

    def probe(self) -> None:
        try:
            self.s3_client.head_bucket(Bucket=self.bucket)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            raise StorageUnavailableError(f"Bucket {self.bucket!r} is not accessible ({error_code})") from e
        except BotoCoreError as e:
            raise StorageUnavailableError(f"Storage endpoint is not reachable: {e}") from e

    def put_object(self, key: str, path: Path) -> None:
        try:
            self.s3_client.upload_file(
                str(path),
                self.bucket,
                key,
                ExtraArgs={"ContentType": "text/plain"},
            )
        except (ClientError, BotoCoreError, S3UploadFailedError, OSError) as e:
            raise UploadError(key, str(e)) from e
        self.logger.debug("object-written", bucket=self.bucket, key=key)

    def get_lifecycle_configuration(self) -> dict[str, Any] | None:
        try:
            response = self.s3_client.get_bucket_lifecycle_configuration(Bucket=self.bucket)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == NO_LIFECYCLE_ERROR_CODE:
                self.logger.debug("lifecycle-absent", bucket=self.bucket)
                return None
            raise LifecycleError(f"Failed to get lifecycle configuration of {self.bucket!r}: {e}") from e
        except BotoCoreError as e:
            raise LifecycleError(f"Failed to get lifecycle configuration of {self.bucket!r}: {e}") from e

        return {"Rules": response.get("Rules", [])}

    def put_lifecycle_configuration(self, configuration: dict[str, Any]) -> None:
        try:
            self.s3_client.put_bucket_lifecycle_configuration(
                Bucket=self.bucket,
                LifecycleConfiguration=configuration,
            )
        except (ClientError, BotoCoreError) as e:
            raise LifecycleError(f"Failed to set lifecycle configuration of {self.bucket!r}: {e}") from e
