"""Tests for the boto3-backed object storage."""

from pathlib import Path

import pytest
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError, EndpointConnectionError

from logvault.exceptions import LifecycleError, StorageUnavailableError, UploadError
from logvault.storage import S3ObjectStorage, create_s3_storage


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3_client(mocker):
    return mocker.Mock()


@pytest.fixture
def s3_storage(s3_client):
    return S3ObjectStorage(s3_client, "log-bucket")


class TestProbe:
    def test_probe_heads_bucket(self, s3_storage, s3_client):
        """Test the probe is a head_bucket call on the destination bucket."""
        s3_storage.probe()
        s3_client.head_bucket.assert_called_once_with(Bucket="log-bucket")

    def test_probe_client_error(self, s3_storage, s3_client):
        """Test a missing or forbidden bucket makes the storage unavailable."""
        s3_client.head_bucket.side_effect = client_error("403", "HeadBucket")
        with pytest.raises(StorageUnavailableError, match="403"):
            s3_storage.probe()

    def test_probe_connection_error(self, s3_storage, s3_client):
        """Test an unreachable endpoint makes the storage unavailable."""
        s3_client.head_bucket.side_effect = EndpointConnectionError(endpoint_url="http://localhost:9000")
        with pytest.raises(StorageUnavailableError, match="not reachable"):
            s3_storage.probe()


class TestPutObject:
    def test_uploads_file_as_text(self, s3_storage, s3_client):
        """Test logs are uploaded with managed transfer and a text content type."""
        s3_storage.put_object("build-api/12.log", Path("/jobs/build-api/builds/12/log"))
        s3_client.upload_file.assert_called_once_with(
            "/jobs/build-api/builds/12/log",
            "log-bucket",
            "build-api/12.log",
            ExtraArgs={"ContentType": "text/plain"},
        )

    @pytest.mark.parametrize(
        "error",
        [
            client_error("InternalError", "PutObject"),
            EndpointConnectionError(endpoint_url="http://localhost:9000"),
            S3UploadFailedError("Failed to upload"),
            FileNotFoundError("log vanished"),
        ],
    )
    def test_failures_become_upload_errors(self, s3_storage, s3_client, error):
        """Test every kind of upload failure is reported as UploadError."""
        s3_client.upload_file.side_effect = error
        with pytest.raises(UploadError) as exc_info:
            s3_storage.put_object("build-api/12.log", Path("/tmp/log"))
        assert exc_info.value.key == "build-api/12.log"
        assert exc_info.value.__cause__ is error


class TestLifecycleConfiguration:
    def test_absent_configuration(self, s3_storage, s3_client):
        """Test NoSuchLifecycleConfiguration means there is no configuration."""
        s3_client.get_bucket_lifecycle_configuration.side_effect = client_error(
            "NoSuchLifecycleConfiguration", "GetBucketLifecycleConfiguration"
        )
        assert s3_storage.get_lifecycle_configuration() is None

    def test_existing_configuration(self, s3_storage, s3_client):
        """Test an existing configuration is returned as rules."""
        rules = [{"ID": "custom", "Status": "Enabled", "Expiration": {"Days": 7}, "Filter": {}}]
        s3_client.get_bucket_lifecycle_configuration.return_value = {"Rules": rules, "ResponseMetadata": {}}
        assert s3_storage.get_lifecycle_configuration() == {"Rules": rules}

    def test_query_failure(self, s3_storage, s3_client):
        """Test other query failures raise LifecycleError."""
        s3_client.get_bucket_lifecycle_configuration.side_effect = client_error(
            "AccessDenied", "GetBucketLifecycleConfiguration"
        )
        with pytest.raises(LifecycleError, match="AccessDenied"):
            s3_storage.get_lifecycle_configuration()

    def test_put_configuration(self, s3_storage, s3_client):
        """Test the configuration is installed on the destination bucket."""
        configuration = {"Rules": []}
        s3_storage.put_lifecycle_configuration(configuration)
        s3_client.put_bucket_lifecycle_configuration.assert_called_once_with(
            Bucket="log-bucket", LifecycleConfiguration=configuration
        )

    def test_put_failure(self, s3_storage, s3_client):
        """Test install failures raise LifecycleError."""
        s3_client.put_bucket_lifecycle_configuration.side_effect = client_error(
            "MalformedXML", "PutBucketLifecycleConfiguration"
        )
        with pytest.raises(LifecycleError, match="MalformedXML"):
            s3_storage.put_lifecycle_configuration({"Rules": []})


class TestCreateS3Storage:
    def test_client_configuration(self, mock_s3_client):
        """Test the boto3 client gets timeouts, retries and endpoint."""
        storage = create_s3_storage(
            "log-bucket",
            region_name="eu-west-1",
            endpoint_url="http://localhost:9000",
            access_key_id="key",
            secret_access_key="secret",
            connect_timeout=5,
            read_timeout=30,
            max_attempts=4,
        )

        assert storage.bucket == "log-bucket"
        assert storage.s3_client is mock_s3_client.return_value

        args, kwargs = mock_s3_client.call_args
        assert args == ("s3",)
        assert kwargs["endpoint_url"] == "http://localhost:9000"
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["aws_access_key_id"] == "key"
        config = kwargs["config"]
        assert config.connect_timeout == 5
        assert config.read_timeout == 30
        assert config.retries == {"max_attempts": 4, "mode": "standard"}
