import boto3
from botocore.client import Config

from .s3 import S3ObjectStorage


def create_s3_storage(
    bucket: str,
    region_name: str = "us-east-1",
    endpoint_url: str | None = None,
    access_key_id: str | None = None,
    secret_access_key: str | None = None,
    connect_timeout: int = 10,
    read_timeout: int = 60,
    max_attempts: int = 3,
) -> S3ObjectStorage:
    """
    Create S3-compatible object storage.

    Credentials left as None are resolved by boto3's default chain
    (environment, shared config, instance profile).
    """
    s3_client = boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        region_name=region_name,
        config=Config(
            signature_version="s3v4",
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            retries={"max_attempts": max_attempts, "mode": "standard"},
        ),
    )

    return S3ObjectStorage(s3_client, bucket)
