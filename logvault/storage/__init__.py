from .factory import create_s3_storage
from .interface import ObjectStorageInterface
from .s3 import S3ObjectStorage

__all__ = [
    "ObjectStorageInterface",
    "S3ObjectStorage",
    "create_s3_storage",
]
