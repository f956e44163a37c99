"""Thin helpers around a boto3 S3 client."""
from .logger import setup_logger
from .storage import (
    DelegatedOperationError,
    InvalidParameterError,
    MissingParameterError,
    StorageConnectionError,
    StorageError,
    connect,
    create_folder_in_bucket,
    delete_bucket,
    delete_file_from_bucket,
    delete_files_from_bucket,
    get_active_client,
    get_upload_file_url,
    upload_multipart_with_progress,
    upload_simple,
)

__version__ = "0.1.0"

__all__ = [
    "setup_logger",
    "connect",
    "get_active_client",
    "upload_simple",
    "upload_multipart_with_progress",
    "get_upload_file_url",
    "delete_file_from_bucket",
    "delete_files_from_bucket",
    "delete_bucket",
    "create_folder_in_bucket",
    "StorageError",
    "InvalidParameterError",
    "MissingParameterError",
    "StorageConnectionError",
    "DelegatedOperationError",
]
