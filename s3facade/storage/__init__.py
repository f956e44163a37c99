from .client import (
    build_client,
    connect,
    get_active_client,
    reset_active_client,
)
from .errors import (
    DelegatedOperationError,
    InvalidParameterError,
    MissingParameterError,
    StorageConnectionError,
    StorageError,
)
from .models import (
    BatchDeleteRequest,
    ConnectConfig,
    CreateFolderRequest,
    DeleteBucketRequest,
    DeleteObjectRequest,
    DeleteResult,
    MultipartUploadConfig,
    PresignRequest,
    PresignResult,
    UploadRequest,
    UploadResult,
)
from .s3 import (
    create_folder_in_bucket,
    delete_bucket,
    delete_file_from_bucket,
    delete_files_from_bucket,
    get_upload_file_url,
    upload_multipart_with_progress,
    upload_simple,
)

__all__ = [
    "build_client",
    "connect",
    "get_active_client",
    "reset_active_client",
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
    "ConnectConfig",
    "MultipartUploadConfig",
    "UploadRequest",
    "PresignRequest",
    "DeleteObjectRequest",
    "BatchDeleteRequest",
    "DeleteBucketRequest",
    "CreateFolderRequest",
    "UploadResult",
    "DeleteResult",
    "PresignResult",
]
