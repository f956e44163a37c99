"""S3 storage operations.

Every operation validates its request, makes one call on the boto3 client and
maps the outcome into a result model. Missing or malformed fields and a
missing client raise before anything is sent; failures of the call itself
come back as a result with its status flag unset and ``error`` filled in.
"""
import logging
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from botocore.exceptions import BotoCoreError, ClientError
from boto3.exceptions import S3UploadFailedError
from pydantic import BaseModel, ValidationError

from s3facade.logger import operation_scope
from .client import resolve_client
from .errors import DelegatedOperationError, InvalidParameterError, MissingParameterError, StorageError
from .models import (
    DEFAULT_PRESIGN_EXPIRY,
    BatchDeleteRequest,
    CreateFolderRequest,
    DeleteBucketRequest,
    DeleteObjectRequest,
    DeleteResult,
    MultipartUploadConfig,
    PresignRequest,
    PresignResult,
    UploadRequest,
    UploadResult,
    S3Request,
)
from .progress import ProgressCallback, ProgressTracker, as_fileobj, payload_size

_logger = logging.getLogger("s3facade")

_EXPECTED_ERRORS = (ClientError, BotoCoreError, S3UploadFailedError, StorageError)
_LOGGED_BATCH_ERRORS = 5

ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce(model: Type[ModelT], request: Union[ModelT, Mapping[str, Any], None], request_name: str) -> ModelT:
    if isinstance(request, model):
        return request
    try:
        return model.model_validate(dict(request or {}))
    except ValidationError as e:
        error = InvalidParameterError.from_validation_error(e, request_name)
        _logger.warning(f"[S3] {error}")
        raise error from e


def _validate(request: S3Request, request_name: str) -> None:
    missing = request.missing_fields()
    if missing:
        _logger.warning(f"[S3] {request_name} has missing data: {', '.join(missing)}")
        raise MissingParameterError(missing, request_name)


def _delegated_failure(operation: str, target: str, exc: Exception) -> DelegatedOperationError:
    if isinstance(exc, _EXPECTED_ERRORS):
        _logger.error(f"[S3] Failed to {operation} {target}: {exc}")
    else:
        _logger.exception(f"[S3] Unexpected error during {operation} {target}: {exc}")
    return DelegatedOperationError(operation, exc)


def upload_simple(
    request: Union[UploadRequest, Mapping[str, Any]],
    *,
    client: Optional[Any] = None,
) -> UploadResult:
    """
    Upload an object with a single put-object call.

    Args:
        request: ``Bucket``, ``Key`` and ``Body`` plus any other put-object parameters
        client: S3 client to use instead of the active one

    Returns:
        UploadResult: ``is_uploaded`` with the raw response, or the error

    Raises:
        MissingParameterError: ``Bucket``, ``Key`` or ``Body`` is missing
        InvalidParameterError: a field has a value of the wrong type
    """
    with operation_scope("upload_simple"):
        req = _coerce(UploadRequest, request, "uploadParams")
        _validate(req, "uploadParams")
        s3_client = resolve_client(client)
        target = f"s3://{req.bucket}/{req.key}"

        try:
            _logger.info(f"[S3] Uploading to {target}")
            response = s3_client.put_object(**req.to_params())
        except Exception as e:
            return UploadResult(is_uploaded=False, error=_delegated_failure("put object", target, e))

        _logger.info(f"[S3] File uploaded successfully: {target}")
        return UploadResult(is_uploaded=True, response=dict(response or {}))


def upload_multipart_with_progress(
    multipart_config: Union[MultipartUploadConfig, Mapping[str, Any], None],
    progress_callback: Optional[ProgressCallback],
    request: Union[UploadRequest, Mapping[str, Any]],
    *,
    client: Optional[Any] = None,
) -> UploadResult:
    """
    Upload through the boto3 transfer manager, reporting progress.

    ``progress_callback`` receives the percentage sent so far after every
    part chunk, or ``None`` when the payload size cannot be determined (for
    example a non-seekable stream).

    Args:
        multipart_config: ``queueSize`` (concurrent parts) and ``partSize`` (bytes)
        progress_callback: called with the percentage; ignored if not callable
        request: ``Bucket``, ``Key`` and ``Body``; other fields become ``ExtraArgs``
        client: S3 client to use instead of the active one

    Returns:
        UploadResult: ``response`` holds ``Bucket`` and ``Key`` on success

    Raises:
        MissingParameterError: ``Bucket``, ``Key`` or ``Body`` is missing
        InvalidParameterError: a request field or ``multipart_config`` value is
            of the wrong type or not positive
    """
    with operation_scope("upload_multipart"):
        req = _coerce(UploadRequest, request, "uploadParams")
        _validate(req, "uploadParams")
        upload_config = _coerce(MultipartUploadConfig, multipart_config, "multipartConfig")
        s3_client = resolve_client(client)
        target = f"s3://{req.bucket}/{req.key}"

        fileobj = as_fileobj(req.body)
        tracker = ProgressTracker(payload_size(fileobj), progress_callback)
        extra_args = req.to_params(exclude=("bucket", "key", "body"))

        try:
            _logger.info(
                f"[S3] Multipart upload to {target} "
                f"(queue_size={upload_config.queue_size}, part_size={upload_config.part_size})"
            )
            s3_client.upload_fileobj(
                fileobj,
                req.bucket,
                req.key,
                ExtraArgs=extra_args or None,
                Callback=tracker,
                Config=upload_config.to_transfer_config(),
            )
        except Exception as e:
            return UploadResult(is_uploaded=False, error=_delegated_failure("upload object", target, e))

        _logger.info(f"[S3] Multipart upload finished: {target} ({tracker.loaded} bytes)")
        return UploadResult(is_uploaded=True, response={"Bucket": req.bucket, "Key": req.key})


def get_upload_file_url(
    request: Union[PresignRequest, Mapping[str, Any]],
    *,
    client: Optional[Any] = None,
    expires_in: int = DEFAULT_PRESIGN_EXPIRY,
) -> PresignResult:
    """
    Generate a presigned PUT URL for uploading an object.

    Every request field except ``Body`` is signed, so ``ContentType`` and
    ``Metadata`` must match on the eventual PUT.

    Args:
        request: ``Bucket`` and ``Key`` plus optional put-object parameters
        client: S3 client to use instead of the active one
        expires_in: URL lifetime in seconds, one hour by default

    Returns:
        PresignResult: the URL, or the error

    Raises:
        MissingParameterError: ``Bucket`` or ``Key`` is missing
    """
    with operation_scope("presign_upload"):
        req = _coerce(PresignRequest, request, "uploadParams")
        _validate(req, "uploadParams")
        s3_client = resolve_client(client)
        target = f"s3://{req.bucket}/{req.key}"

        try:
            presigned_url = s3_client.generate_presigned_url(
                "put_object",
                Params=req.to_params(exclude=("body",)),
                ExpiresIn=expires_in,
            )
            if not presigned_url:
                raise StorageError("Generated presigned URL is empty")
        except Exception as e:
            return PresignResult(
                expires_in=expires_in,
                error=_delegated_failure("generate presigned URL", target, e),
            )

        _logger.debug(f"[S3] Generated presigned upload URL for {target}")
        return PresignResult(presigned_url=str(presigned_url), expires_in=expires_in)


def delete_file_from_bucket(
    request: Union[DeleteObjectRequest, Mapping[str, Any]],
    *,
    client: Optional[Any] = None,
) -> DeleteResult:
    """
    Delete a single object.

    Raises:
        MissingParameterError: ``Bucket`` or ``Key`` is missing
    """
    with operation_scope("delete_object"):
        req = _coerce(DeleteObjectRequest, request, "deleteParams")
        _validate(req, "deleteParams")
        s3_client = resolve_client(client)
        target = f"s3://{req.bucket}/{req.key}"

        try:
            _logger.info(f"[S3] Deleting {target}")
            response = s3_client.delete_object(**req.to_params())
        except Exception as e:
            return DeleteResult(is_deleted=False, error=_delegated_failure("delete object", target, e))

        _logger.info(f"[S3] File deleted successfully: {target}")
        return DeleteResult(is_deleted=True, response=dict(response or {}))


def delete_files_from_bucket(
    request: Union[BatchDeleteRequest, Mapping[str, Any]],
    *,
    client: Optional[Any] = None,
) -> DeleteResult:
    """
    Delete several keys with a single delete-objects call.

    Per-key failures are reported by S3 in the response's ``Errors`` list and
    are returned as they are; ``is_deleted`` only reflects the call itself.

    Raises:
        MissingParameterError: ``Bucket`` is missing, ``Delete.Objects`` is
            empty or an entry has no ``Key``
    """
    with operation_scope("delete_objects"):
        req = _coerce(BatchDeleteRequest, request, "deleteParams")
        _validate(req, "deleteParams")
        s3_client = resolve_client(client)
        target = f"s3://{req.bucket} ({len(req.keys)} keys)"

        try:
            _logger.info(f"[S3] Batch deleting from {target}")
            response = s3_client.delete_objects(**req.to_params())
        except Exception as e:
            return DeleteResult(is_deleted=False, error=_delegated_failure("delete objects", target, e))

        response = dict(response or {})
        errors = response.get("Errors") or []
        for error in errors[:_LOGGED_BATCH_ERRORS]:
            _logger.warning(
                f"[S3] Failed to delete {error.get('Key')}: "
                f"{error.get('Code')} - {error.get('Message')}"
            )
        if len(errors) > _LOGGED_BATCH_ERRORS:
            _logger.warning(f"[S3] ... and {len(errors) - _LOGGED_BATCH_ERRORS} more errors")

        _logger.info(f"[S3] Batch delete finished: {target}, {len(errors)} failed")
        return DeleteResult(is_deleted=True, response=response)


def delete_bucket(
    request: Union[DeleteBucketRequest, Mapping[str, Any]],
    *,
    client: Optional[Any] = None,
) -> DeleteResult:
    """
    Delete a bucket; it must already be empty.

    Raises:
        MissingParameterError: ``Bucket`` is missing
    """
    with operation_scope("delete_bucket"):
        req = _coerce(DeleteBucketRequest, request, "deleteParams")
        _validate(req, "deleteParams")
        s3_client = resolve_client(client)
        target = f"s3://{req.bucket}"

        try:
            _logger.info(f"[S3] Deleting bucket {target}")
            response = s3_client.delete_bucket(**req.to_params())
        except Exception as e:
            return DeleteResult(is_deleted=False, error=_delegated_failure("delete bucket", target, e))

        _logger.info(f"[S3] Bucket deleted successfully: {target}")
        return DeleteResult(is_deleted=True, response=dict(response or {}))


def create_folder_in_bucket(
    request: Union[CreateFolderRequest, Mapping[str, Any]],
    *,
    client: Optional[Any] = None,
) -> UploadResult:
    """
    Create a folder marker: an empty object keyed by the folder name.

    A trailing ``/`` is added to ``folderName`` when it does not end with one.

    Raises:
        MissingParameterError: ``bucketName`` or ``folderName`` is missing
    """
    with operation_scope("create_folder"):
        req = _coerce(CreateFolderRequest, request, "createParams")
        _validate(req, "createParams")
        s3_client = resolve_client(client)
        folder_key = req.folder_key
        target = f"s3://{req.bucket_name}/{folder_key}"

        params = req.to_params(exclude=("bucket_name", "folder_name"))
        params.update(Bucket=req.bucket_name, Key=folder_key, Body=b"")
        try:
            _logger.info(f"[S3] Creating folder {target}")
            response = s3_client.put_object(**params)
        except Exception as e:
            return UploadResult(is_uploaded=False, error=_delegated_failure("create folder", target, e))

        _logger.info(f"[S3] Folder created successfully: {target}")
        return UploadResult(is_uploaded=True, response=dict(response or {}))
