"""Request and result models for storage operations.

Request fields accept the S3 API spelling (``Bucket``, ``Key``, ``Body``, ...)
as aliases so that boto3-style dicts validate directly. Fields the models do
not declare are kept and forwarded to the client untouched.
"""
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Tuple

from boto3.s3.transfer import TransferConfig
from pydantic import BaseModel, ConfigDict, Field

from .errors import DelegatedOperationError

DEFAULT_QUEUE_SIZE = 10
DEFAULT_PART_SIZE = 5 * 1024 * 1024
DEFAULT_PRESIGN_EXPIRY = 3600
FOLDER_DELIMITER = "/"


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


class S3Request(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, arbitrary_types_allowed=True)

    required_fields: ClassVar[Tuple[str, ...]] = ()

    def missing_fields(self) -> List[str]:
        """Alias names of required fields that are absent or empty."""
        fields = type(self).model_fields
        return [
            fields[name].alias or name
            for name in self.required_fields
            if _is_missing(getattr(self, name))
        ]

    def to_params(self, *, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        """Keyword arguments for the matching boto3 client call."""
        skip = set(exclude)
        params: Dict[str, Any] = {}
        for name, field in type(self).model_fields.items():
            if name in skip:
                continue
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, BaseModel):
                value = value.model_dump(by_alias=True, exclude_none=True)
            params[field.alias or name] = value
        for name, value in (self.model_extra or {}).items():
            if name not in skip:
                params[name] = value
        return params


class ObjectLocator(S3Request):
    """A (bucket, key) pair."""

    bucket: Optional[str] = Field(default=None, alias="Bucket")
    key: Optional[str] = Field(default=None, alias="Key")

    required_fields: ClassVar[Tuple[str, ...]] = ("bucket", "key")


class UploadRequest(ObjectLocator):
    """Payload for put-object and multipart uploads.

    ``body`` may be ``bytes``, ``str`` or a binary file-like object.
    """

    body: Any = Field(default=None, alias="Body")
    content_type: Optional[str] = Field(default=None, alias="ContentType")
    metadata: Optional[Dict[str, str]] = Field(default=None, alias="Metadata")

    required_fields: ClassVar[Tuple[str, ...]] = ("bucket", "key", "body")


class PresignRequest(UploadRequest):
    """Same shape as an upload, but the body is optional and never signed."""

    required_fields: ClassVar[Tuple[str, ...]] = ("bucket", "key")


class DeleteObjectRequest(ObjectLocator):
    version_id: Optional[str] = Field(default=None, alias="VersionId")


class ObjectIdentifier(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    key: Optional[str] = Field(default=None, alias="Key")
    version_id: Optional[str] = Field(default=None, alias="VersionId")


class DeleteSpec(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    objects: List[ObjectIdentifier] = Field(default_factory=list, alias="Objects")
    quiet: Optional[bool] = Field(default=None, alias="Quiet")


class BatchDeleteRequest(S3Request):
    """Bucket plus the ordered list of keys to remove in one call."""

    bucket: Optional[str] = Field(default=None, alias="Bucket")
    delete: Optional[DeleteSpec] = Field(default=None, alias="Delete")

    required_fields: ClassVar[Tuple[str, ...]] = ("bucket",)

    @classmethod
    def for_keys(cls, bucket: str, keys: Iterable[str], quiet: Optional[bool] = None) -> "BatchDeleteRequest":
        objects = [ObjectIdentifier(key=key) for key in keys]
        return cls(bucket=bucket, delete=DeleteSpec(objects=objects, quiet=quiet))

    @property
    def keys(self) -> List[Optional[str]]:
        if self.delete is None:
            return []
        return [obj.key for obj in self.delete.objects]

    def missing_fields(self) -> List[str]:
        missing = super().missing_fields()
        if self.delete is None or not self.delete.objects:
            missing.append("Delete.Objects")
            return missing
        for index, obj in enumerate(self.delete.objects):
            if _is_missing(obj.key):
                missing.append(f"Delete.Objects[{index}].Key")
        return missing


class DeleteBucketRequest(S3Request):
    bucket: Optional[str] = Field(default=None, alias="Bucket")

    required_fields: ClassVar[Tuple[str, ...]] = ("bucket",)


class CreateFolderRequest(S3Request):
    """A folder marker: zero-byte object whose key ends with ``/``."""

    bucket_name: Optional[str] = Field(default=None, alias="bucketName")
    folder_name: Optional[str] = Field(default=None, alias="folderName")

    required_fields: ClassVar[Tuple[str, ...]] = ("bucket_name", "folder_name")

    @property
    def folder_key(self) -> str:
        name = self.folder_name or ""
        if name.endswith(FOLDER_DELIMITER):
            return name
        return name + FOLDER_DELIMITER


class MultipartUploadConfig(BaseModel):
    """Concurrency and part size for the boto3 transfer manager.

    Unknown fields are passed to ``TransferConfig`` and win over the
    computed values.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    queue_size: int = Field(default=DEFAULT_QUEUE_SIZE, alias="queueSize", gt=0)
    part_size: int = Field(default=DEFAULT_PART_SIZE, alias="partSize", gt=0)

    def to_transfer_config(self) -> TransferConfig:
        kwargs: Dict[str, Any] = {
            "max_concurrency": self.queue_size,
            "multipart_chunksize": self.part_size,
            "multipart_threshold": self.part_size,
        }
        kwargs.update(self.model_extra or {})
        return TransferConfig(**kwargs)


class Credentials(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    access_key_id: Optional[str] = Field(default=None, alias="accessKeyId")
    secret_access_key: Optional[str] = Field(default=None, alias="secretAccessKey")
    session_token: Optional[str] = Field(default=None, alias="sessionToken")


class ConnectConfig(BaseModel):
    """Options for ``connect``.

    Region, endpoint and credentials fall back to the environment when left
    unset. Unknown fields are forwarded to ``boto3.client``.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    region: Optional[str] = None
    endpoint: Optional[str] = None
    credentials: Credentials = Field(default_factory=Credentials)
    force_path_style: bool = Field(default=True, alias="forcePathStyle")
    retry_mode: str = Field(default="standard", alias="retryMode")
    max_attempts: int = Field(default=3, alias="maxAttempts", gt=0)


class _OperationResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    response: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[DelegatedOperationError] = None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


class UploadResult(_OperationResult):
    is_uploaded: bool


class DeleteResult(_OperationResult):
    is_deleted: bool


class PresignResult(_OperationResult):
    presigned_url: Optional[str] = None
    expires_in: int = DEFAULT_PRESIGN_EXPIRY
