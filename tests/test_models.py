"""Tests for request and result models."""

import pytest
from pydantic import ValidationError

from s3facade.storage.errors import DelegatedOperationError, MissingParameterError
from s3facade.storage.models import (
    BatchDeleteRequest,
    CreateFolderRequest,
    MultipartUploadConfig,
    PresignRequest,
    UploadRequest,
    UploadResult,
)


class TestRequests:
    """Test request validation and parameter mapping."""

    def test_alias_and_field_names_are_equivalent(self):
        by_alias = UploadRequest.model_validate({"Bucket": "b", "Key": "k", "Body": b"x"})
        by_name = UploadRequest(bucket="b", key="k", body=b"x")

        assert by_alias.to_params() == by_name.to_params() == {"Bucket": "b", "Key": "k", "Body": b"x"}

    def test_to_params_keeps_extras_and_drops_none(self):
        request = UploadRequest.model_validate(
            {"Bucket": "b", "Key": "k", "Body": "x", "ACL": "private", "ContentType": None}
        )

        assert request.to_params(exclude=("body",)) == {"Bucket": "b", "Key": "k", "ACL": "private"}

    def test_missing_fields_use_api_names(self):
        assert UploadRequest().missing_fields() == ["Bucket", "Key", "Body"]
        assert PresignRequest().missing_fields() == ["Bucket", "Key"]
        assert CreateFolderRequest().missing_fields() == ["bucketName", "folderName"]

    def test_batch_keys(self):
        request = BatchDeleteRequest.for_keys("b", ["x", "y"])

        assert request.keys == ["x", "y"]
        assert request.missing_fields() == []
        assert BatchDeleteRequest(bucket="b").keys == []

    @pytest.mark.parametrize("folder,key", [("docs/", "docs/"), ("docs", "docs/"), ("a/b", "a/b/")])
    def test_folder_key(self, folder, key):
        assert CreateFolderRequest(bucket_name="b", folder_name=folder).folder_key == key


class TestMultipartUploadConfig:
    """Test multipart configuration."""

    def test_defaults(self):
        config = MultipartUploadConfig()

        assert config.queue_size == 10
        assert config.part_size == 5 * 1024 * 1024

    def test_camel_case_overrides(self):
        config = MultipartUploadConfig.model_validate({"queueSize": 4, "partSize": 6 * 1024 * 1024})
        transfer = config.to_transfer_config()

        assert transfer.max_concurrency == 4
        assert transfer.multipart_chunksize == 6 * 1024 * 1024
        assert transfer.multipart_threshold == 6 * 1024 * 1024

    @pytest.mark.parametrize("field", ["queueSize", "partSize"])
    def test_rejects_non_positive(self, field):
        with pytest.raises(ValidationError):
            MultipartUploadConfig.model_validate({field: 0})


class TestResults:
    """Test result helpers and error types."""

    def test_raise_for_error_on_success(self):
        UploadResult(is_uploaded=True).raise_for_error()

    def test_raise_for_error_on_failure(self):
        error = DelegatedOperationError("put object", RuntimeError("boom"))

        with pytest.raises(DelegatedOperationError, match="Failed to put object: boom"):
            UploadResult(is_uploaded=False, error=error).raise_for_error()

    def test_missing_parameter_error_is_value_error(self):
        error = MissingParameterError(["Bucket", "Key"], "uploadParams")

        assert isinstance(error, ValueError)
        assert str(error) == "uploadParams has missing data: Bucket, Key"
