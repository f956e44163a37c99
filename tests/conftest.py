"""
Shared fixtures and test utilities.
"""

import os
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest

# Set test environment variables before importing the package
os.environ.update({
    "AWS_ACCESS_KEY_ID": "test-key",
    "AWS_SECRET_ACCESS_KEY": "test-secret",
    "AWS_ENDPOINT": "http://localhost:9000",
    "LOG_LEVEL": "DEBUG",
})
os.environ.pop("AWS_DEFAULT_REGION", None)

from s3facade.storage import client as client_module
from tests.fake_s3 import InMemoryS3


@pytest.fixture(autouse=True)
def reset_active_client() -> Generator[None]:
    """Every test starts without an active client."""
    client_module.reset_active_client()
    yield
    client_module.reset_active_client()


@pytest.fixture
def mock_s3() -> MagicMock:
    """Provide a mocked boto3 S3 client."""
    return MagicMock()


@pytest.fixture
def fake_s3() -> InMemoryS3:
    """Provide an in-memory S3 with one empty bucket named "b"."""
    return InMemoryS3(buckets={"b": {}})


@pytest.fixture
def real_client():
    """Provide a real boto3 client; building and presigning need no network."""
    return client_module.build_client({"endpoint": "http://localhost:9000"})
