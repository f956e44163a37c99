"""S3 client construction and the active connection."""
import logging
from typing import Any, Dict, Mapping, Optional, Union

import boto3
from botocore.config import Config
from pydantic import ValidationError

from s3facade.config import get_s3_config
from s3facade.logger import operation_scope
from .errors import InvalidParameterError, StorageConnectionError
from .models import ConnectConfig

_logger = logging.getLogger("s3facade")

_active_client = None


def _as_connect_config(config: Union[ConnectConfig, Mapping[str, Any], None]) -> ConnectConfig:
    if config is None:
        return ConnectConfig()
    if isinstance(config, ConnectConfig):
        return config
    try:
        return ConnectConfig.model_validate(dict(config))
    except ValidationError as e:
        raise InvalidParameterError.from_validation_error(e, "connect config") from e


def build_client_kwargs(config: Union[ConnectConfig, Mapping[str, Any], None] = None) -> Dict[str, Any]:
    """
    Translate connect options into ``boto3.client("s3", ...)`` keyword arguments.

    Unset region/endpoint/credentials fall back to the environment. Extra
    fields on the config are passed through and override computed values.
    """
    cfg = _as_connect_config(config)
    env = get_s3_config()
    creds = cfg.credentials

    client_kwargs: Dict[str, Any] = {
        "region_name": cfg.region or env.get("region"),
        "aws_access_key_id": creds.access_key_id or env.get("access_key"),
        "aws_secret_access_key": creds.secret_access_key or env.get("secret_key"),
        "config": Config(
            signature_version="s3v4",
            s3={"addressing_style": "path" if cfg.force_path_style else "auto"},
            retries={"mode": cfg.retry_mode, "max_attempts": cfg.max_attempts},
        ),
    }
    if creds.session_token:
        client_kwargs["aws_session_token"] = creds.session_token

    # Custom endpoint (MinIO and other S3-compatible services) only when set
    endpoint = cfg.endpoint or env.get("endpoint_url")
    if endpoint:
        client_kwargs["endpoint_url"] = endpoint

    client_kwargs.update(cfg.model_extra or {})
    return client_kwargs


def build_client(config: Union[ConnectConfig, Mapping[str, Any], None] = None):
    """Create an S3 client without checking that it can reach the service."""
    return boto3.client("s3", **build_client_kwargs(config))


def connect(config: Union[ConnectConfig, Mapping[str, Any], None] = None, *, require_buckets: bool = True):
    """
    Build an S3 client, verify it by listing buckets and make it the active client.

    Args:
        config: connect options; dicts use the same keys as ``ConnectConfig``
        require_buckets: treat an account without buckets as a failed connection

    Returns:
        The connected boto3 S3 client.

    Raises:
        InvalidParameterError: ``config`` has a value of the wrong type
        StorageConnectionError: construction or the bucket listing failed, or
            no buckets were found while ``require_buckets`` is set
    """
    global _active_client

    with operation_scope("connect"):
        cfg = _as_connect_config(config)
        try:
            client = build_client(cfg)
            response = client.list_buckets()
        except Exception as e:
            _logger.error(f"[S3] Connection failed: {e}")
            raise StorageConnectionError(f"Failed to connect to S3: {e}") from e

        buckets = [bucket.get("Name") for bucket in response.get("Buckets") or []]
        if not buckets and require_buckets:
            _logger.error("[S3] Connection successful, but no buckets found")
            raise StorageConnectionError("Connection successful, but no buckets found.")

        _active_client = client
        _logger.info(f"[S3] Connection successful, buckets: {buckets}")
        return client


def get_active_client():
    """Client recorded by the last successful ``connect``, if any."""
    return _active_client


def reset_active_client() -> None:
    global _active_client
    _active_client = None


def resolve_client(client: Optional[Any] = None):
    """Pick the explicit client or fall back to the active one."""
    if client is not None:
        return client
    if _active_client is None:
        raise StorageConnectionError("No S3 client available: call connect() or pass client=")
    return _active_client
