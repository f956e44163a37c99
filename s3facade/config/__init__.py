from .settings import (
    get_log_level,
    get_s3_config,
    is_s3_configured,
)

__all__ = [
    "get_log_level",
    "get_s3_config",
    "is_s3_configured",
]
