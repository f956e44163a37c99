"""Environment-backed configuration."""
import os
from typing import Dict, Optional
from dotenv import load_dotenv

# Load .env if present
load_dotenv()

DEFAULT_REGION = "us-east-1"


def get_s3_config() -> Dict[str, Optional[str]]:
    """Environment-derived defaults used by ``connect``."""
    return {
        "endpoint_url": os.getenv("AWS_ENDPOINT"),  # optional, for MinIO and other S3-compatible services
        "access_key": os.getenv("AWS_ACCESS_KEY_ID"),
        "secret_key": os.getenv("AWS_SECRET_ACCESS_KEY"),
        "region": os.getenv("AWS_DEFAULT_REGION") or DEFAULT_REGION,
    }


def is_s3_configured() -> bool:
    """Whether credentials are available from the environment."""
    cfg = get_s3_config()
    return bool(cfg.get("access_key") and cfg.get("secret_key"))


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
