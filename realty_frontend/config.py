# realty_frontend/config.py
# Environment-aware configuration for the marketplace frontend

import os
from pathlib import Path
from typing import Literal, Optional

# Environment detection - normalize to lowercase
_raw_env = os.environ.get("ENV", "production").lower()
ENV: Literal["local", "staging", "production"] = _raw_env if _raw_env in ("local", "staging", "production") else "production"  # type: ignore

# Environment flags (using normalized ENV)
IS_LOCAL = (ENV == "local")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "production")

IS_DEV = IS_LOCAL

LOCAL_DEFAULT_API_URL = "http://127.0.0.1:5000"


def get_env() -> Literal["local", "staging", "production"]:
    """Get current environment ("local", "staging" or "production")."""
    return ENV


def validate_api_url(url: str, env: str) -> None:
    """
    Validate API base URL according to environment security rules.

    Args:
        url: The API base URL to validate
        env: Current environment ("local", "staging", "production")

    Raises:
        ValueError: If URL violates security constraints for the environment
    """
    if not url:
        raise ValueError("API base URL cannot be empty")

    # Production/staging must use HTTPS and never localhost
    if env in ("staging", "production"):
        if not url.startswith("https://"):
            raise ValueError(f"Production/staging must use HTTPS. Got: {url}")
        if "127.0.0.1" in url or "localhost" in url:
            raise ValueError(f"Production/staging cannot use localhost URLs. Got: {url}")


def get_api_base_url(env: Optional[str] = None) -> str:
    """
    Get API base URL with strict priority and validation.

    Priority:
    1. BACKEND_URL environment variable
    2. API_BASE_URL environment variable
    3. Local dev default (http://127.0.0.1:5000) ONLY if ENV == "local"
    4. Raise error if production/staging with no configured URL

    Returns:
        Validated API base URL with trailing slash removed

    Raises:
        RuntimeError: If production/staging environment has no configured URL
    """
    env = env or ENV

    for var in ("BACKEND_URL", "API_BASE_URL"):
        configured = os.environ.get(var, "").strip()
        if configured:
            url = configured.rstrip("/")
            validate_api_url(url, env)
            return url

    if env == "local":
        return LOCAL_DEFAULT_API_URL

    raise RuntimeError(
        f"Backend URL not configured for {env.upper()} environment. "
        f"Set BACKEND_URL to the marketplace API URL. "
        f"Production/staging MUST use HTTPS and cannot fall back to localhost."
    )


def get_storage_path() -> Path:
    """Location of the durable client storage file (the browser-storage stand-in)."""
    configured = os.environ.get("REALTY_STORAGE_PATH", "").strip()
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".realty_frontend" / "storage.json"


# Request timeout in seconds
API_TIMEOUT_SECONDS = float(os.environ.get("API_TIMEOUT_SECONDS", "20"))

# Upload limits (mirrors the uploader widgets)
UPLOAD_MAX_SIZE_MB = float(os.environ.get("UPLOAD_MAX_SIZE_MB", "8"))
UPLOAD_MAX_FILES = int(os.environ.get("UPLOAD_MAX_FILES", "4"))

# Feature flags
ENABLE_VERBOSE_LOGGING = IS_DEV or IS_STAGING

if ENABLE_VERBOSE_LOGGING:
    print(f"[CONFIG] Environment: {ENV}")
    print(f"[CONFIG] Storage: {get_storage_path()}")
