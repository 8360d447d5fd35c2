"""
CORS headers for the video summary API.

The allow-origin header echoes the caller's origin when it is trusted and
falls back to "*" otherwise, so every response (errors included) can be read
cross-origin.
"""

from typing import Dict, Optional

from video_summary.config import ServerConfig, get_server_config

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, x-goog-api-key"
MAX_AGE_SECONDS = 86400


def is_trusted_origin(origin: Optional[str], config: Optional[ServerConfig] = None) -> bool:
    if not origin:
        return False
    cfg = config or get_server_config()
    if origin in cfg.allowed_origins:
        return True
    return any(origin.endswith(suffix) for suffix in cfg.allowed_origin_suffixes)


def cors_headers(origin: Optional[str], config: Optional[ServerConfig] = None) -> Dict[str, str]:
    allow_origin = origin if is_trusted_origin(origin, config) else "*"
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Max-Age": str(MAX_AGE_SECONDS),
    }
