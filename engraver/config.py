"""
Defaults & Environment Overrides
================================
Central registry of the default filter parameters and front-end settings.

The CLI, the web service and the desktop window all take their defaults
from here so the three front-ends render the same image out of the box.

Environment overrides:
    ENGRAVER_HOST        web service bind address
    ENGRAVER_PORT        web service port
    ENGRAVER_MAX_UPLOAD  maximum accepted request body, bytes
"""
import os

# Filter defaults
DEFAULT_NEIGHBORS: str = "121202121"
DEFAULT_ADD: float = 127.0
DEFAULT_MULT: float = 0.5

# Images smaller than this are filtered on the calling thread
PARALLEL_MIN_PIXELS: int = 65_536


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


# Web service
WEB_HOST: str = os.environ.get("ENGRAVER_HOST", "127.0.0.1")
WEB_PORT: int = _env_int("ENGRAVER_PORT", 8000)
MAX_UPLOAD_BYTES: int = _env_int("ENGRAVER_MAX_UPLOAD", 32 * 1024 * 1024)
