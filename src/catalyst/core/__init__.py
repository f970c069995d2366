"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .logging_config import configure_logging, get_logger, LogContext
from .json import (
    canonical_dumps,
    safe_json_dumps,
    read_json_file,
    write_json_file,
    JSONParseError,
)
from .hash import Algorithm, hash_string, hash_bytes, hash_canonical, fingerprint
from .id import GenerationID, new_generation_id


def create_container(project_path, settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(project_path, settings)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "canonical_dumps",
    "safe_json_dumps",
    "read_json_file",
    "write_json_file",
    "JSONParseError",
    # DI
    "create_container",
    # Hashing
    "Algorithm",
    "hash_string",
    "hash_bytes",
    "hash_canonical",
    "fingerprint",
    # IDs
    "GenerationID",
    "new_generation_id",
]
