"""Manifest loading from a project directory."""

from pathlib import Path

from pydantic import ValidationError

from catalyst.core import get_logger
from catalyst.core.json import JSONParseError, read_json_file
from .models import Manifest

logger = get_logger(__name__)

MANIFEST_LOCATIONS = (
    Path(".catalyst/manifest.json"),
    Path(".lowcode/manifest.json"),  # legacy projects
)


class ManifestError(Exception):
    """Manifest missing or unreadable."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


def find_manifest(project_path: Path) -> Path | None:
    """Return the first manifest file that exists in the project."""
    for relative in MANIFEST_LOCATIONS:
        candidate = Path(project_path) / relative
        if candidate.is_file():
            return candidate
    return None


def parse_manifest(data: object) -> Manifest:
    """
    Validate decoded manifest JSON.

    Raises:
        ManifestError: If the data does not match the manifest schema
    """
    if not isinstance(data, dict):
        raise ManifestError(f"Manifest must be a JSON object, got {type(data).__name__}")
    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest: {e}") from e


def load_manifest(project_path: Path) -> Manifest:
    """
    Load the project manifest.

    Args:
        project_path: Project root

    Returns:
        Parsed manifest

    Raises:
        ManifestError: If no manifest exists or it cannot be parsed
    """
    path = find_manifest(project_path)
    if path is None:
        raise ManifestError(f"No manifest found in {project_path}")

    try:
        data = read_json_file(path)
    except (OSError, JSONParseError) as e:
        logger.error("manifest_read_failed", path=str(path), error=str(e))
        raise ManifestError(f"Cannot read {path}: {e}", path) from e

    manifest = parse_manifest(data)
    logger.debug("manifest_loaded", path=str(path), components=len(manifest.components))
    return manifest


__all__ = ["ManifestError", "MANIFEST_LOCATIONS", "find_manifest", "parse_manifest", "load_manifest"]
