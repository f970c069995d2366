"""Fast JSON encoding for hashing and sidecar documents."""

from pathlib import Path
from typing import Any

import orjson


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def canonical_dumps(obj: Any) -> bytes:
    """
    Encode to compact JSON with object keys sorted recursively.

    Two values that differ only in dict insertion order produce identical
    bytes. List order is preserved.

    Args:
        obj: JSON-compatible value

    Returns:
        UTF-8 encoded JSON bytes
    """
    return orjson.dumps(obj, option=orjson.OPT_SORT_KEYS)


def safe_json_dumps(obj: Any, indent: int = 0) -> str:
    """
    Encode object to JSON string.

    Args:
        obj: Object to encode
        indent: 2 for pretty output, 0 for compact

    Returns:
        JSON string
    """
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(obj, option=option).decode("utf-8")


def loads(data: str | bytes) -> Any:
    """
    Decode JSON text.

    Raises:
        JSONParseError: If the text is not valid JSON
    """
    try:
        return orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise JSONParseError(f"Invalid JSON: {e}", e) from e


def read_json_file(path: Path) -> Any:
    """
    Read and decode a JSON document.

    Raises:
        FileNotFoundError: If the file does not exist
        JSONParseError: If the file is not valid JSON
    """
    return loads(Path(path).read_bytes())


def write_json_file(path: Path, obj: Any) -> None:
    """Write a pretty-printed JSON document, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(obj, option=orjson.OPT_INDENT_2))


__all__ = [
    "JSONParseError",
    "canonical_dumps",
    "safe_json_dumps",
    "loads",
    "read_json_file",
    "write_json_file",
]
