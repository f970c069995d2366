"""Generation pass IDs.

``gen_`` + ULID: unique, sortable by start time and easy to spot in logs.
"""

from datetime import datetime
from typing import NewType

from ulid import ULID

GenerationID = NewType("GenerationID", str)


class Prefix:
    """ID prefix constants."""

    GENERATION = "gen"


def _parse(id_str: str) -> ULID | None:
    _, _, raw = id_str.rpartition("_")
    if len(raw) != 26:
        return None
    try:
        return ULID.from_str(raw)
    except ValueError:
        return None


def new_generation_id() -> GenerationID:
    return GenerationID(f"{Prefix.GENERATION}_{ULID()}")


def is_valid(id_str: str) -> bool:
    """True for a ULID with or without a prefix."""
    return _parse(id_str) is not None


def extract_timestamp(id_str: str) -> datetime | None:
    """Creation time (UTC) encoded in the ID, or None if invalid."""
    ulid = _parse(id_str)
    return ulid.datetime if ulid else None


__all__ = [
    "GenerationID",
    "Prefix",
    "new_generation_id",
    "is_valid",
    "extract_timestamp",
]
