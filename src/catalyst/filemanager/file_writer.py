"""Bounded, atomic file writer."""

import asyncio
import os
import shutil
import tempfile
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from catalyst.core import get_logger, fingerprint
from .types import FileToWrite, FileWriteResult

logger = get_logger(__name__)


def _atomic_write(path: Path, content: str) -> None:
    """Write through a temp file in the target directory, then rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class FileWriter:
    """
    Writes generated files with a concurrency limit.

    Every file is attempted even when others fail; failures are reported in
    the returned results, never raised. The writer remembers a fingerprint of
    what it wrote so external change notifications for its own writes can be
    told apart from hand edits.
    """

    def __init__(self, max_concurrent_writes: int = 10, debug: bool = False) -> None:
        if max_concurrent_writes <= 0:
            raise ValueError("max_concurrent_writes must be positive")

        self.max_concurrent_writes = max_concurrent_writes
        self.debug = debug
        self._written: dict[str, str] = {}

    async def write_file(self, filepath: str | Path, content: str) -> FileWriteResult:
        """Write one file atomically."""
        path = Path(filepath)
        try:
            await asyncio.to_thread(_atomic_write, path, content)
        except OSError as e:
            logger.error("write_failed", filepath=str(path), error=str(e))
            return FileWriteResult(success=False, filepath=str(path), error=str(e))

        self._written[str(path)] = fingerprint(content)
        if self.debug:
            logger.debug("file_written", filepath=str(path), bytes=len(content))
        return FileWriteResult(success=True, filepath=str(path))

    async def write_files(self, files: Sequence[FileToWrite]) -> list[FileWriteResult]:
        """
        Write a batch of files, at most ``max_concurrent_writes`` at a time.

        Returns:
            One result per input file, in input order
        """
        if not files:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent_writes)

        async def bounded(item: FileToWrite) -> FileWriteResult:
            async with semaphore:
                result = await self.write_file(item.filepath, item.content)
            if self.debug:
                logger.debug(
                    "batch_item_written",
                    kind=item.kind,
                    component_id=item.component_id,
                    success=result.success,
                )
            return result

        return list(await asyncio.gather(*(bounded(item) for item in files)))

    async def remove_file(self, filepath: str | Path) -> FileWriteResult:
        """Delete a generated file. A missing file counts as success."""
        path = Path(filepath)
        try:
            await asyncio.to_thread(path.unlink, True)
        except OSError as e:
            logger.error("remove_failed", filepath=str(path), error=str(e))
            return FileWriteResult(success=False, filepath=str(path), error=str(e))
        self._written.pop(str(path), None)
        return FileWriteResult(success=True, filepath=str(path))

    async def quarantine(self, filepath: str | Path, trash_dir: Path) -> FileWriteResult:
        """
        Move a file into ``trash_dir`` under a timestamped name.

        Returns:
            Result whose ``filepath`` is the new location (or the original
            path when there was nothing to move)
        """
        path = Path(filepath)
        if not path.exists():
            return FileWriteResult(success=True, filepath=str(path))

        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        target = Path(trash_dir) / f"{stamp}-{path.name}"

        def move() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(path), str(target))

        try:
            await asyncio.to_thread(move)
        except OSError as e:
            logger.error("quarantine_failed", filepath=str(path), error=str(e))
            return FileWriteResult(success=False, filepath=str(path), error=str(e))

        self._written.pop(str(path), None)
        logger.info("file_quarantined", filepath=str(path), target=str(target))
        return FileWriteResult(success=True, filepath=str(target))

    def was_written_by_us(self, filepath: str | Path, content: str) -> bool:
        """True if ``content`` is exactly what this writer last wrote to ``filepath``."""
        return self._written.get(str(Path(filepath))) == fingerprint(content)

    def forget(self) -> None:
        """Drop all write fingerprints."""
        self._written.clear()


__all__ = ["FileWriter"]
