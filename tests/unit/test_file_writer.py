"""Tests for the bounded atomic file writer."""

import asyncio

import pytest

from catalyst.filemanager import FileToWrite, FileWriter


@pytest.mark.unit
def test_rejects_non_positive_limit():
    with pytest.raises(ValueError):
        FileWriter(max_concurrent_writes=0)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_write_creates_directories(tmp_path):
    writer = FileWriter()
    target = tmp_path / "src" / "components" / "Button.jsx"

    result = await writer.write_file(target, "export default 1;\n")

    assert result.success
    assert result.filepath == str(target)
    assert target.read_text() == "export default 1;\n"
    assert [p.name for p in target.parent.iterdir()] == ["Button.jsx"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_write_overwrites(tmp_path):
    writer = FileWriter()
    target = tmp_path / "a.jsx"
    await writer.write_file(target, "one")
    await writer.write_file(target, "two")

    assert target.read_text() == "two"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_write_failure_is_reported(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    writer = FileWriter()

    result = await writer.write_file(blocker / "child.jsx", "x")

    assert not result.success
    assert result.error


@pytest.mark.unit
@pytest.mark.asyncio
async def test_write_files_keeps_order_and_attempts_all(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    files = [
        FileToWrite(filepath=str(tmp_path / "a.jsx"), content="a"),
        FileToWrite(filepath=str(blocker / "b.jsx"), content="b"),
        FileToWrite(filepath=str(tmp_path / "c.jsx"), content="c"),
    ]

    results = await FileWriter(max_concurrent_writes=2).write_files(files)

    assert [r.filepath for r in results] == [f.filepath for f in files]
    assert [r.success for r in results] == [True, False, True]
    assert (tmp_path / "c.jsx").read_text() == "c"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_write_files_empty():
    assert await FileWriter().write_files([]) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_concurrency_bounded(tmp_path, monkeypatch):
    writer = FileWriter(max_concurrent_writes=2)
    active = 0
    peak = 0
    original = FileWriter.write_file

    async def tracking(self, filepath, content):
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        try:
            return await original(self, filepath, content)
        finally:
            active -= 1

    monkeypatch.setattr(FileWriter, "write_file", tracking)
    files = [FileToWrite(filepath=str(tmp_path / f"{i}.jsx"), content=str(i)) for i in range(8)]

    results = await writer.write_files(files)

    assert all(r.success for r in results)
    assert peak <= 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_was_written_by_us(tmp_path):
    writer = FileWriter()
    target = tmp_path / "a.jsx"
    await writer.write_file(target, "generated")

    assert writer.was_written_by_us(target, "generated")
    assert not writer.was_written_by_us(target, "hand edited")
    assert not writer.was_written_by_us(tmp_path / "other.jsx", "generated")

    writer.forget()
    assert not writer.was_written_by_us(target, "generated")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_remove_file(tmp_path):
    writer = FileWriter()
    target = tmp_path / "a.jsx"
    await writer.write_file(target, "x")

    assert (await writer.remove_file(target)).success
    assert not target.exists()
    assert (await writer.remove_file(target)).success


@pytest.mark.unit
@pytest.mark.asyncio
async def test_quarantine(tmp_path):
    writer = FileWriter()
    target = tmp_path / "src" / "Old.jsx"
    await writer.write_file(target, "old")
    trash = tmp_path / ".catalyst" / "trash"

    result = await writer.quarantine(target, trash)

    assert result.success
    assert not target.exists()
    moved = list(trash.iterdir())
    assert len(moved) == 1
    assert moved[0].name.endswith("-Old.jsx")
    assert moved[0].read_text() == "old"
    assert result.filepath == str(moved[0])


@pytest.mark.unit
@pytest.mark.asyncio
async def test_quarantine_missing_file(tmp_path):
    result = await FileWriter().quarantine(tmp_path / "gone.jsx", tmp_path / "trash")

    assert result.success
    assert result.filepath == str(tmp_path / "gone.jsx")
    assert not (tmp_path / "trash").exists()
