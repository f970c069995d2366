"""Tests for generation ID helpers."""

import time

import pytest

from catalyst.core.id import Prefix, extract_timestamp, is_valid, new_generation_id


class TestGenerationID:
    """Test pass ID generation."""

    @pytest.mark.unit
    def test_prefix(self):
        assert new_generation_id().startswith(f"{Prefix.GENERATION}_")

    @pytest.mark.unit
    def test_unique(self):
        ids = {new_generation_id() for _ in range(100)}
        assert len(ids) == 100

    @pytest.mark.unit
    def test_valid(self):
        assert is_valid(new_generation_id())
        assert not is_valid("gen_not-a-ulid")
        assert not is_valid("")

    @pytest.mark.unit
    def test_sortable(self):
        first = new_generation_id()
        time.sleep(0.002)
        second = new_generation_id()
        assert first < second

    @pytest.mark.unit
    def test_timestamp(self):
        before = time.time()
        ts = extract_timestamp(new_generation_id())
        assert ts is not None
        assert abs(ts.timestamp() - before) < 5

    @pytest.mark.unit
    def test_timestamp_invalid(self):
        assert extract_timestamp("garbage") is None
