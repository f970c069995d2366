"""Tests for the dependency injection container."""

import pytest

from catalyst.core import create_container
from catalyst.core.config import Settings
from catalyst.filemanager import FileManager, FileManagerOptions
from catalyst.monitoring import MetricsCollector


@pytest.mark.unit
def test_container_builds_file_manager(tmp_path):
    settings = Settings(_env_file=None, max_concurrent_writes=3, removed_file_policy="keep")
    container = create_container(tmp_path, settings)

    manager = container.get(FileManager)

    assert manager.paths.project == tmp_path.resolve()
    assert manager.options.max_concurrent_writes == 3
    assert manager.options.removed_file_policy == "keep"
    assert manager.file_writer.max_concurrent_writes == 3


@pytest.mark.unit
def test_container_singletons(tmp_path):
    container = create_container(tmp_path, Settings(_env_file=None))

    assert container.get(FileManager) is container.get(FileManager)
    assert container.get(MetricsCollector) is container.get(FileManager).metrics
    assert container.get(FileManagerOptions) is container.get(FileManager).options
