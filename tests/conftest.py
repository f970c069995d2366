"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest

from catalyst.filemanager import FileManager, FileManagerOptions
from catalyst.manifest import Manifest
from catalyst.monitoring import MetricsCollector
from factories import FakeComponentGenerator, FakeEntryPointGenerator, FlakyFileWriter, make_component, make_manifest


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["CATALYST_LOG_LEVEL"] = "DEBUG"


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def project(tmp_path) -> Path:
    """Empty project directory."""
    return tmp_path


@pytest.fixture
def options() -> FileManagerOptions:
    """In-memory options (no sidecars)."""
    return FileManagerOptions(persist_user_edits=False, persist_hash_cache=False)


@pytest.fixture
def component_generator() -> FakeComponentGenerator:
    return FakeComponentGenerator()


@pytest.fixture
def entry_generator() -> FakeEntryPointGenerator:
    return FakeEntryPointGenerator()


@pytest.fixture
def writer() -> FlakyFileWriter:
    return FlakyFileWriter(max_concurrent_writes=4)


@pytest.fixture
def manager(project, options, component_generator, entry_generator, writer) -> FileManager:
    """FileManager wired to fakes, writing into ``project``."""
    return FileManager(
        project,
        options,
        component_generator=component_generator,
        entry_point_generator=entry_generator,
        file_writer=writer,
        metrics=MetricsCollector(),
    )


@pytest.fixture
def sample_manifest() -> Manifest:
    """Page > Header > Button tree plus a standalone Footer."""
    return make_manifest(
        make_component("page", "Page", children=["header"]),
        make_component("header", "Header", children=["button"]),
        make_component("button", "Button", type="button"),
        make_component("footer", "Footer"),
    )
