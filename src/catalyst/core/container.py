"""Dependency Injection Container."""

from pathlib import Path

from injector import Injector, Module, provider, singleton

from catalyst.filemanager import FileManager, FileManagerOptions
from catalyst.monitoring import MetricsCollector
from .config import Settings, get_settings


class CatalystModule(Module):
    """Pipeline dependencies for one project."""

    def __init__(self, project_path: str | Path, settings: Settings | None = None) -> None:
        self.project_path = Path(project_path)
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        """Provide settings (environment / .env unless given explicitly)."""
        return self.settings or get_settings()

    @singleton
    @provider
    def provide_options(self, settings: Settings) -> FileManagerOptions:
        return FileManagerOptions.from_settings(settings)

    @singleton
    @provider
    def provide_metrics(self) -> MetricsCollector:
        """Provide metrics collector with its own registry."""
        return MetricsCollector()

    @singleton
    @provider
    def provide_file_manager(self, options: FileManagerOptions, metrics: MetricsCollector) -> FileManager:
        """Provide the orchestrator for the configured project."""
        return FileManager(self.project_path, options, metrics=metrics)


def create_container(project_path: str | Path, settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CatalystModule(project_path, settings)])
