"""
Catalyst Codegen - Command Line Entry Point
Runs generation passes against a project directory.
"""

import asyncio
from pathlib import Path

import typer

from catalyst.core import configure_logging, create_container, get_settings, safe_json_dumps
from catalyst.filemanager import FileManager, GenerationSummary
from catalyst.manifest import ManifestError, load_manifest

app = typer.Typer(add_completion=False, help="catalyst-gen: generate React source from a project manifest")


def _build_manager(project: Path) -> FileManager:
    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)
    manager = create_container(project, settings).get(FileManager)
    manager.load_caches()
    return manager


def _load(project: Path):
    try:
        return load_manifest(project)
    except ManifestError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=2) from e


def _print_summary(summary: GenerationSummary) -> None:
    if summary.skipped:
        typer.echo("No changes; nothing generated.")
        return

    typer.echo(f"[{summary.type.value}] {summary.generation_id}")
    typer.echo(f"    files written: {summary.files_written}")
    if summary.breakdown:
        b = summary.breakdown
        typer.echo(
            f"    added={b.added} modified={b.modified} removed={b.removed} "
            f"quarantined={b.quarantined} app={b.app_regenerated} main={b.main_regenerated}"
        )
    for filepath in summary.conflicts:
        typer.echo(f"    skipped (edited by hand): {filepath}")
    for error in summary.errors:
        typer.echo(f"    failed: {error.filepath or '<pass>'}: {error.error}", err=True)
    typer.echo(f"    {summary.duration_ms:.1f} ms")


@app.command()
def generate(
    project: Path = typer.Argument(..., exists=True, file_okay=False, help="Project root"),
    full: bool = typer.Option(False, "--full", help="Regenerate every component"),
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON"),
) -> None:
    """Run a generation pass (incremental unless --full)."""
    manager = _build_manager(project)
    manifest = _load(project)

    runner = manager.generate_all if full else manager.generate_incremental
    summary = asyncio.run(runner(manifest))

    if as_json:
        typer.echo(safe_json_dumps(summary.model_dump(mode="json"), indent=2))
    else:
        _print_summary(summary)

    if not summary.ok:
        raise typer.Exit(code=1)


@app.command()
def status(
    project: Path = typer.Argument(..., exists=True, file_okay=False, help="Project root"),
) -> None:
    """Show pending changes and files protected from regeneration."""
    manager = _build_manager(project)
    manifest = _load(project)

    changes = manager.change_detector.detect_changes(manifest.components)
    typer.echo(f"components: {len(manifest.components)} (cached: {len(manager.change_detector)})")
    typer.echo(f"added: {len(changes.added)}  modified: {len(changes.modified)}  removed: {len(changes.removed)}")
    typer.echo(f"entry point needs update: {changes.app_needs_update}")

    edited = manager.get_user_edited_files()
    typer.echo(f"user-edited files: {len(edited)}")
    for filepath in sorted(edited):
        typer.echo(f"    {filepath}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
