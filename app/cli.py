from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from adapters.excalidraw.repository import FileSystemExcalidrawRepository
from adapters.filesystem.architecture_repository import FileArchitectureSource
from app.config import AppSettings, load_settings
from app.wiring import build_generator, build_render_context
from domain.errors import ArchitectureValidationError, UnknownTemplateError
from domain.ports.sources import ArchitectureSource
from domain.services.generate_diagram import DiagramResult
from domain.templates import TemplateArchitectureSource, available_templates

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    log_level: Optional[str] = typer.Option(None, help="Logging level (overrides settings)."),
) -> None:
    try:
        settings = load_settings(config)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


@app.command("render")
def render(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Architecture JSON file."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Target .excalidraw file."),
    seed: Optional[int] = typer.Option(None, help="Seed for the visual jitter values."),
) -> None:
    settings: AppSettings = ctx.obj
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    target = output or settings.render.output_dir / f"{input_path.stem}.excalidraw"
    result = _generate(settings, FileArchitectureSource(input_path), seed)
    _write(result, target)


@app.command("template")
def render_template(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Template name, see `templates`."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Target .excalidraw file."),
    param: List[str] = typer.Option([], "--param", "-p", help="Template parameter key=value."),
    seed: Optional[int] = typer.Option(None, help="Seed for the visual jitter values."),
) -> None:
    settings: AppSettings = ctx.obj
    params: dict[str, str] = {}
    for item in param:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            console.print(f"[red]Invalid parameter (expected key=value):[/] {item}")
            raise typer.Exit(code=1)
        params[key.strip()] = value.strip()
    target = output or settings.render.output_dir / f"{name}.excalidraw"
    result = _generate(settings, TemplateArchitectureSource(name, params), seed)
    _write(result, target)


@app.command("templates")
def list_templates() -> None:
    for name in available_templates():
        console.print(name)


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="Architecture JSON file.")) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    try:
        document = FileArchitectureSource(input_path).load()
    except (ArchitectureValidationError, ValueError, OSError) as exc:
        _print_failure(exc)
        raise typer.Exit(code=1) from exc
    console.print(
        f"[green]Valid architecture:[/] {input_path} "
        f"({len(document.nodes)} nodes, {len(document.connections)} connections)"
    )


def _generate(
    settings: AppSettings,
    source: ArchitectureSource,
    seed: int | None,
) -> DiagramResult:
    generator = build_generator(settings)
    try:
        return generator.generate_from_source(source, build_render_context(settings, seed))
    except (ArchitectureValidationError, UnknownTemplateError, ValueError, OSError) as exc:
        _print_failure(exc)
        raise typer.Exit(code=1) from exc


def _write(result: DiagramResult, target: Path) -> None:
    for message in result.diagnostics:
        console.print(f"[yellow]Warning:[/] {escape(message)}")
    try:
        FileSystemExcalidrawRepository().save(result.document, target)
    except OSError as exc:
        _print_failure(exc)
        raise typer.Exit(code=1) from exc
    console.print(f"[green]Wrote[/] {target} ({len(result.document.elements)} elements)")


def _print_failure(exc: Exception) -> None:
    if isinstance(exc, ArchitectureValidationError):
        console.print("[red]Validation failed:[/]")
        for issue in exc.issues:
            console.print(f"  {escape(issue.path)}: {escape(issue.message)}")
        return
    console.print(f"[red]Failed:[/] {escape(str(exc))}")


if __name__ == "__main__":
    app()
