"""openapi-examples CLI commands.

This module provides CLI commands to inspect what example generation does
to an application's OpenAPI document:
- export: Write the example-enriched document as JSON or YAML
- inspect: Show which operations and media types received examples

Example:
    # Export the document of myservice.main:app
    $ openapi-examples export myservice.main:app --output openapi.json

    # Check coverage
    $ openapi-examples inspect myservice.main:app
"""

import importlib
import json
import os
import sys
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from fastapi import FastAPI
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.config import load_settings
from .core.errors import ConfigError, ExamplesError
from .core.logging import configure_logging
from .integrations.fastapi import INSTALLED_ATTR, install_examples
from .openapi.models import Operation

app = typer.Typer(
    name="openapi-examples",
    help="openapi-examples - attach example payloads to OpenAPI documents",
    no_args_is_help=True,
)

console = Console()

# Warnings go to stderr so exported documents on stdout stay parseable
err_console = Console(stderr=True)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


def load_app(app_path: str) -> FastAPI:
    """Import a FastAPI application from a ``module:attribute`` path.

    Args:
        app_path: Import path (attribute defaults to "app")

    Returns:
        The FastAPI application

    Raises:
        ConfigError: If the module or attribute cannot be loaded
    """
    module_name, _, attribute = app_path.partition(":")
    attribute = attribute or "app"

    # Allow importing modules from the current directory
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import module '{module_name}': {e}") from e

    target = getattr(module, attribute, None)
    if not isinstance(target, FastAPI):
        raise ConfigError(f"'{app_path}' is not a FastAPI application")
    return target


def build_document(app_path: str, config: Optional[Path] = None) -> dict[str, Any]:
    """Load an app and generate its example-enriched OpenAPI document."""
    fastapi_app = load_app(app_path)
    if not getattr(fastapi_app, INSTALLED_ATTR, False):
        install_examples(fastapi_app, settings=load_settings(config_path=config))
    elif config is not None:
        err_console.print(
            f"[yellow]Warning:[/yellow] {escape(app_path)} already installs examples; "
            f"settings in {escape(str(config))} were not applied"
        )
    return fastapi_app.openapi()


@app.command()
def export(
    app_path: str = typer.Argument(..., help="Application as module:attribute"),
    format: str = typer.Option("json", "--format", "-f", help="Output format: json, yaml"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file path (default: print to stdout)"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML settings file"
    ),
    log_level: str = typer.Option("WARNING", help="Log level"),
):
    """Export an application's OpenAPI document with examples.

    Example:
        $ openapi-examples export myservice.main:app
        $ openapi-examples export myservice.main:app -f yaml -o openapi.yaml
    """
    configure_logging(level=log_level)

    if format not in ("json", "yaml"):
        console.print(f"[bold red]Error:[/bold red] Unknown format '{format}'")
        raise typer.Exit(code=1)

    try:
        document = build_document(app_path, config)
    except ExamplesError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if format == "json":
        text = json.dumps(document, indent=2, ensure_ascii=False)
    else:
        text = yaml.safe_dump(document, sort_keys=False, allow_unicode=True)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        console.print(f"[bold green]✓[/bold green] OpenAPI document written to {output}")
    else:
        typer.echo(text)


@app.command()
def inspect(
    app_path: str = typer.Argument(..., help="Application as module:attribute"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML settings file"
    ),
    log_level: str = typer.Option("WARNING", help="Log level"),
):
    """Show which operations and media types received examples.

    Example:
        $ openapi-examples inspect myservice.main:app
    """
    configure_logging(level=log_level)

    try:
        document = build_document(app_path, config)
    except ExamplesError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    table = Table(title="OpenAPI Examples")
    table.add_column("Operation", style="cyan")
    table.add_column("Slot", style="white")
    table.add_column("Media Type", style="white")
    table.add_column("Example", justify="center")

    total = 0
    with_example = 0
    for path, path_item in (document.get("paths") or {}).items():
        for method in HTTP_METHODS:
            if method not in path_item:
                continue
            operation = Operation.from_dict(path_item[method])
            label = f"{method.upper()} {path}"

            slots = []
            if operation.request_body is not None:
                slots.append(("request", operation.request_body.content))
            for code, response in operation.responses.items():
                slots.append((code, response.content))

            for slot, content in slots:
                for media_type, entry in content.items():
                    total += 1
                    has_example = entry.example is not None
                    with_example += has_example
                    table.add_row(
                        label,
                        slot,
                        media_type,
                        "[green]✓[/green]" if has_example else "[dim]-[/dim]",
                    )

    console.print(table)
    console.print(f"[bold]{with_example}/{total}[/bold] media types have examples")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
