"""Main CLI entry point for the model catalog.

Browse providers and packages, export the UI payload, and preview the
parameters handed to the runtime for a provider/package choice.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from modelcatalog import __version__
from modelcatalog.core.catalog import build_catalog
from modelcatalog.core.config import set_config_path
from modelcatalog.core.errors import CatalogError
from modelcatalog.core.packages import MODEL_PACKAGES, is_open_source
from modelcatalog.core.registry import CatalogRegistry
from modelcatalog.core.tags import ProviderTag
from modelcatalog.utils.log import get_logger, init_logger

console = Console()
logger = get_logger()


def _load_catalog() -> CatalogRegistry:
    try:
        return build_catalog()
    except CatalogError as exc:
        raise click.ClickException(f"Catalog failed to build ({exc.error_code}): {exc}") from exc


def _parse_assignments(raw: Tuple[str, ...], option: str) -> Dict[str, Any]:
    """Parse ``key=value`` pairs; values are read as JSON when possible."""
    parsed: Dict[str, Any] = {}
    for item in raw:
        if "=" not in item:
            raise click.BadParameter(f"expected key=value, got {item!r}", param_hint=option)
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise click.BadParameter(f"empty key in {item!r}", param_hint=option)
        try:
            parsed[key] = json.loads(value)
        except json.JSONDecodeError:
            parsed[key] = value
    return parsed


def _parse_package_selector(value: str) -> Any:
    return int(value) if value.isdigit() else value


def _tag_labels(tags: Tuple[ProviderTag, ...]) -> str:
    return ", ".join(tag.value for tag in tags) or "-"


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Catalog configuration file (JSON or YAML)",
)
@click.option(
    "--log-dir",
    "log_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Also write debug logs to a dated file in this directory",
)
def cli(config_path: Optional[Path], log_dir: Optional[Path]) -> None:
    """Browse the model provider catalog"""
    if log_dir is not None:
        log_file = init_logger(log_dir).log_file
        logger.debug("[cli] Logging to file", extra={"path": str(log_file)})
    if config_path is not None:
        set_config_path(config_path)
        logger.debug("[cli] Using configuration file", extra={"path": str(config_path)})


@cli.command(name="providers")
@click.option("--tag", "tag", type=str, default=None, help="Only providers carrying this tag")
def providers_cmd(tag: Optional[str]) -> None:
    """List providers in display order"""
    catalog = _load_catalog()
    try:
        entries = catalog.by_tag(tag) if tag else catalog.items()
    except CatalogError as exc:
        raise click.ClickException(str(exc)) from exc

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Key", no_wrap=True)
    table.add_column("Title")
    table.add_column("Backend", no_wrap=True)
    table.add_column("Tags")
    table.add_column("Packages", justify="right")
    for key, definition in entries:
        table.add_row(
            escape(key),
            escape(definition.title),
            escape(definition.provider),
            escape(_tag_labels(definition.tags)),
            str(len(definition.packages)),
        )
    console.print(table)
    console.print(f"[dim]{len(entries)} provider(s)[/dim]")


@cli.command(name="show")
@click.argument("key")
def show_cmd(key: str) -> None:
    """Show one provider with its packages and input fields"""
    catalog = _load_catalog()
    try:
        definition = catalog.get(key)
    except CatalogError as exc:
        raise click.ClickException(str(exc)) from exc

    console.print(f"\n[bold]{escape(definition.title)}[/bold] ({escape(key)})")
    console.print(f"Backend: {escape(definition.provider)}")
    console.print(f"Tags: {escape(_tag_labels(definition.tags))}")
    console.print(escape(definition.description))
    for label, url in (
        ("API keys", definition.api_key_url),
        ("Download", definition.download_url),
    ):
        if url:
            console.print(f"{label}: {escape(url)}")

    console.print("\n[bold]Packages:[/bold]")
    for index, package in enumerate(definition.packages):
        model = package.params.get("model", "-")
        console.print(f"  {index}. {escape(package.title)} · {escape(str(model))}")

    console.print("\n[bold]Inputs:[/bold]")
    if not definition.collect_input_for:
        console.print("  (none)")
    for descriptor in definition.collect_input_for:
        flags = "required" if descriptor.required else "optional"
        default = (
            f" = {descriptor.default_value}" if descriptor.default_value is not None else ""
        )
        console.print(
            f"  {escape(descriptor.key)} ({descriptor.input_type.value}, {flags}){escape(default)}"
        )
    console.print()


@cli.command(name="packages")
@click.option("--open-source", is_flag=True, help="Only open-source packages")
def packages_cmd(open_source: bool) -> None:
    """List model package templates"""
    items = MODEL_PACKAGES.items()
    if open_source:
        items = [(name, package) for name, package in items if is_open_source(package)]

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Name", no_wrap=True)
    table.add_column("Title")
    table.add_column("Model", no_wrap=True)
    table.add_column("Open Source")
    for name, package in items:
        table.add_row(
            escape(name),
            escape(package.title),
            escape(str(package.params.get("model", "-"))),
            "yes" if package.is_open_source else "no",
        )
    console.print(table)


@cli.command(name="listing")
def listing_cmd() -> None:
    """Print the flat listing of category labels and packages"""
    catalog = _load_catalog()
    for entry in catalog.flat_listing:
        if isinstance(entry, str):
            console.print(f"[bold]{escape(entry)}[/bold]")
        else:
            console.print(f"  {escape(entry.title)}")


@cli.command(name="export")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the JSON payload to a file instead of stdout",
)
def export_cmd(output: Optional[Path]) -> None:
    """Export the catalog as the JSON payload the UI consumes"""
    catalog = _load_catalog()
    payload = json.dumps(catalog.to_payload(), indent=2, ensure_ascii=False)
    if output is None:
        click.echo(payload)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload + "\n", encoding="utf-8")
    logger.info("[cli] Exported catalog", extra={"path": str(output), "providers": len(catalog)})
    console.print(f"[green]Wrote {len(catalog)} providers to {escape(str(output))}[/green]")


@cli.command(name="params")
@click.argument("key")
@click.argument("package")
@click.option("-s", "--set", "values", multiple=True, help="User-supplied value as key=value")
@click.option("-d", "--dimension", "dimensions", multiple=True, help="Dimension choice as name=option")
def params_cmd(key: str, package: str, values: Tuple[str, ...], dimensions: Tuple[str, ...]) -> None:
    """Resolve the runtime parameters for a provider and package"""
    catalog = _load_catalog()
    user_values = _parse_assignments(values, "--set")
    choices = {name: str(option) for name, option in _parse_assignments(dimensions, "--dimension").items()}
    try:
        resolved = catalog.resolve_params(
            key,
            _parse_package_selector(package),
            user_values,
            dimensions=choices or None,
        )
    except CatalogError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(resolved, indent=2, sort_keys=True, ensure_ascii=False))


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except SystemExit:
        raise
    except (RuntimeError, ValueError, TypeError, OSError) as e:
        console.print(f"[red]Fatal error: {escape(str(e))}[/red]")
        logger.warning(
            "[cli] Fatal error in main CLI entrypoint: %s: %s",
            type(e).__name__,
            e,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
