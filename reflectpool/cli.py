"""reflectpool CLI — inspect the registry a module populates on import."""

from __future__ import annotations

import importlib
import json
import logging

import click
import yaml
from rich.console import Console
from rich.table import Table

from reflectpool import __version__
from reflectpool.config import load_config
from reflectpool.errors import ReflectionError
from reflectpool.registry import reflect_pool

console = Console()


def _load(module: str):
    """Import ``module`` so its declarations land in the default registry."""
    try:
        importlib.import_module(module)
    except ImportError as e:
        console.print(f"[red]Cannot import {module}:[/] {e}")
        raise SystemExit(1) from None
    except ReflectionError as e:
        console.print(f"[red]Registration failed in {module}:[/] {e}")
        raise SystemExit(1) from None


def _plain(data):
    # Attached values may be arbitrary objects
    return json.loads(json.dumps(data, default=str))


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="YAML file with a 'reflectpool:' section")
@click.option("--log-level", default=None, help="Logging level (default: from config)")
def main(config_path: str | None, log_level: str | None):
    """reflectpool — annotation registry and class reflection.

    Each command imports MODULE, then reports what its annotations
    registered: classes, members, identifiers and attached values.
    """
    if config_path:
        try:
            reflect_pool.config = load_config(config_path)
        except (OSError, ReflectionError, yaml.YAMLError) as e:
            console.print(f"[red]Invalid config:[/] {e}")
            raise SystemExit(1) from None
    logging.basicConfig(level=(log_level or reflect_pool.config.log_level).upper())


# ── Inspect ──────────────────────────────────────────────────────────


@main.command()
@click.argument("module")
@click.option("--detailed", is_flag=True, help="Include types, signatures and parameters")
@click.option("--format", "fmt", default="table", type=click.Choice(["table", "yaml", "json"]))
def inspect(module: str, detailed: bool, fmt: str):
    """Show every reflected class with its members and attached values."""
    _load(module)
    if fmt == "json":
        click.echo(json.dumps(_plain(reflect_pool.info(detailed)), indent=2))
        return
    if fmt == "yaml":
        click.echo(yaml.safe_dump(_plain(reflect_pool.info(detailed)), sort_keys=False))
        return

    classes = reflect_pool.classes()
    if not classes:
        console.print("[yellow]No reflected classes.[/]")
        return

    table = Table(title=f"Reflected classes ({len(classes)})")
    table.add_column("Class", style="cyan")
    table.add_column("Parent", style="dim")
    table.add_column("Instance", justify="right")
    table.add_column("Static", justify="right")
    table.add_column("Annotations")

    for clazz in classes:
        parent = clazz.parent
        table.add_row(
            clazz.name,
            parent.name if parent else "-",
            str(len(clazz.list_instance_properties())),
            str(len(clazz.list_static_properties())),
            ", ".join(clazz.decorators()) or "-",
        )

    console.print(table)


# ── Identifiers ──────────────────────────────────────────────────────


@main.command()
@click.argument("module")
def identifiers(module: str):
    """List declared identifiers with their options and aliases."""
    _load(module)
    declared = reflect_pool.identifiers()
    if not declared:
        console.print("[yellow]No identifiers declared.[/]")
        return

    table = Table(title=f"Identifiers ({len(declared)})")
    table.add_column("Name", style="cyan")
    table.add_column("Targets")
    table.add_column("Single")
    table.add_column("Flags")
    table.add_column("Aliases")
    table.add_column("Uses", justify="right")

    for name, ident in declared.items():
        options = ident.options.as_dict()
        targets = [t for t in ("clazz", "method", "field", "parameter") if options[t]]
        flags = [k for k, v in options.items() if k.startswith("not_") and v]
        table.add_row(
            name,
            ", ".join(targets),
            ident.single or "-",
            ", ".join(flags) or "-",
            ", ".join(a.name for a in ident.aliases) or "-",
            str(len(ident.instances)),
        )

    console.print(table)


# ── Classes ──────────────────────────────────────────────────────────


@main.command()
@click.argument("module")
@click.option("--by", "identifier", default=None, help="Only classes carrying this identifier (qualified name)")
def classes(module: str, identifier: str | None):
    """List reflected classes, optionally filtered by identifier."""
    _load(module)
    if identifier:
        try:
            found = reflect_pool.classes_by(reflect_pool.get(identifier))
        except ReflectionError as e:
            console.print(f"[red]Unknown identifier:[/] {e}")
            raise SystemExit(1) from None
    else:
        found = reflect_pool.classes()

    if not found:
        console.print("[yellow]No matching classes.[/]")
        return

    for clazz in found:
        click.echo(clazz.name)


if __name__ == "__main__":
    main()
