"""CLI entry point for bru-catalog."""

import json
import logging
from pathlib import Path

import click
import yaml

from bru_catalog.catalog.service import Catalog
from bru_catalog.config import Settings
from bru_catalog.parser.base import Category, CatalogNode


def _render_tree(node: CatalogNode, depth: int = 0) -> list[str]:
    indent = "  " * depth
    lines = [f"{indent}{node.name}/ ({len(node.presets)})"]
    for preset in node.presets:
        lines.append(f"{indent}  {preset.method:<6} {preset.name}")
    for subfolder in node.subfolders:
        lines.extend(_render_tree(subfolder, depth + 1))
    return lines


@click.group()
@click.option("--reference-dir", type=click.Path(path_type=Path), default=None, help="Directory holding the Bruno collection.")
@click.option("--collection", default=None, help="Collection folder name inside the reference directory.")
@click.option("--static-presets", type=click.Path(exists=True, path_type=Path), default=None, help="YAML file replacing the packaged static presets.")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx: click.Context, reference_dir: Path | None, collection: str | None, static_presets: Path | None, verbose: bool):
    """bru-catalog — browse API endpoint presets parsed from a Bruno collection."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = Settings()
    if reference_dir is not None:
        settings.reference_dir = reference_dir
    if collection is not None:
        settings.collection = collection
    if static_presets is not None:
        settings.static_presets_file = static_presets

    ctx.obj = Catalog.from_settings(settings)


@main.command("list")
@click.option("--category", type=click.Choice([c.value for c in Category]), default=None, help="Only presets of this category.")
@click.pass_obj
def list_presets(catalog: Catalog, category: str | None):
    """List all presets (static and parsed)."""
    presets = catalog.get_presets_by_category(category) if category else catalog.list_all_presets()
    for preset in presets:
        click.echo(f"{preset.method:<6} {preset.endpoint}  [{preset.id}]")
    click.echo(f"{len(presets)} presets.")


@main.command()
@click.argument("preset_id")
@click.pass_obj
def show(catalog: Catalog, preset_id: str):
    """Show one preset as JSON."""
    preset = catalog.get_preset_by_id(preset_id)
    if preset is None:
        raise click.ClickException(f"No preset with id {preset_id!r}")
    click.echo(json.dumps(preset.to_dict(), indent=2, ensure_ascii=False))


@main.command()
@click.pass_obj
def tree(catalog: Catalog):
    """Print the collection's folder hierarchy."""
    for line in _render_tree(catalog.get_hierarchy()):
        click.echo(line)
    click.echo(f"{catalog.total_endpoints()} endpoints.")


@main.command()
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file path.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.pass_obj
def export(catalog: Catalog, output: Path, fmt: str):
    """Write categories, hierarchy and endpoint count to a file."""
    payload = catalog.to_dict()
    if fmt == "yaml":
        text = yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(payload, indent=2, ensure_ascii=False)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Catalog saved to {output}")


@main.command()
@click.pass_obj
def check(catalog: Catalog):
    """Report preset ids shared by more than one definition file."""
    duplicates = catalog.duplicate_ids()
    if not duplicates:
        click.echo(f"OK: {catalog.total_endpoints()} endpoints, no duplicate ids.")
        return

    for preset_id, sources in duplicates.items():
        click.echo(f"{preset_id}:")
        for source in sources:
            click.echo(f"  {source}")
    raise click.ClickException(f"{len(duplicates)} duplicate preset ids")
