"""CLI entry point for swagger-report."""

import logging
from pathlib import Path

import click

from swagger_report.config import ReportConfig, load_config
from swagger_report.errors import ReportError
from swagger_report.report import generate


def _parse_order(values: tuple[str, ...]) -> dict[str, int]:
    """Turn ``PATH=N`` option values into an order mapping."""
    order = {}
    for value in values:
        path, sep, priority = value.rpartition("=")
        if not sep or not path:
            raise click.BadParameter(f"expected PATH=N, got {value!r}", param_hint="--order")
        try:
            order[path] = int(priority)
        except ValueError:
            raise click.BadParameter(f"priority must be an integer, got {priority!r}", param_hint="--order") from None
    return order


@click.group()
def main():
    """Swagger Report: render Swagger / OpenAPI documents as Markdown."""
    pass


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False, path_type=Path), help="Output file path for the Markdown report.")
@click.option("-c", "--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML/JSON file with 'order' and 'ignored'.")
@click.option("--order", "order", multiple=True, metavar="PATH=N", help="Endpoint priority, lower first. Repeatable.")
@click.option("--ignore", "ignored", multiple=True, metavar="NAME", help="Field or parameter name to leave out. Repeatable.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def render(doc_path: Path, output: Path, config_path: Path | None, order: tuple[str, ...], ignored: tuple[str, ...], verbose: bool):
    """Render DOC_PATH into a Markdown report."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(config_path) if config_path else ReportConfig()
        config = config.merged(order=_parse_order(order), ignored=set(ignored))

        click.echo(f"Rendering {doc_path}...")
        generate(doc_path, output, config)
    except (ReportError, OSError) as e:
        raise click.ClickException(str(e))

    click.echo(f"Report saved to {output}")
