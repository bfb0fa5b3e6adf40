"""CLI entry point for restdoc."""

import importlib
import logging
from pathlib import Path

import click
import yaml

from restdoc.api import Api, create_openapi
from restdoc.config import Settings, load_settings
from restdoc.errors import RestDocError
from restdoc.generator.finalizer import render_document, validate_data
from restdoc.schema.models import OpenAPI


def _load_target(target: str):
    """Import ``module:attribute`` and return the attribute."""
    module_name, sep, attr = target.partition(":")
    if not sep or not attr:
        raise click.BadParameter("expected MODULE:ATTRIBUTE", param_hint="TARGET")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}", param_hint="TARGET")
    try:
        return getattr(module, attr)
    except AttributeError:
        raise click.BadParameter(f"{module_name} has no attribute {attr}", param_hint="TARGET")


def _build(obj, settings: Settings) -> OpenAPI:
    if isinstance(obj, Api):
        return create_openapi(
            obj.routes,
            title=obj.name,
            version=obj.version,
            known_types=obj.known_types,
            strip_pkg_paths=obj.strip_pkg_paths + settings.strip_pkg_paths,
        )
    return create_openapi(
        obj,
        title=settings.title,
        version=settings.version,
        strip_pkg_paths=settings.strip_pkg_paths,
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Generate OpenAPI documents from typed route tables."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("target")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file path. Defaults to stdout.")
@click.option("--format", "fmt", default=None, type=click.Choice(["json", "yaml"]), help="Output format.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML settings file.")
@click.option("--strip", "strip", multiple=True, help="Namespace prefix to omit from schema names.")
@click.option("--title", default=None, help="API title for plain route tables.")
@click.option("--version", "api_version", default=None, help="API version for plain route tables.")
def generate(target: str, output: Path | None, fmt: str | None, config_path: Path | None, strip: tuple[str, ...], title: str | None, api_version: str | None):
    """Generate a validated document from MODULE:ATTRIBUTE."""
    try:
        settings = load_settings(config_path)
    except RestDocError as e:
        raise click.ClickException(str(e))

    overrides = {}
    if fmt:
        overrides["format"] = fmt
    if strip:
        overrides["strip_pkg_paths"] = settings.strip_pkg_paths + list(strip)
    if title:
        overrides["title"] = title
    if api_version:
        overrides["version"] = api_version
    settings = settings.model_copy(update=overrides)

    obj = _load_target(target)
    try:
        doc = _build(obj, settings)
    except RestDocError as e:
        raise click.ClickException(str(e))

    text = render_document(doc, settings.format)
    if output is None:
        click.echo(text, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Wrote {len(doc.paths)} paths and {len(doc.components.schemas)} schemas to {output}", err=True)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
def check(doc_path: Path):
    """Validate an existing JSON or YAML document."""
    try:
        data = yaml.safe_load(doc_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise click.ClickException(f"{doc_path}: cannot parse: {e}")
    if not isinstance(data, dict):
        raise click.ClickException(f"{doc_path}: not an API document")

    try:
        validate_data(data)
    except RestDocError as e:
        raise click.ClickException(f"{doc_path}: {e}")
    click.echo(f"{doc_path} is valid.")
