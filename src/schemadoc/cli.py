"""CLI entry point for schemadoc."""

import json
import logging
from pathlib import Path
from typing import Any

import click
import yaml

from schemadoc.generator.models import GeneratorOptions, PreloadedMergeSpec
from schemadoc.generator.openapi import SwaggerGenerator
from schemadoc.merge.loader import load_specs


def _build_document(input_path: Path, title: str, version: str, swagger2: bool) -> dict[str, Any]:
    """Merge every spec under input_path into a generated document."""
    specs = load_specs(input_path)
    options = GeneratorOptions(
        title=title,
        version=version,
        description="API documentation generated by schemadoc",
        merge_specs=[
            PreloadedMergeSpec(type="preloaded", content=content)
            for content in specs
            if isinstance(content, dict)
        ],
    )
    generator = SwaggerGenerator(options)
    if swagger2:
        return generator.generate_swagger2()
    return generator.generate_spec()


def _serialize(spec: dict[str, Any], fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(spec, sort_keys=False, allow_unicode=True)
    return json.dumps(spec, indent=2, ensure_ascii=False)


@click.group()
def main():
    """schemadoc: build OpenAPI / Swagger documents from typed schemas."""
    pass


@main.command()
@click.option("-i", "--input", "input_path", required=True, type=click.Path(exists=True, path_type=Path), help="Directory (or single file) of specs to merge.")
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file path.")
@click.option("-f", "--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.option("--swagger2", is_flag=True, help="Write Swagger 2.0 instead of OpenAPI 3.0.")
@click.option("--title", default="API documentation", help="Document title.")
@click.option("--version", "doc_version", default="1.0.0", help="Document version.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output.")
def generate(input_path: Path, output: Path, fmt: str, swagger2: bool, title: str, doc_version: str, verbose: bool):
    """Generate an API document from a directory of spec files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    label = "Swagger 2.0" if swagger2 else "OpenAPI 3.0"
    click.echo(f"Loading specs from {input_path}...")

    try:
        spec = _build_document(input_path, title, doc_version, swagger2)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(_serialize(spec, fmt), encoding="utf-8")
    except Exception as exc:
        raise click.ClickException(f"Error generating documentation: {exc}") from exc

    click.echo(f"{label} documentation written to {output}")
