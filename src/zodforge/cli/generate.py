from pathlib import Path

import click

from zodforge.cli.utils import configure_logging, output_error, output_result
from zodforge.config import load_conversion_options
from zodforge.generator import generate as generate_declarations
from zodforge.generator import render_declarations
from zodforge.schema.loader import load_document_from_file


@click.command(name="generate")
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to a zodforge.yml config file",
)
@click.option("--all-schemas", is_flag=True, help="Convert every component schema")
@click.option("--strict", is_flag=True, help="Reject unknown object keys")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def generate(
    document: Path,
    config_path: Path | None,
    all_schemas: bool,
    strict: bool,
    json_output: bool,
    debug: bool,
) -> None:
    """Convert an OpenAPI document into TypeScript types and zod validators.

    Declarations are printed in dependency order; circular schemas are
    wrapped in z.lazy.

    \b
    Examples:
        zodforge generate openapi.yaml                # Print declarations
        zodforge generate openapi.yaml --all-schemas  # Include unused components
        zodforge generate openapi.yaml --json-output  # Output in JSON format
    """
    configure_logging(debug)
    try:
        options = load_conversion_options(config_path)
        overrides = {}
        if all_schemas:
            overrides["export_all_schemas"] = True
        if strict:
            overrides["strict_objects"] = True
        if overrides:
            options = options.model_copy(update=overrides)

        result = generate_declarations(load_document_from_file(document), options)

        if json_output:
            output_result(result.model_dump(mode="json"), json_output)
        else:
            click.echo(render_declarations(result))
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, debug)
