import click

from zodforge.cli.generate import generate
from zodforge.cli.graph import graph


@click.group()
def cli() -> None:
    """zodforge: OpenAPI to TypeScript types and zod validators"""


cli.add_command(generate)
cli.add_command(graph)


if __name__ == "__main__":
    cli()
