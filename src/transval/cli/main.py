"""transval CLI entry point."""

import typer

from transval import __version__
from transval.cli.validate_cmd import validate

app = typer.Typer(
    name="transval",
    help="Strict validator for YAML translation files",
    no_args_is_help=True,
)

# Register subcommands
app.command()(validate)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"transval {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Strict validator for YAML translation files."""
