import typer

from planimport_cli import __version__
from planimport_cli.commands.candidates_cmd import candidates
from planimport_cli.commands.infer_cmd import infer
from planimport_cli.commands.run_cmd import run
from planimport_cli.commands.schema_cmd import schema
from planimport_cli.utils import configure_logging


def _version_callback(value: bool) -> None:
    if value:
        print(f"planimport {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="planimport",
    help="Import existing cloud resources into Terraform/Terragrunt state from a plan",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version", callback=_version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["json"] = json_output
    configure_logging(verbose)


app.command()(run)
app.command()(infer)
app.command()(candidates)
app.command()(schema)
