"""CLI entrypoint: Typer app definition and command registration"""

import typer

from pageblocks.cli.commands import add_cmd, check_cmd, export_cmd, import_cmd, main_callback


app = typer.Typer(name="pageblocks", no_args_is_help=True, help="Block-based page documents and legacy HTML interchange")

app.callback()(main_callback)
app.command(name="import")(import_cmd)
app.command(name="export")(export_cmd)
app.command(name="check")(check_cmd)
app.command(name="add")(add_cmd)
