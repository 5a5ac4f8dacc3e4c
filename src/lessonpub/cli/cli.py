"""CLI entrypoint: Typer app definition and command registration"""

import typer

from lessonpub.cli.commands import (
    build_cmd, categories_cmd, check_cmd, commit_cmd, export_cmd, init_cmd, list_cmd, main_callback,
    quiz_cmd, show_cmd,
)


app = typer.Typer(name="lessonpub", no_args_is_help=True, help="Load, check, store and export lesson posts")

app.callback()(main_callback)
app.command(name="check")(check_cmd)
app.command(name="list")(list_cmd)
app.command(name="show")(show_cmd)
app.command(name="quiz")(quiz_cmd)
app.command(name="categories")(categories_cmd)
app.command(name="init")(init_cmd)
app.command(name="commit")(commit_cmd)
app.command(name="export")(export_cmd)
app.command(name="build")(build_cmd)
