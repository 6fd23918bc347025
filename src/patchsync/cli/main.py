import typer

from patchsync.cli.sync_cmd import sync as sync_command

app = typer.Typer(name="patchsync", help="Upstream patch synchronization", add_completion=False)
app.command(
    name="sync",
    add_help_option=False,
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)(sync_command)


if __name__ == "__main__":
    app()
