from __future__ import annotations

from pathlib import Path

import typer

from releaser import __version__
from releaser.core.config import DEFAULT_CONFIG_FILE
from releaser.core.errors import ErrorCode
from releaser.core.result import Err
from releaser.output.console import ConsoleProtocol, RichConsole
from releaser.output.errors import print_release_error, release_error_exit_code
from releaser.services.release import ReleaseService

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)


def build_console() -> ConsoleProtocol:
    return RichConsole()


@app.command()
def release(
    config: Path = typer.Argument(
        Path(DEFAULT_CONFIG_FILE),
        envvar="RELEASER_CONFIG",
        show_default=True,
        help="Release configuration (JSON).",
    ),
) -> None:
    """Stage every configured app, write its Inno Setup script and compile it.

    [dim]ignore.txt and vcredist_x64.exe are read from the current directory.[/dim]
    """
    console = build_console()
    console.header(f"======= version releaser {__version__} =======")

    service = ReleaseService(console=console, cwd=Path.cwd())
    result = service.run(config)
    if isinstance(result, Err):
        print_release_error(result.error, console)
        raise typer.Exit(code=release_error_exit_code(result.error))

    report = result.value
    # Each warning was already logged when it happened.
    warnings = report.warnings
    if warnings:
        apps = sorted({w.app for w in warnings})
        console.warning(f"release finished with {len(warnings)} warning(s)", apps=", ".join(apps))
    for script in report.compiled:
        console.success(script.as_posix())
    raise typer.Exit(code=int(ErrorCode.OK))


def main() -> None:
    app()
