"""The command-line interface for gitdash."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from gitdash.config import safe_load_config
from gitdash.utils import create_server_logger

from ._commands import register_commands
from ._context import CLIContext

_HELP = "Inspect and change the state of a git working copy."


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="gitdash",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[bool, Parameter(help="Enable verbose output")] = False,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
        repo: Annotated[
            Path | None, Parameter(name="--repo", help="Path inside the repository")
        ] = None,
    ) -> None:
        """Launch gitdash with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            verbose: Log at debug level.
            config: Explicit path to config file.
            repo: Repository to operate on instead of the current directory.
        """
        cli_overrides: dict[str, object] | None = None
        if verbose:
            cli_overrides = {"logging": {"level": "debug"}}

        loaded_config, config_error = safe_load_config(
            config_path=config,
            project_root=repo,
            cli_overrides=cli_overrides,
        )

        cli_logger = create_server_logger(
            level=loaded_config.logging.level.value,
            log_format=loaded_config.logging.format.value,
            log_file=loaded_config.logging.file,
        )

        repository = repo if repo is not None else loaded_config.repository_path()
        ctx = CLIContext(
            config=loaded_config,
            verbose=verbose,
            repository=repository,
            config_error=config_error,
            logger=cli_logger,
        )
        CLIContext.set_current(ctx)

        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


def main() -> None:
    """Default entrypoint for the `gitdash` CLI."""
    app = create_app()
    app.meta()


if __name__ == "__main__":
    main()
