"""Command line interface for bhugo."""

from __future__ import annotations

import os
import signal
import sys
from pathlib import Path
from typing import Any

import click
from loguru import logger

from . import __version__
from .config import Config, load_config, save_config
from .config.loader import DEFAULT_CONFIG_FILE
from .exceptions import ConfigError, SourceError
from .source import BearDatabase
from .sync import Pipeline
from .utils import print_summary


class DefaultCommandGroup(click.Group):
    """Group that falls back to a default command when none is provided."""

    def __init__(
        self,
        *args: Any,
        default_command: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.default_command = default_command

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, Any, list[str]]:
        if args:
            cmd_name = args[0]
            cmd = self.get_command(ctx, cmd_name)
            if cmd is not None:
                return cmd_name, cmd, args[1:]

        if self.default_command:
            cmd = self.get_command(ctx, self.default_command)
            if cmd is None:
                raise click.UsageError(
                    f"Default command '{self.default_command}' not found."
                )
            return self.default_command, cmd, args
        result: tuple[str | None, Any, list[str]] = super().resolve_command(ctx, args)
        return result


def setup_logger(verbose: bool = False) -> Any:
    """Set up logger with appropriate level."""
    logger.remove()
    logger.add(
        sys.stderr,
        format="{level}: {message}",
        level="DEBUG" if verbose else "INFO",
    )
    return logger


def _load_config_or_fail(config_file: Path | None, env_file: Path | None) -> Config:
    try:
        return load_config(config_file=config_file, env_file=env_file)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


def _ensure_output_root(config: Config) -> Path:
    """Create the content directory and make sure it is writable."""
    root = config.output_root()
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise click.ClickException(f"Cannot create output directory {root}: {e}") from e
    if not os.access(root, os.W_OK):
        raise click.ClickException(f"Output directory {root} is not writable")
    return root


config_file_option = click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    help="YAML configuration file (default: .bhugo.yaml if present)",
)
env_file_option = click.option(
    "--env-file",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    help="Environment file with settings (default: .bhugo if present)",
)


@click.group(
    cls=DefaultCommandGroup,
    default_command="run",
    # Lets "bhugo --once" reach the default command.
    context_settings={"ignore_unknown_options": True},
)
@click.version_option(version=__version__, prog_name="bhugo")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Convert tagged Bear notes into Hugo page bundles.

    This tool will:
    - Find Bear notes tagged with the configured note tag
    - Turn hashtags on the tag line into Hugo categories and/or tags
    - Mark notes with a draft hashtag as drafts
    - Keep custom front matter added to the generated files
    - Copy note images next to the generated index file
    - Rewrite files only when their content changes
    """


@cli.command()
@click.option(
    "--once",
    is_flag=True,
    help="Run conversion only once (useful when scripting)",
)
@click.option(
    "--debug", "--verbose", "-v", "debug", is_flag=True, help="Run with debug level logging"
)
@config_file_option
@env_file_option
def run(
    once: bool,
    debug: bool,
    config_file: Path | None,
    env_file: Path | None,
) -> None:
    """Convert Bear notes to Hugo, once or continuously.

    Without --once, Bear is polled at the configured interval until
    SIGINT or SIGTERM is received. Notes already queued are still written
    before exiting.
    """
    logger = setup_logger(debug)
    logger.info("Bhugo Initializing")

    config = _load_config_or_fail(config_file, env_file)

    database = BearDatabase(config.database_path(), logger)
    try:
        database.connect()
    except SourceError as e:
        logger.error(str(e))
        raise click.ClickException(str(e)) from e

    try:
        _ensure_output_root(config)
    except click.ClickException:
        database.close()
        raise

    pipeline = Pipeline(database, config, logger)

    def handle_signal(signum: int, frame: Any) -> None:
        logger.info(f"Received {signal.Signals(signum).name}, shutting down")
        pipeline.stop()

    previous = {
        sig: signal.signal(sig, handle_signal) for sig in (signal.SIGINT, signal.SIGTERM)
    }

    if not once:
        logger.info(f"Watching Bear tag #{config.note_tag} for changes")

    try:
        stats = pipeline.run(once=once)
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
        database.close()

    if once:
        print_summary(stats)
    logger.info("Bhugo Exiting")


@cli.command(name="config")
@config_file_option
@env_file_option
def show_config(config_file: Path | None, env_file: Path | None) -> None:
    """Show the effective configuration as YAML.

    Values come from defaults, the YAML config file, the .bhugo env file
    and the environment, in increasing priority.
    """
    config = _load_config_or_fail(config_file, env_file)
    click.echo(config.to_yaml(), nl=False)
    click.echo(f"# database path: {config.database_path()}")


@cli.command()
@click.option(
    "--output",
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Where to write the YAML configuration",
)
@click.option(
    "--overwrite-config",
    is_flag=True,
    help="Overwrite the configuration file if it exists",
)
@config_file_option
@env_file_option
def init(
    output: Path,
    overwrite_config: bool,
    config_file: Path | None,
    env_file: Path | None,
) -> None:
    """Write the effective configuration to a YAML file.

    The file can then be edited and is picked up by later runs from the
    same directory.
    """
    logger = setup_logger()
    config = _load_config_or_fail(config_file, env_file)

    try:
        save_config(config, output, overwrite=overwrite_config)
    except FileExistsError as e:
        logger.error(str(e))
        raise click.ClickException(f"{e}, use --overwrite-config to replace it") from e
    except OSError as e:
        logger.error(f"Error writing configuration: {e}")
        raise click.ClickException(str(e)) from e
    logger.info(f"Wrote configuration to {output}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
