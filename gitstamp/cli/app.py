"""Typer-based CLI application for gitstamp."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from gitstamp import __version__
from gitstamp.core.config import OutputFormat, StampConfig, find_config
from gitstamp.core.errors import GitstampError
from gitstamp.core.resolver import PathTarget
from gitstamp.core.sync import assert_branch_is_clean_and_synced, check_branch_sync
from gitstamp.core.version import VersionMetadata, get_version_metadata

app = typer.Typer(
    name="gitstamp",
    help="Commit date and hash provenance for build artifacts",
    add_completion=False,
)

logger = logging.getLogger(__name__)


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        typer.echo(f"gitstamp v{__version__}")
        raise typer.Exit()


def configure_logging(log_level: str) -> None:
    """Configure root logging from a --log-level value.

    Raises:
        typer.Exit: If the level is not one of debug, info, warn, error
    """
    log_level_upper = log_level.upper()
    if log_level_upper not in ["DEBUG", "INFO", "WARN", "WARNING", "ERROR"]:
        typer.echo(
            f"❌ Invalid log level: {log_level}. "
            "Must be debug, info, warn, or error.",
            err=True,
        )
        raise typer.Exit(1)

    # Map WARN to WARNING for Python logging
    if log_level_upper == "WARN":
        log_level_upper = "WARNING"

    logging.basicConfig(
        level=getattr(logging, log_level_upper),
        format="%(message)s",
    )


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
):
    """gitstamp - repository provenance for builds and CI.

    Reports the date and short hash of the latest commit touching a set of
    files, directories or glob patterns, and checks that the current branch
    is clean and in sync with its remote.
    """
    pass


def load_config(config_path: Optional[Path]) -> StampConfig:
    """Load an explicit --config file, or gitstamp.yaml from cwd if present."""
    if config_path is None:
        config_path = find_config()
        if config_path is None:
            return StampConfig()
        logger.debug("Using %s", config_path)

    try:
        return StampConfig.load(config_path)
    except GitstampError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e


def render(metadata: VersionMetadata, fmt: OutputFormat, env_prefix: str) -> str:
    if fmt == OutputFormat.YAML:
        return metadata.to_yaml()
    if fmt == OutputFormat.ENV:
        return metadata.to_env(env_prefix)
    return metadata.to_json() + "\n"


@app.command()
def stamp(
    paths: Annotated[
        Optional[list[str]],
        typer.Argument(help="Files, directories or glob patterns (default: '.')"),
    ] = None,
    recursive: Annotated[
        bool,
        typer.Option(
            "--recursive",
            "-r",
            help="Include whole subtrees of directory arguments",
        ),
    ] = False,
    config: Annotated[
        Optional[Path],
        typer.Option(help="Stamp configuration file (default: ./gitstamp.yaml)"),
    ] = None,
    output_format: Annotated[
        Optional[OutputFormat],
        typer.Option("--format", help="Output format", case_sensitive=False),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write to file instead of stdout"),
    ] = None,
    env_prefix: Annotated[
        Optional[str],
        typer.Option(help="Variable prefix for env output"),
    ] = None,
    require_clean: Annotated[
        bool,
        typer.Option(
            "--require-clean",
            help="Fail unless the branch is clean and in sync with its remote",
        ),
    ] = False,
    remote: Annotated[
        Optional[str],
        typer.Option(help="Remote used by --require-clean"),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            help="Logging level (debug, info, warn, error)",
            case_sensitive=False,
            hidden=True,
        ),
    ] = "warn",
):
    """Print the latest commit date and short hash for the given paths.

    Dates get a letter suffix from the third commit on the same day
    (2025-09-10, 2025-09-10, 2025-09-10-b, ...).

    Examples:
        gitstamp stamp src -r
        gitstamp stamp "docs/*.md" README.md --format env
        gitstamp stamp --config gitstamp.yaml -o build/VERSION.json
    """
    configure_logging(log_level)
    cfg = load_config(config)

    if paths:
        targets = [PathTarget(path=p, include_subdirs=recursive) for p in paths]
    else:
        targets = cfg.targets

    fmt = output_format or cfg.format
    prefix = env_prefix if env_prefix is not None else cfg.env_prefix

    try:
        if require_clean:
            assert_branch_is_clean_and_synced(remote=remote or cfg.remote)
        metadata = get_version_metadata(targets)
    except GitstampError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e

    text = render(metadata, fmt, prefix)

    if output is None:
        typer.echo(text, nl=False)
        return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text)
    except OSError as e:
        typer.echo(f"❌ Cannot write {output}: {e}", err=True)
        raise typer.Exit(1) from e
    logger.info("Wrote %s", output)


@app.command()
def check(
    remote: Annotated[
        Optional[str],
        typer.Option(
            help="Remote to compare the current branch against "
            "(default: from gitstamp.yaml, else origin)"
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option(
            help="Logging level (debug, info, warn, error)",
            case_sensitive=False,
            hidden=True,
        ),
    ] = "warn",
):
    """Check the current branch is clean and in sync with its remote.

    Fetches the remote branch, then fails on the first of: behind remote,
    ahead of remote, uncommitted changes.
    """
    configure_logging(log_level)
    remote = remote or load_config(None).remote

    status = check_branch_sync(remote=remote)

    if json_output:
        typer.echo(status.model_dump_json(indent=2))
    elif status.ok:
        typer.echo(f"✅ {status.branch} is clean and in sync with {remote}")
    else:
        typer.echo(f"❌ {status.reason}", err=True)

    if not status.ok:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
