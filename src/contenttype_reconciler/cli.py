"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from contenttype_reconciler.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from contenttype_reconciler.lifecycle_execution import (
    ChangeAction,
    LifecycleExecutionError,
    LifecycleOutcome,
    LifecycleRequest,
    describe_change,
    execute_apply,
    execute_destroy,
    execute_plan,
    execute_refresh,
)
from contenttype_reconciler.remote_api import ManagementApiClient

_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


class CliError(Exception):
    """Custom CLI error."""


_config_option = click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON content type configuration file",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="contenttype-reconciler")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug).")
def cli(verbose: int) -> None:
    """Reconcile declared content types with a remote content management API."""
    logging.basicConfig(
        level=_LOG_LEVELS.get(verbose, logging.DEBUG),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="plan")
@_config_option
def plan(config_path: str) -> None:
    """Show the changes apply would make, without contacting the remote API."""
    try:
        changes = execute_plan(LifecycleRequest(config_path=config_path))
    except LifecycleExecutionError as exc:
        raise CliError(str(exc)) from exc
    if not changes:
        click.echo("no content types declared or tracked")
    for change in changes:
        click.echo(describe_change(change))


@cli.command(name="apply")
@_config_option
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Plan only; skip remote calls and state writes.",
)
def apply(config_path: str, dry_run: bool) -> None:
    """Create, update, replace or delete content types to match the configuration."""
    try:
        outcome = execute_apply(
            LifecycleRequest(config_path=config_path, dry_run=dry_run),
            client_factory=ManagementApiClient,
        )
    except LifecycleExecutionError as exc:
        raise CliError(str(exc)) from exc
    _echo_outcome(outcome)


@cli.command(name="refresh")
@_config_option
def refresh(config_path: str) -> None:
    """Confirm tracked content types still exist and record their remote versions."""
    try:
        outcome = execute_refresh(
            LifecycleRequest(config_path=config_path), client_factory=ManagementApiClient
        )
    except LifecycleExecutionError as exc:
        raise CliError(str(exc)) from exc
    _echo_outcome(outcome)


@cli.command(name="destroy")
@_config_option
@click.confirmation_option(prompt="Delete every tracked content type?")
def destroy(config_path: str) -> None:
    """Delete every tracked content type."""
    try:
        outcome = execute_destroy(
            LifecycleRequest(config_path=config_path), client_factory=ManagementApiClient
        )
    except LifecycleExecutionError as exc:
        raise CliError(str(exc)) from exc
    _echo_outcome(outcome)


def _echo_outcome(outcome: LifecycleOutcome) -> None:
    for result in outcome.results:
        line = f"{result.resource_name}: {result.action.value}"
        if outcome.dry_run and result.action != ChangeAction.NOOP:
            line = f"{line} (dry run)"
        if result.observed is not None:
            line = f"{line} id={result.observed.content_type_id} version={result.observed.version}"
        click.echo(line)
    click.echo(str(outcome.state_path))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
