"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from typer import Argument, Option
from typing_extensions import Annotated

from github_label_sync.configuration.driver import get_resync_config, get_sync_event_config
from github_label_sync.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    InvalidConfigurationElementError,
    RequiredConfigurationElementError,
)
from github_label_sync.github.exceptions import LabelSyncError
from github_label_sync.synchronize.bulk import run_resync_workflow
from github_label_sync.synchronize.driver import run_sync_event_workflow
from github_label_sync.utils.log import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Propagate labels from a canonical repository to every repository of its owner.")

CONFIGURATION_ERRORS = (
    GitHubAuthenticationConfigurationUndefinedError,
    InvalidConfigurationElementError,
    RequiredConfigurationElementError,
)

SourceRepoOption = Annotated[
    str | None, Option(help="Canonical repository holding the label definitions (owner/repo). Defaults to SOURCE_REPO or GITHUB_REPOSITORY.")
]
GitHubApiUrlOption = Annotated[str | None, Option(help="GitHub API URL.")]
GitHubPatTokenOption = Annotated[str | None, Option(help="GitHub Personal Access Token.")]
GitHubAppIdOption = Annotated[int | None, Option(help="GitHub App ID.")]
GitHubAppPrivateKeyPathOption = Annotated[Path | None, Option(help="Path to GitHub App private key.")]
GitHubAppInstallationIdOption = Annotated[int | None, Option(help="GitHub App Installation ID.")]
MaxRepositoriesOption = Annotated[int | None, Option(help="Maximum number of repositories to synchronize.")]
IncludeSourceRepoOption = Annotated[bool, Option(help="Also reconcile the source repository against itself.")]
DebugOption = Annotated[bool, Option(help="Enable debug mode.")]


@typer_app.command(name="sync-event")
def sync_event_cli(
    event_path: Annotated[Path | None, Argument(help="Path to the label webhook payload. Defaults to GITHUB_EVENT_PATH.")] = None,
    source_repo: SourceRepoOption = None,
    github_api_url: GitHubApiUrlOption = None,
    github_pat_token: GitHubPatTokenOption = None,
    github_app_id: GitHubAppIdOption = None,
    github_app_private_key_path: GitHubAppPrivateKeyPathOption = None,
    github_app_installation_id: GitHubAppInstallationIdOption = None,
    max_repositories: MaxRepositoriesOption = None,
    max_concurrency: Annotated[int | None, Option(help="Maximum number of repositories reconciled at once.")] = None,
    include_source_repo: IncludeSourceRepoOption = False,
    debug: DebugOption = False,
) -> None:
    """Propagate one label created, edited, or deleted event to every repository of the owner."""
    try:
        config = get_sync_event_config(
            debug=debug,
            github_api_url=github_api_url,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            source_repo=source_repo,
            max_repositories=max_repositories,
            include_source_repo=include_source_repo,
            event_path=event_path,
            max_concurrency=max_concurrency,
        )
    except CONFIGURATION_ERRORS as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2) from exc
    configure_logging(config.debug)

    if not config.event_path.exists():
        typer.echo(f"Label event payload not found: {config.event_path.absolute()}", err=True)
        raise typer.Exit(2)

    try:
        result = asyncio.run(
            run_sync_event_workflow(
                source_repo=config.source_repo,
                github_pat_token=config.github_pat_token,
                github_app_id=config.github_app_id,
                github_app_private_key_path=config.github_app_private_key_path,
                github_app_installation_id=config.github_app_installation_id,
                github_auth_type=config.github_authentication_type,
                github_api_url=config.github_api_url,
                event_path=config.event_path,
                max_repositories=config.max_repositories,
                max_concurrency=config.max_concurrency,
                include_source_repo=config.include_source_repo,
            )
        )
    except ValidationError as exc:
        typer.echo(f"Invalid label event payload in {config.event_path}: {exc}", err=True)
        sys.exit(1)
    except (LabelSyncError, ValueError) as exc:
        typer.echo(f"Label synchronization failed: {exc}", err=True)
        sys.exit(1)

    for target_result in result.target_results:
        if target_result.result is not None:
            typer.echo(f"{target_result.repository.full_name}: {target_result.result.outcome.value}")
    if result.errors:
        typer.echo("Error(s) encountered while synchronizing label:", err=True)
        for target_result in result.errors:
            typer.echo(f"{target_result.repository.full_name}: {target_result.error}", err=True)
        sys.exit(1)


@typer_app.command(name="resync-all")
def resync_all_cli(
    source_repo: SourceRepoOption = None,
    github_api_url: GitHubApiUrlOption = None,
    github_pat_token: GitHubPatTokenOption = None,
    github_app_id: GitHubAppIdOption = None,
    github_app_private_key_path: GitHubAppPrivateKeyPathOption = None,
    github_app_installation_id: GitHubAppInstallationIdOption = None,
    max_repositories: MaxRepositoriesOption = None,
    max_labels: Annotated[int | None, Option(help="Maximum number of source labels to synchronize.")] = None,
    include_source_repo: IncludeSourceRepoOption = False,
    debug: DebugOption = False,
) -> None:
    """Push every label of the source repository to every repository of the owner.

    Runs sequentially. The first failure stops the run, re-run the command to retry.
    """
    try:
        config = get_resync_config(
            debug=debug,
            github_api_url=github_api_url,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            source_repo=source_repo,
            max_repositories=max_repositories,
            include_source_repo=include_source_repo,
            max_labels=max_labels,
        )
    except CONFIGURATION_ERRORS as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2) from exc
    configure_logging(config.debug)

    try:
        result = asyncio.run(
            run_resync_workflow(
                source_repo=config.source_repo,
                github_pat_token=config.github_pat_token,
                github_app_id=config.github_app_id,
                github_app_private_key_path=config.github_app_private_key_path,
                github_app_installation_id=config.github_app_installation_id,
                github_auth_type=config.github_authentication_type,
                github_api_url=config.github_api_url,
                max_repositories=config.max_repositories,
                max_labels=config.max_labels,
                include_source_repo=config.include_source_repo,
            )
        )
    except (LabelSyncError, ValueError) as exc:
        typer.echo(f"Label resync failed: {exc}", err=True)
        sys.exit(1)

    for reconciliation in result.results:
        typer.echo(f"{reconciliation.repository.full_name} <- {reconciliation.label_name}: {reconciliation.outcome.value}")
    if not result.succeeded:
        failed_repository = result.failed_repository.full_name if result.failed_repository is not None else "source repository"
        typer.echo(f"Resync aborted at label '{result.failed_label}' in {failed_repository}: {result.error}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    typer_app()
