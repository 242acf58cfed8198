"""Reconciles configuration between CLI arguments and environment variables.

Values passed on the command line always win over values from the
environment (or `.env`). Values absent from both fall back to defaults.
"""

from pathlib import Path

from github_label_sync.configuration.env import settings
from github_label_sync.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    InvalidConfigurationElementError,
    RequiredConfigurationElementError,
)
from github_label_sync.configuration.models import (
    BaseConfig,
    GitHubAuthenticationType,
    ResyncLabelsConfig,
    SyncLabelEventConfig,
)
from github_label_sync.utils.constants import (
    DEFAULT_BULK_MAX_REPOSITORIES,
    DEFAULT_EVENT_MAX_REPOSITORIES,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_MAX_LABELS,
)


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (Path | None): The path to the GitHub App private key.
        github_app_installation_id (int | None): The GitHub App installation ID.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If both PAT and App configurations are defined,
            the App configuration is incomplete, or neither is defined.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    if github_pat_token and (github_app_id or github_app_private_key_path or github_app_installation_id):
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if github_app_id and github_app_private_key_path and github_app_installation_id:
        return GitHubAuthenticationType.APP
    elif github_app_id or github_app_private_key_path or github_app_installation_id:
        missing_settings: list[dict[str, str]] = []
        if not github_app_id:
            missing_settings.append(
                {
                    "name": "GitHub App ID",
                    "cli_name": "github_app_id",
                    "env_name": "GITHUB_APP_ID",
                }
            )
        if not github_app_private_key_path:
            missing_settings.append(
                {
                    "name": "GitHub App private key path",
                    "cli_name": "github_app_private_key_path",
                    "env_name": "GITHUB_APP_PRIVATE_KEY_PATH",
                }
            )
        if not github_app_installation_id:
            missing_settings.append(
                {
                    "name": "GitHub App installation ID",
                    "cli_name": "github_app_installation_id",
                    "env_name": "GITHUB_APP_INSTALLATION_ID",
                }
            )
        msg = "Incomplete GitHub App configuration - missing settings include " + ", ".join(
            f"{setting['name']} (command line option {setting['cli_name']}, environment variable {setting['env_name']})"
            for setting in missing_settings
        )
        raise GitHubAuthenticationConfigurationUndefinedError(msg)
    else:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a PAT or a GitHub App configuration."
        )


async def _reconcile_positive_int(name: str, cli_value: int | None, env_value: int | None, default: int) -> int:
    """Pick the CLI value, then the environment value, then the default, and require it to be positive."""
    if cli_value is not None:
        value = cli_value
    elif env_value is not None:
        value = env_value
    else:
        value = default
    if value < 1:
        raise InvalidConfigurationElementError(name, value, "must be a positive integer")
    return value


async def reconcile_base_configuration(
    cli_debug: bool,
    cli_github_api_url: str | None,
    cli_github_pat_token: str | None,
    cli_github_app_id: int | None,
    cli_github_app_private_key_path: Path | None,
    cli_github_app_installation_id: int | None,
    cli_source_repo: str | None,
    cli_max_repositories: int | None,
    cli_include_source_repo: bool = False,
    default_max_repositories: int = DEFAULT_EVENT_MAX_REPOSITORIES,
) -> BaseConfig:
    """Reconcile the configuration shared by every command."""
    debug = cli_debug or settings.DEBUG
    github_api_url = cli_github_api_url or settings.GITHUB_API_URL or DEFAULT_GITHUB_API_URL
    github_pat_token = cli_github_pat_token or settings.GITHUB_PAT_TOKEN
    github_app_id = cli_github_app_id or settings.GITHUB_APP_ID
    github_app_private_key_path = cli_github_app_private_key_path or settings.GITHUB_APP_PRIVATE_KEY_PATH
    github_app_installation_id = cli_github_app_installation_id or settings.GITHUB_APP_INSTALLATION_ID

    github_authentication_type = await validate_github_authentication_configuration(
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
    )

    source_repo = cli_source_repo or settings.SOURCE_REPO or settings.GITHUB_REPOSITORY
    if not source_repo:
        raise RequiredConfigurationElementError(name="Source repository", cli_name="source_repo", env_name="SOURCE_REPO")

    max_repositories = await _reconcile_positive_int(
        "max_repositories", cli_max_repositories, settings.MAX_REPOSITORIES, default_max_repositories
    )

    return BaseConfig(
        debug=debug,
        github_api_url=github_api_url,
        github_authentication_type=github_authentication_type,
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
        source_repo=source_repo,
        max_repositories=max_repositories,
        include_source_repo=cli_include_source_repo or settings.INCLUDE_SOURCE_REPO,
    )


async def reconcile_sync_event_configuration(
    cli_debug: bool,
    cli_github_api_url: str | None,
    cli_github_pat_token: str | None,
    cli_github_app_id: int | None,
    cli_github_app_private_key_path: Path | None,
    cli_github_app_installation_id: int | None,
    cli_source_repo: str | None,
    cli_max_repositories: int | None,
    cli_event_path: Path | None,
    cli_max_concurrency: int | None,
    cli_include_source_repo: bool = False,
) -> SyncLabelEventConfig:
    """Reconcile the configuration for the sync-event command."""
    base_config = await reconcile_base_configuration(
        cli_debug=cli_debug,
        cli_github_api_url=cli_github_api_url,
        cli_github_pat_token=cli_github_pat_token,
        cli_github_app_id=cli_github_app_id,
        cli_github_app_private_key_path=cli_github_app_private_key_path,
        cli_github_app_installation_id=cli_github_app_installation_id,
        cli_source_repo=cli_source_repo,
        cli_max_repositories=cli_max_repositories,
        cli_include_source_repo=cli_include_source_repo,
        default_max_repositories=DEFAULT_EVENT_MAX_REPOSITORIES,
    )

    event_path = cli_event_path or settings.GITHUB_EVENT_PATH
    if event_path is None:
        raise RequiredConfigurationElementError(name="Label event payload path", cli_name="event_path", env_name="GITHUB_EVENT_PATH")

    max_concurrency = await _reconcile_positive_int("max_concurrency", cli_max_concurrency, settings.MAX_CONCURRENCY, DEFAULT_MAX_CONCURRENCY)

    return SyncLabelEventConfig(
        **vars(base_config),
        event_path=event_path,
        max_concurrency=max_concurrency,
    )


async def reconcile_resync_configuration(
    cli_debug: bool,
    cli_github_api_url: str | None,
    cli_github_pat_token: str | None,
    cli_github_app_id: int | None,
    cli_github_app_private_key_path: Path | None,
    cli_github_app_installation_id: int | None,
    cli_source_repo: str | None,
    cli_max_repositories: int | None,
    cli_max_labels: int | None,
    cli_include_source_repo: bool = False,
) -> ResyncLabelsConfig:
    """Reconcile the configuration for the resync-all command."""
    base_config = await reconcile_base_configuration(
        cli_debug=cli_debug,
        cli_github_api_url=cli_github_api_url,
        cli_github_pat_token=cli_github_pat_token,
        cli_github_app_id=cli_github_app_id,
        cli_github_app_private_key_path=cli_github_app_private_key_path,
        cli_github_app_installation_id=cli_github_app_installation_id,
        cli_source_repo=cli_source_repo,
        cli_max_repositories=cli_max_repositories,
        cli_include_source_repo=cli_include_source_repo,
        default_max_repositories=DEFAULT_BULK_MAX_REPOSITORIES,
    )

    max_labels = await _reconcile_positive_int("max_labels", cli_max_labels, settings.MAX_LABELS, DEFAULT_MAX_LABELS)

    return ResyncLabelsConfig(
        **vars(base_config),
        max_labels=max_labels,
    )
