"""Configuration for the Gitflow release action."""

from dataclasses import dataclass
from typing import Mapping, Optional
import os

from .errors import ConfigurationError, CredentialMissingError

GITFLOW_DOCS_URL = "https://www.atlassian.com/git/tutorials/comparing-workflows/gitflow-workflow"

RELEASE_LABEL = "release"

MERGE_BACK_PR_BODY = f"""In Gitflow, `release` and `hotfix` branches get merged back into `develop` branch.
See [Gitflow Workflow]({GITFLOW_DOCS_URL}) for more details."""


def get_input(
    name: str,
    env_var: str,
    environ: Optional[Mapping[str, str]] = None
) -> str:
    """
    Resolve an action input, falling back to a plain environment variable.

    GitHub Actions exposes ``with:`` inputs as ``INPUT_<NAME>``; an input
    that is set and non-empty always wins over ``env_var``.
    """
    environ = os.environ if environ is None else environ
    value = environ.get(f"INPUT_{name.upper()}", "")
    return value or environ.get(env_var, "")


@dataclass(frozen=True)
class GitflowConfig:
    """Settings resolved once at startup and passed to every component."""

    # GitHub settings
    repo: str = ""
    github_token: Optional[str] = None

    # Branches
    develop_branch: str = "develop"
    main_branch: str = "main"
    merge_back_from_main: bool = False  # Merge main (not the release branch) back to develop
    release_branch_prefix: str = "release/"
    hotfix_branch_prefix: str = "hotfix/"

    # Versioning
    version: str = ""            # Explicit version, used verbatim
    version_increment: str = ""  # major, minor, patch, pre*, prerelease

    # Behavior
    dry_run: bool = False
    release_summary: str = ""

    # Slack integration
    slack: str = ""  # JSON: {"channel": ..., "username_mapping": {...}}
    slack_token: Optional[str] = None

    def __post_init__(self):
        if not self.develop_branch or not self.main_branch:
            raise ConfigurationError("develop_branch and main_branch must both be set")

    @property
    def owner(self) -> str:
        return self.repo.split("/", 1)[0]

    @property
    def repo_name(self) -> str:
        return self.repo.split("/", 1)[-1]

    @property
    def explain_message(self) -> str:
        """The comment attached to every release pull request."""
        merged_back = self.main_branch if self.merge_back_from_main else "this branch"
        return (
            "Merging this pull request will trigger Gitflow release actions. "
            f"A release would be created and {merged_back} would be merged back "
            f"to {self.develop_branch} if needed.\n"
            f"See [Gitflow Workflow]({GITFLOW_DOCS_URL}) for more details."
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GitflowConfig":
        """Create config from action inputs and environment variables."""
        environ = os.environ if environ is None else environ

        github_token = environ.get("GITHUB_TOKEN")
        if not github_token:
            raise CredentialMissingError("GITHUB_TOKEN is not defined")

        slack = get_input("slack", "SLACK_OPTIONS", environ)
        slack_token = environ.get("SLACK_TOKEN") or None
        if slack and not slack_token:
            raise CredentialMissingError("SLACK_TOKEN is not defined")

        return cls(
            repo=environ.get("GITHUB_REPOSITORY", ""),
            github_token=github_token,
            develop_branch=get_input("develop_branch", "DEVELOP_BRANCH", environ),
            main_branch=get_input("main_branch", "MAIN_BRANCH", environ),
            merge_back_from_main=get_input("merge_back_from_main", "MERGE_BACK_FROM_MAIN", environ) == "true",
            version=get_input("version", "VERSION", environ),
            version_increment=get_input("version_increment", "VERSION_INCREMENT", environ),
            dry_run=get_input("dry_run", "DRY_RUN", environ) == "true",
            release_summary=get_input("release_summary", "RELEASE_SUMMARY", environ),
            slack=slack,
            slack_token=slack_token,
        )
