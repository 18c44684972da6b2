"""Open release pull requests from the development branch."""

from typing import Optional

from ..config import GitflowConfig, RELEASE_LABEL
from ..models import Classification, Result
from ..tools import ChangelogGenerator, GitHubTool, extract_pull_numbers
from ..utils import get_logger
from .version import resolve_version


def compose_release_body(changelog_markdown: str, release_summary: str) -> str:
    """Release notes followed by the operator's summary."""
    return f"{changelog_markdown}\n\n## Release summary\n\n{release_summary}\n"


class ReleasePROrchestrator:
    """
    Proposes a release.

    Cuts ``release/<version>`` from the development branch and opens a
    pull request into the production branch carrying the release notes.
    Nothing is rolled back on failure: a branch created before a failed
    pull request stays behind and has to be cleaned up by hand.
    """

    def __init__(
        self,
        config: GitflowConfig,
        github: GitHubTool,
        changelog: ChangelogGenerator
    ):
        self.config = config
        self.github = github
        self.changelog = changelog
        self.logger = get_logger()

    async def create_release_pr(self) -> Result:
        """
        Run the release pull request workflow.

        Returns:
            Result of type "release"
        """
        config = self.config

        develop_sha = self.github.get_branch_sha(config.develop_branch)
        self.logger.info(f"create_release: Generating release notes for {develop_sha}")

        # Notes are computed from develop, ahead of the merge into main
        latest_tag: Optional[str] = self.github.get_latest_release_tag()

        version = resolve_version(latest_tag, config, develop_sha)
        self.logger.info(f"create_release: Version {version} (latest release: {latest_tag or 'none'})")

        changelog = await self.changelog.generate(
            since_tag=latest_tag,
            target=develop_sha,
            tag_name=version,
        )
        body = compose_release_body(changelog.markdown, config.release_summary)
        self.logger.debug(body)

        release_branch = f"{config.release_branch_prefix}{version}"
        pull_number: Optional[int] = None

        if not config.dry_run:
            self.logger.info("create_release: Creating release branch")
            self.github.create_branch(release_branch, develop_sha)

            self.logger.info("create_release: Creating Pull Request")
            pr = self.github.create_pull(
                head=release_branch,
                base=config.main_branch,
                title=f"Release {changelog.name or version}",
                body=body,
                maintainer_can_modify=False,
            )
            pull_number = pr.number

            self.github.add_labels(pr.number, [RELEASE_LABEL])
            self.github.ensure_comment(pr.number, config.explain_message)

            self.logger.info(f"create_release: Pull request has been created at {pr.html_url}")
        else:
            self.logger.info(
                f"create_release: Dry run: would have created release branch {release_branch} "
                f"and PR with body:\n{body}"
            )

        pull_numbers = extract_pull_numbers(changelog.markdown)

        return Result(
            type=Classification.RELEASE,
            pull_number=pull_number,
            pull_numbers_in_release=",".join(str(n) for n in pull_numbers),
            version=version,
            release_branch=release_branch,
            latest_release_tag_name=latest_tag,
        )
