"""Ship releases when their pull requests are merged."""

from typing import Any, Dict, Optional

import requests
from github import GithubException

from ..config import GitflowConfig
from ..models import Classification, Result
from ..tools import GitHubTool, SlackAnnouncer
from ..utils import get_logger
from .classifier import classify, hotfix_version, release_version
from .merge import BranchMerger


class ReleaseFinalizer:
    """
    Finalizes a merged release or hotfix pull request.

    Flow:
    1. Skip dry runs and unmerged pull requests
    2. Classify the pull request (release, hotfix, none)
    3. Create the release from the pull request body
    4. Merge back into the development branch
    5. Announce on Slack when configured
    """

    def __init__(
        self,
        config: GitflowConfig,
        github: GitHubTool,
        announcer: Optional[SlackAnnouncer] = None
    ):
        self.config = config
        self.github = github
        self.merger = BranchMerger(github)
        self.announcer = announcer or SlackAnnouncer(config.repo, config.slack_token)
        self.logger = get_logger()

    async def execute_on_release(self, pull_request: Dict[str, Any]) -> Result:
        """
        Run the release workflow for a closed pull request.

        Args:
            pull_request: The ``pull_request`` object of the event payload

        Returns:
            Result of type "release" or "hotfix", or "none" when skipped

        Raises:
            AssertionError: If the payload has no number or the pull request has no body
        """
        config = self.config

        if config.dry_run:
            self.logger.info("on-release: dry run. Exiting...")
            return Result()

        if not pull_request.get("merged"):
            self.logger.info("on-release: pull request is not merged. Exiting...")
            return Result()

        number = pull_request.get("number")
        if not number:
            raise AssertionError("pull_request.number is not defined")

        # Slack settings are checked before anything is created
        if config.slack:
            self.announcer.check(config.slack)

        pr = self.github.get_pull(number)

        kind = classify(pr, config)
        if kind is Classification.NONE:
            return Result()

        if kind is Classification.RELEASE:
            version = release_version(pr.head, config.release_branch_prefix)
        else:
            version = hotfix_version(pr.merged_at)

        self.logger.info(f"on-release: {kind.value}({version}): Generating release")

        if not pr.body:
            raise AssertionError("pull request body is not defined")

        release = self.github.create_release(
            tag=version,
            target=config.main_branch,
            name=version,
            body=pr.body,
        )
        result = Result(type=kind, version=version, release_url=release.html_url)

        self.logger.info(f"on-release: {kind.value}({version}): Execute merge workflow")
        await self._merge_back(pr.head, result)
        self.logger.info("on-release: success")

        self.logger.info(f"post-release: process release {release.name}")
        if config.slack:
            await self.announcer.announce(config.slack, release)
        self.logger.info("post-release: success")

        return result

    async def _merge_back(self, head: str, result: Result) -> None:
        config = self.config
        source = config.main_branch if config.merge_back_from_main else head

        outcome = await self.merger.try_merge(source, config.develop_branch)
        if outcome.is_degraded:
            detail = f"pull request #{outcome.pull_number} opened" if outcome.pull_number else outcome.error
            result.warnings.append(
                f"{source} could not be merged into {config.develop_branch} automatically ({detail})"
            )

        if not config.merge_back_from_main:
            # Merging the head branch back only covers main if main holds
            # nothing besides the release merge commit that head lacks.
            try:
                missing = await self.merger.commits_missing(config.main_branch, head)
            except (GithubException, requests.RequestException) as e:
                self.logger.warning(f"on-release: could not compare {config.main_branch} with {head}: {e}")
                missing = None
            if missing is None or missing > 1:
                message = f"{config.main_branch} may have commits that are not in {head}"
                self.logger.warning(f"on-release: {message}")
                result.warnings.append(message)
