"""Merge release and hotfix branches back into development."""

import requests
from github import GithubException

from ..config import MERGE_BACK_PR_BODY
from ..models import MergeOutcome, MergeStatus
from ..tools import GitHubTool
from ..utils import get_logger


class BranchMerger:
    """
    Brings one branch up to date with another.

    Handles:
    - Skipping branches that are already identical
    - Direct merges through the API
    - Falling back to a pull request when the merge fails
    """

    def __init__(self, github: GitHubTool):
        """
        Initialize branch merger.

        Args:
            github: GitHub tool for the repository
        """
        self.github = github
        self.logger = get_logger()

    async def try_merge(self, head: str, base: str) -> MergeOutcome:
        """
        Merge head into base, opening a pull request if that fails.

        The fallback pull request is best effort: if it cannot be created
        (usually because one is already open) the failure is logged and
        reported in the outcome, never raised.

        Args:
            head: Branch to merge from
            base: Branch to merge into

        Returns:
            MergeOutcome describing what happened
        """
        self.logger.info(f"Trying to merge {head} branch into {base} branch.")

        if self.github.compare(base, head) == "identical":
            self.logger.info(f"{head} branch is already up to date with {base} branch.")
            return MergeOutcome(head=head, base=base, status=MergeStatus.UP_TO_DATE)

        self.logger.info(f"{head} branch is not up to date with {base} branch. Attempting to merge.")
        try:
            sha = self.github.merge(head, base)
            return MergeOutcome(head=head, base=base, status=MergeStatus.MERGED, commit_sha=sha)
        except (GithubException, requests.RequestException) as e:
            merge_error = e
            self.logger.warning(f"Could not merge {head} into {base}: {e}")

        try:
            pr = self.github.create_pull(
                head=head,
                base=base,
                title=f"Merge {head} branch into {base}",
                body=MERGE_BACK_PR_BODY,
            )
        except (GithubException, requests.RequestException) as e:
            self.logger.warning(f"Could not open a pull request from {head} into {base}: {e}")
            return MergeOutcome(
                head=head,
                base=base,
                status=MergeStatus.FALLBACK_FAILED,
                error=str(e),
            )

        self.logger.info(f"Opened pull request #{pr.number} to merge {head} into {base}")
        return MergeOutcome(
            head=head,
            base=base,
            status=MergeStatus.FALLBACK_PR,
            pull_number=pr.number,
            error=str(merge_error),
        )

    async def commits_missing(self, ref: str, from_ref: str) -> int:
        """
        Count the commits of ref that from_ref does not contain.

        Args:
            ref: Ref whose history is checked
            from_ref: Ref expected to contain it
        """
        return self.github.ahead_by(from_ref, ref)
