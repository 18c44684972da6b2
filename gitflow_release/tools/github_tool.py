"""GitHub API wrapper for release operations."""

from datetime import timezone
from typing import List, Optional

from github import Auth, Github, GithubException
from github.PullRequest import PullRequest
from github.Repository import Repository

from ..models import PullRequestInfo, ReleaseInfo
from ..utils import get_logger


class GitHubTool:
    """
    GitHub API wrapper for Gitflow release operations.

    Handles:
    - Branch lookups, creation and merges
    - Pull requests, labels and comments
    - Releases
    """

    def __init__(self, repository: Repository):
        """
        Initialize GitHub tool.

        Args:
            repository: PyGithub repository object
        """
        self.repo = repository
        self.logger = get_logger()

    @classmethod
    def connect(cls, repo: str, token: str) -> "GitHubTool":
        """
        Open a repository with a token.

        Args:
            repo: Repository in format "owner/repo"
            token: GitHub token
        """
        gh = Github(auth=Auth.Token(token))
        return cls(gh.get_repo(repo))

    @property
    def full_name(self) -> str:
        return self.repo.full_name

    def get_branch_sha(self, branch: str) -> str:
        """Get the commit sha at the tip of a branch."""
        return self.repo.get_branch(branch).commit.sha

    def get_latest_release_tag(self) -> Optional[str]:
        """
        Get the tag of the most recent published release.

        Returns:
            Tag name, or None when the repository has no release yet
        """
        try:
            return self.repo.get_latest_release().tag_name
        except GithubException as e:
            self.logger.info(f"No latest release found ({e.status})")
            return None

    def create_branch(self, branch: str, sha: str) -> None:
        """Create a branch pointing at a commit."""
        self.repo.create_git_ref(ref=f"refs/heads/{branch}", sha=sha)

    def create_pull(
        self,
        head: str,
        base: str,
        title: str,
        body: str,
        maintainer_can_modify: Optional[bool] = None
    ) -> PullRequestInfo:
        """Open a pull request from head into base."""
        kwargs = {"title": title, "body": body}
        if maintainer_can_modify is not None:
            kwargs["maintainer_can_modify"] = maintainer_can_modify
        pr = self.repo.create_pull(base=base, head=head, **kwargs)
        return self._to_info(pr)

    def get_pull(self, number: int) -> PullRequestInfo:
        """Fetch a pull request."""
        return self._to_info(self.repo.get_pull(number))

    def add_labels(self, number: int, labels: List[str]) -> None:
        """Attach labels to a pull request."""
        self.repo.get_issue(number).add_to_labels(*labels)

    def has_comment(self, number: int, body: str) -> bool:
        """
        Check whether a pull request already carries a comment.

        The match is on the exact comment body. Lookup failures count as
        "not found" so the caller can still post.
        """
        try:
            comments = self.repo.get_issue(number).get_comments()
            return any(comment.body == body for comment in comments)
        except GithubException as e:
            self.logger.warning(f"Could not list comments on #{number}: {e}")
            return False

    def create_comment(self, number: int, body: str) -> None:
        """Post a comment on a pull request."""
        self.repo.get_issue(number).create_comment(body)

    def ensure_comment(self, number: int, body: str) -> bool:
        """
        Post a comment unless an identical one is already there.

        Returns:
            True if a new comment was posted
        """
        if self.has_comment(number, body):
            self.logger.info(f"Pull request {number} already has this comment.")
            return False
        self.create_comment(number, body)
        return True

    def compare(self, base: str, head: str) -> str:
        """
        Compare two refs.

        Returns:
            "identical", "ahead", "behind" or "diverged" (head relative to base)
        """
        return self.repo.compare(base, head).status

    def ahead_by(self, base: str, head: str) -> int:
        """Number of commits in head that base does not have."""
        return self.repo.compare(base, head).ahead_by

    def merge(self, head: str, base: str) -> Optional[str]:
        """
        Merge head into base.

        Returns:
            The merge commit sha, or None when there was nothing to merge
        """
        commit = self.repo.merge(base, head)
        return commit.sha if commit is not None else None

    def create_release(self, tag: str, target: str, name: str, body: str) -> ReleaseInfo:
        """Create a published release, tagging target."""
        release = self.repo.create_git_release(
            tag=tag,
            name=name,
            message=body,
            target_commitish=target,
        )
        return ReleaseInfo(
            tag_name=release.tag_name,
            target=target,
            name=release.title or name,
            body=release.body or body,
            html_url=release.html_url,
        )

    def _to_info(self, pr: PullRequest) -> PullRequestInfo:
        merged_at = pr.merged_at
        if merged_at is not None and merged_at.tzinfo is None:
            merged_at = merged_at.replace(tzinfo=timezone.utc)
        return PullRequestInfo(
            number=pr.number,
            base=pr.base.ref,
            head=pr.head.ref,
            merged=bool(pr.merged),
            merged_at=merged_at,
            body=pr.body,
            html_url=pr.html_url,
        )
