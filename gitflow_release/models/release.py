"""Data models for release workflows."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional
from datetime import datetime


class Classification(Enum):
    """What a pull request into the production branch represents."""
    RELEASE = "release"
    HOTFIX = "hotfix"
    NONE = "none"


class MergeStatus(Enum):
    """Outcome of merging a branch back into another."""
    UP_TO_DATE = "up_to_date"        # Nothing to merge
    MERGED = "merged"                # Merged directly
    FALLBACK_PR = "fallback_pr"      # Conflict, pull request opened instead
    FALLBACK_FAILED = "fallback_failed"  # Conflict and no pull request could be opened


@dataclass
class PullRequestInfo:
    """Read-only view of a pull request."""
    number: int
    base: str                     # Base branch ref
    head: str                     # Head branch ref
    merged: bool = False
    merged_at: Optional[datetime] = None
    body: Optional[str] = None
    html_url: str = ""


@dataclass
class ReleaseInfo:
    """A published release."""
    tag_name: str
    target: str
    name: str
    body: str
    html_url: str = ""


@dataclass
class Changelog:
    """Release notes produced by a changelog generator."""
    markdown: str
    name: Optional[str] = None  # Release title suggested by the generator


@dataclass
class MergeOutcome:
    """Result of a merge-back attempt."""
    head: str
    base: str
    status: MergeStatus
    commit_sha: Optional[str] = None
    pull_number: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_degraded(self) -> bool:
        """Check if the branches still need a manual merge."""
        return self.status in (MergeStatus.FALLBACK_PR, MergeStatus.FALLBACK_FAILED)


@dataclass
class Result:
    """Outputs handed back to the workflow."""
    type: Classification = Classification.NONE
    version: Optional[str] = None
    release_url: Optional[str] = None
    pull_number: Optional[int] = None
    pull_numbers_in_release: Optional[str] = None
    release_branch: Optional[str] = None
    latest_release_tag_name: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    def to_outputs(self) -> Dict[str, str]:
        """Flatten to action outputs, leaving out unset values."""
        outputs = {"type": self.type.value}
        for key in (
            "version",
            "release_url",
            "pull_number",
            "pull_numbers_in_release",
            "release_branch",
            "latest_release_tag_name",
        ):
            value = getattr(self, key)
            if value is not None:
                outputs[key] = str(value)
        if self.warnings:
            outputs["warnings"] = "\n".join(self.warnings)
        return outputs
