"""Data models for release workflows."""

from .release import (
    Classification,
    MergeStatus,
    PullRequestInfo,
    ReleaseInfo,
    Changelog,
    MergeOutcome,
    Result,
)

__all__ = [
    "Classification",
    "MergeStatus",
    "PullRequestInfo",
    "ReleaseInfo",
    "Changelog",
    "MergeOutcome",
    "Result",
]
