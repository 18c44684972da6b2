"""Classify closed pull requests and derive their release versions."""

from datetime import datetime, timezone
from typing import Optional

from ..config import GitflowConfig
from ..models import Classification, PullRequestInfo
from ..utils import get_logger


def classify_refs(
    base: str,
    head: str,
    main_branch: str,
    release_prefix: str,
    hotfix_prefix: str
) -> Classification:
    """Classify a pull request from its base and head branch names."""
    if base != main_branch:
        return Classification.NONE
    if head.startswith(release_prefix):
        return Classification.RELEASE
    if head.startswith(hotfix_prefix):
        return Classification.HOTFIX
    return Classification.NONE


def classify(pull_request: PullRequestInfo, config: GitflowConfig) -> Classification:
    """
    Decide whether a pull request ships a release, a hotfix, or neither.

    Args:
        pull_request: The closed pull request
        config: Branch names and prefixes

    Returns:
        Classification of the pull request
    """
    result = classify_refs(
        pull_request.base,
        pull_request.head,
        config.main_branch,
        config.release_branch_prefix,
        config.hotfix_branch_prefix,
    )
    if result is Classification.NONE:
        logger = get_logger()
        if pull_request.base != config.main_branch:
            logger.info(f"on-release: {pull_request.number} does not merge to main_branch. Exiting...")
        else:
            logger.info("on-release: pull request does not match either release or hotfix branch pattern. Exiting...")
    return result


def release_version(head: str, prefix: str) -> str:
    """Version of a release branch: its name without the prefix."""
    return head[len(prefix):]


def hotfix_version(merged_at: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Version of a hotfix: ``hotfix-YYYYMMDDHHmm`` of its merge time in UTC.

    Naive datetimes are taken to be UTC. Without a merge time the current
    time is used.
    """
    moment = merged_at or now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return "hotfix-" + moment.astimezone(timezone.utc).strftime("%Y%m%d%H%M")
