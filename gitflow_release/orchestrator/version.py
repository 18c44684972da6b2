"""Resolve the version of the next release."""

from typing import Optional

from ..config import GitflowConfig
from ..errors import VersionComputationError
from ..utils import increment


def resolve_version(
    latest_tag: Optional[str],
    config: GitflowConfig,
    commit_sha: str
) -> str:
    """
    Pick the version for a new release.

    In order of priority:
    1. The explicit ``version`` input, verbatim
    2. ``latest_tag`` (or 0.0.0) bumped by ``version_increment``
    3. The development branch's commit sha

    Raises:
        VersionComputationError: If the increment cannot be applied
    """
    if config.version:
        return config.version

    if config.version_increment:
        bumped = increment(latest_tag or "0.0.0", config.version_increment)
        if not bumped:
            raise VersionComputationError(
                f"create_release: Could not increment version {latest_tag} "
                f"with {config.version_increment}"
            )
        return bumped

    return commit_sha
