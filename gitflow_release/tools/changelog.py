"""Changelog generation for release pull requests."""

import re
from typing import List, Optional, Protocol

from github.Repository import Repository

from ..models import Changelog
from ..utils import get_logger

_PULL_REF_RE = re.compile(r"pull/(\d+)")


class ChangelogGenerator(Protocol):
    """Anything that can produce release notes since a previous tag."""

    async def generate(
        self,
        since_tag: Optional[str],
        target: str,
        tag_name: str
    ) -> Changelog:
        ...


class GitHubChangelogGenerator:
    """
    Release notes from GitHub's "generate release notes" endpoint.

    The notes list merged pull requests as
    ``* <title> by @<author> in https://github.com/<owner>/<repo>/pull/<n>``
    and honour ``.github/release.yml`` when the repository has one.
    """

    def __init__(self, repo: Repository):
        self.repo = repo
        self.logger = get_logger()

    async def generate(
        self,
        since_tag: Optional[str],
        target: str,
        tag_name: str
    ) -> Changelog:
        kwargs = {"target_commitish": target}
        if since_tag:
            kwargs["previous_tag_name"] = since_tag

        self.logger.debug(f"Generating release notes for {tag_name} since {since_tag or 'the beginning'}")
        notes = self.repo.generate_release_notes(tag_name, **kwargs)

        name = notes.name if notes.name and notes.name != tag_name else None
        return Changelog(markdown=notes.body or "", name=name)


def extract_pull_numbers(markdown: str) -> List[int]:
    """
    Collect the pull request numbers linked from release notes.

    Contributors sections repeat links, so numbers are deduplicated and
    returned in ascending order.
    """
    return sorted({int(number) for number in _PULL_REF_RE.findall(markdown)})
