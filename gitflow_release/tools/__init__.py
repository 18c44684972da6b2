"""Tools for the release workflows."""

from .github_tool import GitHubTool
from .changelog import ChangelogGenerator, GitHubChangelogGenerator, extract_pull_numbers
from .slack_tool import SlackAnnouncer, SlackClient, SlackOptions, format_release_body
from .actions import ActionEvent, set_outputs, set_failed

__all__ = [
    "GitHubTool",
    "ChangelogGenerator",
    "GitHubChangelogGenerator",
    "extract_pull_numbers",
    "SlackAnnouncer",
    "SlackClient",
    "SlackOptions",
    "format_release_body",
    "ActionEvent",
    "set_outputs",
    "set_failed",
]
