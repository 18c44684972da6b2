"""Slack announcements for published releases."""

import json
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

import requests
from markdown_to_mrkdwn import SlackMarkdownConverter

from ..errors import ConfigParseError, CredentialMissingError, SlackApiError
from ..models import ReleaseInfo
from ..utils import get_logger

SLACK_API_BASE_URL = "https://slack.com/api"

# GitHub's app avatar
SLACK_ICON_URL = "https://avatars.githubusercontent.com/in/15368?s=88&v=4"

_HTML_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_STAR_BULLET_RE = re.compile(r"^(\s*)[*+]\s+", re.MULTILINE)
# After conversion bullets may be rendered as "•"
_CHANGELOG_ENTRY_RE = re.compile(r"^(\s*)[-•]\s+(.*) by (.*) in (.*)$", re.MULTILINE)


@dataclass
class SlackOptions:
    """Parsed value of the ``slack`` input."""
    channel: str
    username_mapping: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, raw: str) -> "SlackOptions":
        """
        Parse the JSON ``slack`` input.

        Raises:
            ConfigParseError: If the input is not a JSON object with a channel
        """
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise ConfigParseError(f"integration(slack): Could not parse {raw}") from e

        if not isinstance(data, dict) or not data.get("channel"):
            raise ConfigParseError(f"integration(slack): Could not parse {raw}")

        mapping = data.get("username_mapping") or {}
        if not isinstance(mapping, dict):
            raise ConfigParseError("integration(slack): username_mapping must be an object")

        return cls(
            channel=str(data["channel"]),
            username_mapping={str(k): str(v) for k, v in mapping.items()},
        )


class SlackClient:
    """Minimal Slack Web API client."""

    def __init__(self, token: str, timeout: float = 10):
        self.token = token
        self.timeout = timeout

    def api_post(self, method: str, payload: Dict[str, object]) -> Dict[str, object]:
        url = f"{SLACK_API_BASE_URL}/{method}"
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json; charset=utf-8",
        }
        try:
            response = requests.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise SlackApiError(f"{method} request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = None
        if not response.ok or not isinstance(data, dict) or not data.get("ok"):
            error = f"HTTP {response.status_code}"
            if isinstance(data, dict):
                error = str(data.get("error") or error)
            raise SlackApiError(f"{method} failed: {error}")
        return data


def format_release_body(body: str, username_mapping: Optional[Dict[str, str]] = None) -> str:
    """
    Turn release notes into a Slack message body.

    - Strip HTML comments left over from pull request templates
    - Convert markdown to mrkdwn
    - Rewrite ``- <title> by <author> in <link>`` as ``- <link|title> by <author>``
    - Mention mapped GitHub users by Slack user id
    """
    text = _HTML_COMMENT_RE.sub("", body)
    # GitHub's generated notes use "*" bullets; the converter expects "-"
    text = _STAR_BULLET_RE.sub(r"\1- ", text)
    text = SlackMarkdownConverter().convert(text)
    text = _CHANGELOG_ENTRY_RE.sub(r"\1- <\4|\2> by \3", text)

    for username, user_id in (username_mapping or {}).items():
        text = re.sub(
            rf"@{re.escape(username)}(?![A-Za-z0-9-])",
            lambda m, user_id=user_id: f"<@{user_id}>",
            text,
        )
    return text


class SlackAnnouncer:
    """
    Posts published releases to a Slack channel.

    Requires SLACK_TOKEN; the channel and the GitHub-to-Slack username
    mapping come from the ``slack`` input.
    """

    def __init__(self, repo: str, token: Optional[str], client: Optional[SlackClient] = None):
        """
        Args:
            repo: Repository in format "owner/repo", shown in the message
            token: Slack bot token
            client: Pre-built client (defaults to one using token)
        """
        self.repo = repo
        self.token = token
        self.client = client
        self.logger = get_logger()

    def build_message(self, release: ReleaseInfo, options: SlackOptions) -> str:
        body = format_release_body(release.body or "", options.username_mapping)
        return (
            f"<{release.html_url}|Release {release.name or release.tag_name}> "
            f"to `{self.repo}`\n\n{body}"
        )

    def _client(self) -> SlackClient:
        if self.client is not None:
            return self.client
        if not self.token:
            raise CredentialMissingError("SLACK_TOKEN is not defined")
        return SlackClient(self.token)

    def check(self, slack_input: str) -> SlackOptions:
        """
        Validate the ``slack`` input and credentials without posting.

        Raises:
            ConfigParseError: If slack_input is not valid
            CredentialMissingError: If no Slack token is configured
        """
        options = SlackOptions.parse(slack_input)
        self._client()
        return options

    async def announce(self, slack_input: str, release: ReleaseInfo) -> None:
        """
        Announce a release.

        Args:
            slack_input: JSON ``{"channel": ..., "username_mapping": {...}}``
            release: The release that was just created

        Raises:
            ConfigParseError: If slack_input is not valid
            CredentialMissingError: If no Slack token is configured
            SlackApiError: If Slack rejects the message
        """
        options = SlackOptions.parse(slack_input)
        client = self._client()
        self.logger.info(f"integration(slack): Posting to slack channel #{options.channel}")

        client.api_post("chat.postMessage", {
            "channel": options.channel,
            "text": self.build_message(release, options),
            "icon_url": SLACK_ICON_URL,
            "mrkdwn": True,
        })
