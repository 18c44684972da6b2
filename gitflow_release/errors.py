"""Exceptions raised by the release workflows."""


class GitflowError(Exception):
    """Base class for errors raised by gitflow_release."""


class ConfigurationError(GitflowError):
    """Required configuration is missing or malformed."""


class CredentialMissingError(GitflowError):
    """A required API token is not present in the environment."""


class ConfigParseError(GitflowError):
    """A structured (JSON) input could not be parsed."""


class VersionComputationError(GitflowError):
    """A release version could not be derived from the latest tag."""


class SlackApiError(GitflowError):
    """Slack rejected a Web API call."""
