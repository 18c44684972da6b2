"""Gitflow release automation for GitHub Actions."""

__version__ = "1.0.0"
