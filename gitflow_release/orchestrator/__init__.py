"""Gitflow release workflows.

This module provides:
- ReleasePROrchestrator: Opens release pull requests from develop
- ReleaseFinalizer: Creates releases when those pull requests merge
- BranchMerger: Merges release branches back into develop
- classify / resolve_version: Pure helpers for both workflows
"""

from .classifier import classify, classify_refs, release_version, hotfix_version
from .version import resolve_version
from .merge import BranchMerger
from .release_pr import ReleasePROrchestrator, compose_release_body
from .finalizer import ReleaseFinalizer

__all__ = [
    "classify",
    "classify_refs",
    "release_version",
    "hotfix_version",
    "resolve_version",
    "BranchMerger",
    "ReleasePROrchestrator",
    "compose_release_body",
    "ReleaseFinalizer",
]
