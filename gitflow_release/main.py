#!/usr/bin/env python3
"""
Gitflow Release Action - Main Entry Point

Routes the triggering GitHub Actions event to a workflow:
- workflow_dispatch: open a release pull request from develop
- pull_request closed: create the release and merge back to develop

Usage:
    python -m gitflow_release.main run
    python -m gitflow_release.main release-pr --dry-run
    python -m gitflow_release.main finalize --pr-number 123
"""

import argparse
import asyncio
import sys
from dataclasses import replace
from typing import Optional

from .config import GitflowConfig
from .models import Result
from .orchestrator import ReleaseFinalizer, ReleasePROrchestrator
from .tools import ActionEvent, GitHubChangelogGenerator, GitHubTool, set_failed, set_outputs
from .utils import setup_logging, get_logger


def build_release_pr_orchestrator(config: GitflowConfig) -> ReleasePROrchestrator:
    github = GitHubTool.connect(config.repo, config.github_token)
    return ReleasePROrchestrator(
        config=config,
        github=github,
        changelog=GitHubChangelogGenerator(github.repo),
    )


def build_finalizer(config: GitflowConfig) -> ReleaseFinalizer:
    github = GitHubTool.connect(config.repo, config.github_token)
    return ReleaseFinalizer(config=config, github=github)


async def dispatch(config: GitflowConfig, event: ActionEvent) -> Optional[Result]:
    """
    Run the workflow matching the triggering event.

    Args:
        config: Action configuration
        event: Triggering event

    Returns:
        The workflow result, or None when the event is not handled
    """
    logger = get_logger()

    if event.is_pull_request_closed:
        logger.info("gitflow-release: Pull request closed. Running executeOnRelease...")
        return await build_finalizer(config).execute_on_release(event.pull_request)

    if event.is_dispatch:
        logger.info("gitflow-release: Workflow dispatched. Running createReleasePR...")
        return await build_release_pr_orchestrator(config).create_release_pr()

    logger.info("gitflow-release: does not match any conditions to run. Skipping...")
    return None


def _execute(args, run) -> None:
    setup_logging(debug=args.debug)
    logger = get_logger()

    try:
        config = GitflowConfig.from_env()
        if getattr(args, "dry_run", False):
            config = replace(config, dry_run=True)
        logger.info(f"gitflow-release: running with config {_describe(config)}")

        result = asyncio.run(run(config))
        if result is not None:
            set_outputs(result.to_outputs())
            for warning in result.warnings:
                logger.warning(warning)
        sys.exit(0)
    except Exception as e:
        logger.exception(f"gitflow-release failed: {e}")
        set_failed(str(e))
        sys.exit(1)


def _describe(config: GitflowConfig) -> dict:
    """Config as a loggable dict, without secrets."""
    return {
        "repo": config.repo,
        "develop_branch": config.develop_branch,
        "main_branch": config.main_branch,
        "merge_back_from_main": config.merge_back_from_main,
        "version": config.version,
        "version_increment": config.version_increment,
        "dry_run": config.dry_run,
        "slack": bool(config.slack),
    }


def cmd_run(args):
    """Handle 'run' subcommand."""
    async def run(config):
        return await dispatch(config, ActionEvent.from_env())

    _execute(args, run)


def cmd_release_pr(args):
    """Handle 'release-pr' subcommand."""
    async def run(config):
        return await build_release_pr_orchestrator(config).create_release_pr()

    _execute(args, run)


def cmd_finalize(args):
    """Handle 'finalize' subcommand."""
    async def run(config):
        github = GitHubTool.connect(config.repo, config.github_token)
        pr = github.get_pull(args.pr_number)
        finalizer = ReleaseFinalizer(config=config, github=github)
        return await finalizer.execute_on_release({"number": pr.number, "merged": pr.merged})

    _execute(args, run)


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Gitflow release automation for GitHub Actions"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run the workflow matching GITHUB_EVENT_NAME (default)"
    )
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    # release-pr command
    release_parser = subparsers.add_parser(
        "release-pr",
        help="Open a release pull request from the develop branch"
    )
    release_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute version and notes without creating anything"
    )
    release_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    # finalize command
    finalize_parser = subparsers.add_parser(
        "finalize",
        help="Create the release for a merged release or hotfix pull request"
    )
    finalize_parser.add_argument(
        "--pr-number",
        type=int,
        required=True,
        help="Pull request number"
    )
    finalize_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    # Route to subcommand
    if args.command == "release-pr":
        cmd_release_pr(args)
    elif args.command == "finalize":
        cmd_finalize(args)
    else:
        if args.command is None:
            args.debug = False
        cmd_run(args)


if __name__ == "__main__":
    main()
