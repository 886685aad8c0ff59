# cli.py
"""
Command-line interface layer.
Parses the arguments, assembles the RunContext and hands over to the orchestrator.
"""
import argparse
import logging
import os
from typing import List, Optional

import utils
from config import GlobalConfig
from context import RunContext
from orchestrator import GitWiseOrchestrator, run_setup

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def setup_parser(global_config: GlobalConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitwise",
        description="GitWise - AI-assisted insights for your git repositories",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", help="Enable debug logging"
    )

    # Options shared by every repository command
    repo_options = argparse.ArgumentParser(add_help=False)
    repo_options.add_argument(
        "--path",
        type=str,
        default=".",
        help="Repository path or remote URL (https://github.com/owner/repo).\n(default: .)",
    )
    repo_options.add_argument(
        "--llm",
        type=str,
        default=None,
        help="LLM provider to use (e.g. 'gemini', 'deepseek', 'mock').\n"
        f"(default: {global_config.DEFAULT_LLM})",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True

    analyze = subparsers.add_parser(
        "analyze",
        parents=[repo_options],
        help="Analyze the commit history of a repository",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    analyze.add_argument(
        "--days",
        type=positive_int,
        default=global_config.DEFAULT_DAYS,
        help=f"Number of days of history to analyze (default: {global_config.DEFAULT_DAYS})",
    )
    analyze.add_argument(
        "--compact", action="store_true", help="Short analysis without the activity chart"
    )
    analyze.add_argument(
        "--interactive",
        action="store_true",
        help="Ask follow-up questions about the repository",
    )
    analyze.add_argument(
        "--html", type=str, default=None, metavar="FILE", help="Also write an HTML report"
    )

    commit_help = subparsers.add_parser(
        "commit-help",
        parents=[repo_options],
        help="Improve a draft commit message using the staged changes",
    )
    commit_help.add_argument("message", type=str, help="Your draft commit message")

    pr_description = subparsers.add_parser(
        "pr-description",
        parents=[repo_options],
        help="Generate a pull request description for the current branch",
    )
    pr_description.add_argument(
        "--base",
        type=str,
        default=global_config.DEFAULT_BASE_BRANCH,
        help=f"Base branch to compare against (default: {global_config.DEFAULT_BASE_BRANCH})",
    )

    release_notes = subparsers.add_parser(
        "release-notes",
        parents=[repo_options],
        help="Generate release notes from the commits between two references",
    )
    release_notes.add_argument(
        "--from",
        dest="from_ref",
        type=str,
        default=global_config.DEFAULT_FROM_REF,
        help=f"Start reference (default: {global_config.DEFAULT_FROM_REF})",
    )
    release_notes.add_argument(
        "--to",
        dest="to_ref",
        type=str,
        default=global_config.DEFAULT_TO_REF,
        help=f"End reference (default: {global_config.DEFAULT_TO_REF})",
    )
    release_notes.add_argument(
        "--count",
        type=positive_int,
        default=global_config.DEFAULT_RELEASE_COUNT,
        help=f"Maximum number of commits to include (default: {global_config.DEFAULT_RELEASE_COUNT})",
    )

    subparsers.add_parser("setup", help="Configure your API key and install gitwise")

    return parser


def build_context(args: argparse.Namespace, global_config: GlobalConfig) -> RunContext:
    # Remote URLs are kept as-is, local paths become absolute
    if args.path.lower().startswith(("http://", "https://", "git@")):
        repo_path = args.path
        logger.info(f"ℹ️ Remote repository URL: {repo_path}")
    else:
        repo_path = os.path.abspath(args.path)
        logger.debug(f"ℹ️ Repository path: {repo_path}")

    llm_id = (args.llm or global_config.DEFAULT_LLM).lower()
    return RunContext(repo_path=repo_path, llm_id=llm_id, global_config=global_config)


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Parse the arguments, run the command and return its exit code."""
    global_config = GlobalConfig()
    parser = setup_parser(global_config)
    args = parser.parse_args(argv)

    utils.setup_logging(debug=args.debug)

    if args.command == "setup":
        return run_setup(global_config)

    run_context = build_context(args, global_config)
    logger.debug(f"🚀 Running '{args.command}' on {run_context.repo_path} (LLM: {run_context.llm_id})")
    orchestrator = GitWiseOrchestrator(run_context)

    if args.command == "analyze":
        return orchestrator.analyze(
            days=args.days,
            compact=args.compact,
            interactive=args.interactive,
            html_path=args.html,
        )
    if args.command == "commit-help":
        return orchestrator.commit_help(args.message)
    if args.command == "pr-description":
        return orchestrator.pr_description(args.base)
    if args.command == "release-notes":
        return orchestrator.release_notes(args.from_ref, args.to_ref, args.count)

    parser.error(f"Unknown command: {args.command}")
    return 2
