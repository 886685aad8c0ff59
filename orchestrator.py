# orchestrator.py
"""
Command orchestrator.
- Pulls history from the DataSource picked for the run context
- Computes statistics and renders the terminal reports
- Delegates all generated text to AIService
- Fires the lifecycle hooks around every command
Every command method returns the process exit code.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence

import report_builder
import utils
from ai_service import AIService
from commit_stats import compute_statistics
from config import GlobalConfig
from context import RunContext
from data_sources.factory import get_data_source
from hooks.manager import PluginManager
from models import CommitRecord, CommitStatistics, RepoInfo

logger = logging.getLogger(__name__)

EXIT_WORDS = ("exit", "quit")
RECENT_COMMITS_FOR_QUESTIONS = 5


class GitWiseOrchestrator:
    """
    Runs the repository commands for one RunContext.
    The AI service is created lazily so commands that stop early
    (invalid repository, nothing to analyze) never need an API key.
    """

    def __init__(
        self,
        context: RunContext,
        ai_service: Optional[AIService] = None,
        plugin_manager: Optional[PluginManager] = None,
    ):
        self.context = context
        self.global_config = context.global_config
        self.data_source = get_data_source(context)

        if plugin_manager is None:
            plugin_manager = PluginManager(context)
            plugin_manager.load_plugins()
        self.plugin_manager = plugin_manager

        self._ai_service = ai_service

    # --- Helpers ---

    def _get_ai_service(self) -> Optional[AIService]:
        if self._ai_service is None:
            try:
                self._ai_service = AIService(self.context, self.plugin_manager)
            except ValueError as e:
                logger.error(f"❌ AI service unavailable: {e}")
                logger.error("   Run `gitwise setup` to configure your API key.")
                return None
        return self._ai_service

    def _run(self, command: str, handler, *args) -> int:
        self.plugin_manager.trigger("on_start", command)
        exit_code = handler(*args)
        self.plugin_manager.trigger("on_finish", command, exit_code)
        return exit_code

    @staticmethod
    def _print_elapsed(started: float):
        print()
        print(f"⏱️  Completed in {utils.format_duration(time.monotonic() - started)}")

    def _fetch_history_and_metadata(self, days: int):
        """Fetch commits and repository metadata concurrently; both must succeed."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            history_future = executor.submit(self.data_source.fetch_history, days)
            metadata_future = executor.submit(self.data_source.repo_metadata)
            return history_future.result(), metadata_future.result()

    @staticmethod
    def _build_repo_context(
        repo_info: RepoInfo, commits: Sequence[CommitRecord], stats: CommitStatistics
    ) -> Dict[str, Any]:
        return {
            "repoName": repo_info.name,
            "totalCommits": len(commits),
            "statistics": stats.to_dict(),
            "recentCommits": [
                {
                    "hash": commit.short_hash,
                    "date": commit.timestamp.isoformat(),
                    "message": commit.message,
                    "author": commit.author_name,
                }
                for commit in commits[:RECENT_COMMITS_FOR_QUESTIONS]
            ],
        }

    # --- analyze ---

    def analyze(
        self,
        days: int,
        compact: bool = False,
        interactive: bool = False,
        html_path: Optional[str] = None,
    ) -> int:
        return self._run("analyze", self._analyze, days, compact, interactive, html_path)

    def _analyze(
        self, days: int, compact: bool, interactive: bool, html_path: Optional[str]
    ) -> int:
        started = time.monotonic()
        print(report_builder.header_banner("GitWise - Repository Analysis"))

        if not self.data_source.validate():
            return 1

        logger.info(f"🔍 Fetching commits from the last {days} days...")
        commits, repo_info = self._fetch_history_and_metadata(days)

        if not commits:
            print(f"No commits found in the last {days} days.")
            return 0

        self.plugin_manager.trigger("on_commits_fetched", commits)
        print(f"Found {len(commits)} commits in {repo_info.name}.")

        stats = compute_statistics(commits)
        if not compact:
            print()
            print(report_builder.render_activity_chart(stats))
            print()

        ai_service = self._get_ai_service()
        if ai_service is None:
            return 1

        logger.info("🧠 Generating the AI analysis...")
        analysis = ai_service.analyze_commit_history(commits, stats, repo_info.name, compact)
        if analysis is None:
            logger.error("❌ Failed to generate the analysis.")
            return 1

        print(analysis)
        print()
        print(f"⏱️  Analysis completed in {utils.format_duration(time.monotonic() - started)}")

        if html_path:
            html_content = report_builder.generate_html_report(
                repo_info, stats, analysis, self.global_config, days=days
            )
            report_builder.save_html_report(html_content, html_path)

        if interactive:
            self._interactive_session(
                ai_service, self._build_repo_context(repo_info, commits, stats)
            )
        else:
            print("💡 Tip: run with --interactive to ask questions about this repository.")
        return 0

    def _interactive_session(self, ai_service: AIService, repo_context: Dict[str, Any]):
        print()
        print("💬 Ask anything about this repository (type 'exit' or 'quit' to leave).")
        while True:
            try:
                question = utils.ask_question("❓")
            except EOFError:
                break
            if question.lower() in EXIT_WORDS:
                break
            if not question:
                continue
            answer = ai_service.answer_repo_question(question, repo_context)
            if answer is None:
                print("⚠️  Could not answer that question, please try again.")
            else:
                print(answer)
            print()
        print("👋 Bye!")

    # --- commit-help ---

    def commit_help(self, message: str) -> int:
        return self._run("commit-help", self._commit_help, message)

    def _commit_help(self, message: str) -> int:
        started = time.monotonic()
        print(report_builder.header_banner("GitWise - Commit Message Helper"))
        print(f"Draft message: {message}")

        diff = self.data_source.get_staged_diff()
        if not diff:
            logger.warning("⚠️ No staged changes found; improving the message with limited context.")
        else:
            print(f"Found {len(diff.splitlines())} lines of staged changes.")

        ai_service = self._get_ai_service()
        if ai_service is None:
            return 1

        improved = ai_service.improve_commit_message(message, diff)
        if improved is None:
            logger.error("❌ Failed to improve the commit message.")
            return 1

        print()
        print("✨ Suggested commit message:")
        print(report_builder.boxed(improved))
        print()
        print("To use it, run:")
        print(f"  {report_builder.commit_command(improved)}")
        self._print_elapsed(started)
        return 0

    # --- pr-description ---

    def pr_description(self, base: str) -> int:
        return self._run("pr-description", self._pr_description, base)

    def _pr_description(self, base: str) -> int:
        started = time.monotonic()
        print(report_builder.header_banner("GitWise - Pull Request Description"))

        if not self.data_source.validate():
            return 1

        current_branch = self.data_source.get_current_branch()
        print(f"Comparing {current_branch} against {base}")

        diff = self.data_source.get_branch_diff(base)
        if not diff:
            print(f"No differences found between {current_branch} and {base}.")
            return 0

        modified_files = self.data_source.get_modified_files(base)
        print(f"Modified files: {len(modified_files)}")

        ai_service = self._get_ai_service()
        if ai_service is None:
            return 1

        description = ai_service.generate_pr_description(diff, current_branch, base)
        if description is None:
            logger.error("❌ Failed to generate the PR description.")
            return 1

        print()
        print(description)
        self._print_elapsed(started)
        return 0

    # --- release-notes ---

    def release_notes(self, from_ref: str, to_ref: str, count: int) -> int:
        return self._run("release-notes", self._release_notes, from_ref, to_ref, count)

    def _release_notes(self, from_ref: str, to_ref: str, count: int) -> int:
        started = time.monotonic()
        print(report_builder.header_banner("GitWise - Release Notes"))

        if not self.data_source.validate():
            return 1

        commits: List[CommitRecord] = self.data_source.fetch_between(from_ref, to_ref)
        if not commits:
            print(f"No commits found between {from_ref} and {to_ref}.")
            return 0

        commits = commits[:count]
        self.plugin_manager.trigger("on_commits_fetched", commits)
        print(f"Generating release notes from {len(commits)} commits...")

        ai_service = self._get_ai_service()
        if ai_service is None:
            return 1

        notes = ai_service.generate_release_notes(commits)
        if notes is None:
            logger.error("❌ Failed to generate the release notes.")
            return 1

        print()
        print(notes)
        self._print_elapsed(started)
        return 0


# --- setup ---


def run_setup(global_config: GlobalConfig, ask=utils.ask_question) -> int:
    """Interactive first-run setup: API key, optional GitHub token, global install."""
    print(report_builder.header_banner("GitWise - Setup"))
    env_path = global_config.ENV_FILE
    utils.ensure_env_file(env_path)

    api_key = ask("Enter your Gemini API key:")
    if api_key:
        utils.set_env_value(env_path, "GEMINI_API_KEY", api_key)
        logger.info("✅ API key saved.")
    else:
        logger.warning("⚠️ No API key entered; AI commands will not work until one is set.")

    if utils.is_yes(ask("Add a GitHub token for remote repositories? (y/N)")):
        token = ask("Enter your GitHub token:")
        if token:
            utils.set_env_value(env_path, "GITHUB_TOKEN", token)
            logger.info("✅ GitHub token saved.")

    if utils.is_yes(ask("Install gitwise globally so it runs from any directory? (y/N)")):
        try:
            utils.link_globally(global_config.SCRIPT_BASE_PATH)
        except (RuntimeError, OSError) as e:
            logger.error(f"❌ Global install failed: {e}")
            return 1
        logger.info("✅ gitwise is now available as a command.")

    print("Setup complete. Try: gitwise analyze")
    return 0
