# test_git_utils.py
import io
import os
import shutil
import subprocess
import tempfile
import unittest
from contextlib import redirect_stdout
from datetime import datetime, timedelta, timezone
from unittest import mock

import git_utils
from ai_service import AIService
from config import GlobalConfig
from context import RunContext
from data_sources.factory import get_data_source
from data_sources.github_api import GitHubAPIDataSource, parse_repo_full_name
from data_sources.local_git import LocalGitDataSource
from hooks.manager import PluginManager
from llm.mock_provider import MockProvider
from orchestrator import GitWiseOrchestrator

SEP = "\x1f"


def log_line(commit_hash="abc123", date="2024-01-03T09:15:00+02:00", message="feat: x"):
    return SEP.join([commit_hash, date, message, "Dev", "dev@example.com"])


def make_context(repo_path="."):
    return RunContext(repo_path=repo_path, llm_id="mock", global_config=GlobalConfig())


class TestCommitParsing(unittest.TestCase):
    def test_parse_line(self):
        commit = git_utils.parse_commit_line(log_line(message="fix: a | b"))

        self.assertEqual(commit.hash, "abc123")
        self.assertEqual(commit.message, "fix: a | b")
        self.assertEqual(commit.timestamp.utcoffset(), timedelta(hours=2))
        self.assertEqual(commit.timestamp.hour, 9)

    def test_malformed_lines_are_skipped(self):
        output = "\n".join([log_line("one"), "garbage without separators", "", log_line("two")])
        commits = git_utils.parse_commit_log(output)

        self.assertEqual([c.hash for c in commits], ["one", "two"])

    def test_bad_timestamp_raises(self):
        with self.assertRaises(ValueError):
            git_utils.parse_commit_line(log_line(date="not-a-date"))

    def test_empty_output(self):
        self.assertEqual(git_utils.parse_commit_log(None), [])
        self.assertEqual(git_utils.parse_commit_log("  \n"), [])

    def test_parse_repo_name(self):
        self.assertEqual(git_utils.parse_repo_name("https://github.com/octo/gitwise.git"), "gitwise")
        self.assertEqual(git_utils.parse_repo_name("git@github.com:octo/gitwise.git\n"), "gitwise")
        self.assertEqual(git_utils.parse_repo_name("https://github.com/octo/tool"), "tool")

    def test_parse_repo_full_name(self):
        self.assertEqual(parse_repo_full_name("https://github.com/octo/gitwise.git"), "octo/gitwise")
        self.assertEqual(parse_repo_full_name("git@github.com:octo/gitwise.git"), "octo/gitwise")


class TestCommitsBetweenFallbacks(unittest.TestCase):
    def setUp(self):
        self.context = make_context()
        recent = mock.patch.object(
            git_utils, "get_recent_commits", side_effect=lambda ctx, count: ["recent"] * count
        )
        self.recent = recent.start()
        self.addCleanup(recent.stop)

    def _validity(self, valid_refs):
        return mock.patch.object(
            git_utils, "validate_reference", side_effect=lambda ctx, ref: ref in valid_refs
        )

    def test_invalid_to_ref_uses_latest_commit(self):
        with self._validity({"HEAD~10"}):
            result = git_utils.get_commits_between(self.context, "HEAD~10", "nope")
        self.assertEqual(len(result), 1)

    def test_invalid_from_ref_uses_fallback_count(self):
        with self._validity({"HEAD"}):
            result = git_utils.get_commits_between(self.context, "v0.0.0", "HEAD", fallback_count=4)
        self.assertEqual(len(result), 4)

    def test_log_failure_uses_five_recent(self):
        with self._validity({"v1", "v2"}), mock.patch.object(
            git_utils, "run_git_command", return_value=None
        ):
            result = git_utils.get_commits_between(self.context, "v1", "v2")
        self.assertEqual(len(result), 5)

    def test_valid_range_is_parsed(self):
        output = "\n".join([log_line("new"), log_line("old")])
        with self._validity({"v1", "v2"}), mock.patch.object(
            git_utils, "run_git_command", return_value=output
        ) as run:
            result = git_utils.get_commits_between(self.context, "v1", "v2")

        self.assertEqual([c.hash for c in result], ["new", "old"])
        self.assertIn("v1..v2", run.call_args[0][0])
        self.recent.assert_not_called()


class TestHistoryFailures(unittest.TestCase):
    def setUp(self):
        self.context = make_context()
        self.calls = []

    def _git(self, responses):
        def fake_run(args, repo_path, label="", **kwargs):
            self.calls.append(args[0])
            return responses.get(args[0])

        return mock.patch.object(git_utils, "run_git_command", side_effect=fake_run)

    def test_unborn_head_is_an_empty_history(self):
        with self._git({"rev-parse": None}):
            self.assertEqual(git_utils.get_commit_history(self.context, 30), [])
        self.assertNotIn("log", self.calls)

    def test_log_failure_raises(self):
        with self._git({"rev-parse": "abc123\n", "log": None}):
            with self.assertRaises(RuntimeError):
                git_utils.get_commit_history(self.context, 30)

    def test_branch_listing_failure_raises(self):
        with self._git({"remote": None, "branch": None}):
            with self.assertRaises(RuntimeError):
                git_utils.get_repo_info(self.context)


class TestDataSourceFactory(unittest.TestCase):
    def test_local_path(self):
        self.assertIsInstance(get_data_source(make_context("/tmp")), LocalGitDataSource)

    def test_remote_url(self):
        source = get_data_source(make_context("https://github.com/octo/gitwise"))
        self.assertIsInstance(source, GitHubAPIDataSource)


@unittest.skipIf(shutil.which("git") is None, "git is not installed")
class TestLocalRepository(unittest.TestCase):
    def setUp(self):
        self.repo = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.repo, True)
        self._git("init", "-q")
        self._git("symbolic-ref", "HEAD", "refs/heads/main")
        self._git("config", "user.name", "Dev")
        self._git("config", "user.email", "dev@example.com")
        self._git("config", "commit.gpgsign", "false")

        now = datetime.now(timezone.utc).replace(microsecond=0)
        for index, message in enumerate(["feat: first", "fix: second", "docs: third"]):
            with open(os.path.join(self.repo, "file.txt"), "a", encoding="utf-8") as f:
                f.write(f"{message}\n")
            self._git("add", "file.txt")
            date = (now - timedelta(days=3 - index)).isoformat()
            self._git("commit", "-q", "-m", message, env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date})

        self.source = LocalGitDataSource(make_context(self.repo))

    def _git(self, *args, env=None):
        full_env = dict(os.environ)
        full_env.update(env or {})
        subprocess.run(["git", *args], cwd=self.repo, check=True, env=full_env, capture_output=True)

    def test_validate(self):
        self.assertTrue(self.source.validate())
        not_repo = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, not_repo, True)
        self.assertFalse(LocalGitDataSource(make_context(not_repo)).validate())

    def test_fetch_history_newest_first(self):
        commits = self.source.fetch_history(30)
        self.assertEqual([c.message for c in commits], ["docs: third", "fix: second", "feat: first"])

    def test_fetch_between(self):
        commits = self.source.fetch_between("HEAD~2", "HEAD")
        self.assertEqual([c.message for c in commits], ["docs: third", "fix: second"])

    def test_fetch_between_unknown_from_ref(self):
        commits = self.source.fetch_between("HEAD~10", "HEAD", fallback_count=2)
        self.assertEqual(len(commits), 2)

    def test_repo_metadata_and_branches(self):
        info = self.source.repo_metadata()
        self.assertEqual(info.name, os.path.basename(self.repo))
        self.assertEqual(info.branch_count, 1)
        self.assertEqual(self.source.get_current_branch(), "main")

    def test_staged_diff_and_branch_diff(self):
        self.assertEqual(self.source.get_staged_diff(), "")
        self._git("checkout", "-q", "-b", "feature")
        with open(os.path.join(self.repo, "new.txt"), "w", encoding="utf-8") as f:
            f.write("hello\n")
        self._git("add", "new.txt")
        self.assertIn("new.txt", self.source.get_staged_diff())
        self._git("commit", "-q", "-m", "feat: new file")

        self.assertIn("+hello", self.source.get_branch_diff("main"))
        self.assertEqual(self.source.get_modified_files("main"), ["new.txt"])

    def test_git_log_timeout_fails_analyze(self):
        context = make_context(self.repo)
        orchestrator = GitWiseOrchestrator(
            context,
            ai_service=AIService(context, provider=MockProvider(context.global_config.llm_settings("mock"))),
            plugin_manager=PluginManager(context),
        )
        real_run = subprocess.run

        def run_with_log_timeout(cmd, *args, **kwargs):
            if cmd[:2] == ["git", "log"]:
                raise subprocess.TimeoutExpired(cmd, 30)
            return real_run(cmd, *args, **kwargs)

        with mock.patch("git_utils.subprocess.run", side_effect=run_with_log_timeout), redirect_stdout(
            io.StringIO()
        ):
            with self.assertRaises(RuntimeError):
                orchestrator.analyze(30)


@unittest.skipIf(shutil.which("git") is None, "git is not installed")
class TestEmptyRepository(unittest.TestCase):
    def setUp(self):
        self.repo = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.repo, True)
        subprocess.run(["git", "init", "-q"], cwd=self.repo, check=True, capture_output=True)
        self.context = make_context(self.repo)

    def test_history_is_empty_and_quiet(self):
        with self.assertNoLogs("git_utils", level="ERROR"):
            commits = LocalGitDataSource(self.context).fetch_history(30)
        self.assertEqual(commits, [])

    def test_analyze_exits_0(self):
        orchestrator = GitWiseOrchestrator(
            self.context,
            ai_service=AIService(
                self.context, provider=MockProvider(self.context.global_config.llm_settings("mock"))
            ),
            plugin_manager=PluginManager(self.context),
        )
        out = io.StringIO()
        with redirect_stdout(out):
            code = orchestrator.analyze(30)
        self.assertEqual(code, 0)
        self.assertIn("No commits found in the last 30 days.", out.getvalue())


if __name__ == "__main__":
    unittest.main()
