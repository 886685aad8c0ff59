# test_github_api.py
import unittest
from datetime import datetime, timedelta, timezone
from unittest import mock

from github import GithubException

from config import GlobalConfig
from context import RunContext
from data_sources.github_api import GitHubAPIDataSource


def gh_commit(sha, message, date=None, name="Dev", email="dev@example.com"):
    commit = mock.MagicMock()
    commit.sha = sha
    commit.commit.message = message
    commit.commit.author.date = date or datetime(2024, 1, 3, 9, 0)
    commit.commit.author.name = name
    commit.commit.author.email = email
    return commit


def not_found():
    return GithubException(404, {"message": "Not Found"}, None)


class GitHubSourceTestCase(unittest.TestCase):
    def setUp(self):
        config = GlobalConfig()
        config.GITHUB_TOKEN = ""
        context = RunContext("https://github.com/octo/gitwise", "mock", config)
        with mock.patch("data_sources.github_api.logger"):
            self.source = GitHubAPIDataSource(context)
        self.repo = mock.MagicMock()
        self.repo.default_branch = "main"
        self.source.repo = self.repo
        self.recent = [gh_commit(f"sha{i}", f"recent {i}") for i in range(12)]
        self.repo.get_commits.return_value = self.recent

    def refs(self, *valid):
        def get_commit(ref):
            if ref not in valid:
                raise not_found()
            return mock.MagicMock()

        self.repo.get_commit.side_effect = get_commit


class TestRecords(GitHubSourceTestCase):
    def test_naive_dates_become_utc_and_only_subject_is_kept(self):
        record = self.source._to_record(gh_commit("abc", "feat: login\n\nLong body"))

        self.assertEqual(record.timestamp, datetime(2024, 1, 3, 9, 0, tzinfo=timezone.utc))
        self.assertEqual(record.message, "feat: login")
        self.assertEqual(record.hash, "abc")

    def test_aware_dates_keep_their_offset(self):
        plus_two = timezone(timedelta(hours=2))
        record = self.source._to_record(
            gh_commit("abc", "x", date=datetime(2024, 1, 3, 9, 0, tzinfo=plus_two))
        )
        self.assertEqual(record.timestamp.utcoffset(), timedelta(hours=2))

    def test_missing_author_fields(self):
        record = self.source._to_record(gh_commit("abc", "x", name=None, email=None))
        self.assertEqual((record.author_name, record.author_email), ("", ""))


class TestFetchHistory(GitHubSourceTestCase):
    def test_capped_at_remote_limit(self):
        self.source.global_config.REMOTE_COMMIT_LIMIT = 5

        commits = self.source.fetch_history(30)

        self.assertEqual([c.hash for c in commits], [f"sha{i}" for i in range(5)])
        since = self.repo.get_commits.call_args.kwargs["since"]
        self.assertAlmostEqual(
            since.timestamp(),
            (datetime.now(timezone.utc) - timedelta(days=30)).timestamp(),
            delta=60,
        )

    def test_requires_validate_first(self):
        self.source.repo = None
        with self.assertRaises(RuntimeError):
            self.source.fetch_history(30)


class TestFetchBetween(GitHubSourceTestCase):
    def test_invalid_to_ref_uses_latest_commit(self):
        self.refs("v1")
        commits = self.source.fetch_between("v1", "nope")
        self.assertEqual([c.hash for c in commits], ["sha0"])

    def test_invalid_from_ref_uses_fallback_count(self):
        self.refs("HEAD")
        commits = self.source.fetch_between("v0", "HEAD", fallback_count=3)
        self.assertEqual(len(commits), 3)
        self.repo.compare.assert_not_called()

    def test_compare_failure_uses_error_fallback(self):
        self.refs("v1", "v2")
        self.repo.compare.side_effect = GithubException(500, {"message": "boom"}, None)

        commits = self.source.fetch_between("v1", "v2")

        self.assertEqual(len(commits), self.source.global_config.ERROR_FALLBACK_COUNT)

    def test_compare_is_returned_newest_first(self):
        self.refs("v1", "v2")
        self.repo.compare.return_value.commits = [
            gh_commit("old", "first"),
            gh_commit("new", "second"),
        ]

        commits = self.source.fetch_between("v1", "v2")

        self.assertEqual([c.hash for c in commits], ["new", "old"])
        self.repo.compare.assert_called_once_with("v1", "v2")


class TestMetadataAndDiffs(GitHubSourceTestCase):
    def test_repo_metadata(self):
        self.repo.name = "gitwise"
        self.repo.html_url = "https://github.com/octo/gitwise"
        self.repo.get_branches.return_value.totalCount = 4

        info = self.source.repo_metadata()

        self.assertEqual((info.name, info.branch_count, info.path), ("gitwise", 4, "https://github.com/octo/gitwise"))
        self.assertEqual(self.source.get_current_branch(), "main")

    def test_staged_diff_is_unavailable(self):
        self.assertEqual(self.source.get_staged_diff(), "")

    def test_branch_diff_and_files(self):
        changed = mock.MagicMock(filename="app.py", patch="@@ -1 +1 @@\n-a\n+b")
        binary = mock.MagicMock(filename="logo.png", patch=None)
        self.repo.compare.return_value.files = [changed, binary]

        diff = self.source.get_branch_diff("develop")

        self.assertIn("diff --git a/app.py b/app.py", diff)
        self.assertIn("+b", diff)
        self.assertIn("(Binary file or too large)", diff)
        self.assertEqual(self.source.get_modified_files("develop"), ["app.py", "logo.png"])
        self.repo.compare.assert_called_with("develop", "main")

    def test_compare_failure_gives_empty_diff(self):
        self.repo.compare.side_effect = not_found()
        self.assertEqual(self.source.get_branch_diff("develop"), "")
        self.assertEqual(self.source.get_modified_files("develop"), [])


if __name__ == "__main__":
    unittest.main()
