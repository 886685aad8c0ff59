# data_sources/github_api.py
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from urllib.parse import urlparse

from github import Auth, Github, GithubException
from github.Repository import Repository

from .base import DataSource
from models import CommitRecord, RepoInfo
from context import RunContext

logger = logging.getLogger(__name__)


def parse_repo_full_name(url: str) -> Optional[str]:
    """`https://github.com/owner/repo(.git)` or `git@github.com:owner/repo.git` -> `owner/repo`."""
    if url.startswith("git@"):
        if ":" not in url:
            return None
        path = url.split(":", 1)[1]
    else:
        path = urlparse(url).path
    path = path.strip("/")
    if path.endswith(".git"):
        path = path[:-4]
    return path if path.count("/") == 1 else None


class GitHubAPIDataSource(DataSource):
    """
    Remote history source backed by PyGithub.
    Reads a GitHub repository without a local clone.
    """

    def __init__(self, context: RunContext):
        self.context = context
        self.global_config = context.global_config
        self.repo: Optional[Repository] = None

        token = self.global_config.GITHUB_TOKEN
        if not token:
            logger.warning(
                "⚠️ GITHUB_TOKEN is not set; anonymous API calls are limited to 60 per hour. "
                "Run `gitwise setup` to add one."
            )
            self.client = Github()
        else:
            self.client = Github(auth=Auth.Token(token))

    def _require_repo(self) -> Repository:
        if self.repo is None:
            raise RuntimeError("GitHub data source used before validate()")
        return self.repo

    def _to_record(self, gh_commit) -> CommitRecord:
        author = gh_commit.commit.author
        timestamp = author.date
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return CommitRecord(
            hash=gh_commit.sha,
            timestamp=timestamp,
            message=gh_commit.commit.message.split("\n")[0],
            author_name=author.name or "",
            author_email=author.email or "",
        )

    def _recent(self, count: int) -> List[CommitRecord]:
        repo = self._require_repo()
        records = []
        for gh_commit in repo.get_commits():
            if len(records) >= count:
                break
            records.append(self._to_record(gh_commit))
        return records

    def _ref_exists(self, ref: str) -> bool:
        try:
            self._require_repo().get_commit(ref)
            return True
        except GithubException:
            return False

    def validate(self) -> bool:
        full_name = parse_repo_full_name(self.context.repo_path)
        if not full_name:
            logger.error(f"❌ Cannot parse a repository name from URL: {self.context.repo_path}")
            return False

        try:
            logger.info(f"🌐 Connecting to GitHub: {full_name} ...")
            self.repo = self.client.get_repo(full_name)
            logger.info(f"✅ Connected to {self.repo.full_name}")
            return True
        except GithubException as e:
            message = e.data.get("message", "") if isinstance(e.data, dict) else ""
            logger.error(f"❌ Cannot access GitHub repository: {e.status} {message}")
            return False

    def fetch_history(self, days: int) -> List[CommitRecord]:
        repo = self._require_repo()
        since = datetime.now(timezone.utc) - timedelta(days=days)
        limit = self.global_config.REMOTE_COMMIT_LIMIT

        records = []
        # Pagination is lazy; stop at the cap to protect the rate limit.
        for gh_commit in repo.get_commits(since=since):
            if len(records) >= limit:
                logger.warning(f"⚠️ Reached the remote commit cap ({limit}), stopping.")
                break
            records.append(self._to_record(gh_commit))
        return records

    def fetch_between(
        self, from_ref: str, to_ref: str, fallback_count: int = 10
    ) -> List[CommitRecord]:
        repo = self._require_repo()
        if not self._ref_exists(to_ref):
            logger.warning("⚠️ Invalid references. Using the most recent commit.")
            return self._recent(1)
        if not self._ref_exists(from_ref):
            logger.warning(
                f"⚠️ Reference '{from_ref}' not found. Using the {fallback_count} most recent commits instead."
            )
            return self._recent(fallback_count)

        try:
            comparison = repo.compare(from_ref, to_ref)
        except GithubException as e:
            fallback = self.global_config.ERROR_FALLBACK_COUNT
            logger.warning(f"⚠️ Compare failed ({e.status}). Using the {fallback} most recent commits.")
            return self._recent(fallback)
        # compare() lists oldest first
        return [self._to_record(c) for c in reversed(list(comparison.commits))]

    def repo_metadata(self) -> RepoInfo:
        repo = self._require_repo()
        return RepoInfo(
            name=repo.name,
            branch_count=repo.get_branches().totalCount,
            path=repo.html_url,
        )

    def get_current_branch(self) -> str:
        return self._require_repo().default_branch

    def get_staged_diff(self) -> str:
        logger.warning("⚠️ Staged changes are not available for remote repositories.")
        return ""

    def _compare_files(self, base: str):
        repo = self._require_repo()
        try:
            return repo.compare(base, repo.default_branch).files
        except GithubException as e:
            logger.error(f"❌ Compare {base}...{repo.default_branch} failed: {e.status}")
            return []

    def get_branch_diff(self, base: str) -> str:
        diff_text = []
        for f in self._compare_files(base):
            header = f"diff --git a/{f.filename} b/{f.filename}\n"
            header += f"--- a/{f.filename}\n+++ b/{f.filename}\n"
            patch = f.patch if f.patch else "(Binary file or too large)"
            diff_text.append(header + patch)
        return "\n".join(diff_text)

    def get_modified_files(self, base: str) -> List[str]:
        return [f.filename for f in self._compare_files(base)]
