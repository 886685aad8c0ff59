# data_sources/local_git.py
import logging
import os
from typing import List

from .base import DataSource
from models import CommitRecord, RepoInfo
from context import RunContext
import git_utils

logger = logging.getLogger(__name__)


class LocalGitDataSource(DataSource):
    """
    Local git history source.
    Drives the git command-line tool inside the repository.
    """

    def __init__(self, context: RunContext):
        self.context = context

    def validate(self) -> bool:
        if not os.path.exists(self.context.repo_path):
            logger.error(f"❌ Path does not exist: {self.context.repo_path}")
            return False
        if not git_utils.is_git_repository(self.context.repo_path):
            logger.error(f"❌ Error: {self.context.repo_path} is not a git repository")
            return False
        return True

    def fetch_history(self, days: int) -> List[CommitRecord]:
        return git_utils.get_commit_history(self.context, days)

    def fetch_between(
        self, from_ref: str, to_ref: str, fallback_count: int = 10
    ) -> List[CommitRecord]:
        return git_utils.get_commits_between(
            self.context, from_ref, to_ref, fallback_count
        )

    def repo_metadata(self) -> RepoInfo:
        return git_utils.get_repo_info(self.context)

    def get_current_branch(self) -> str:
        return git_utils.get_current_branch(self.context)

    def get_staged_diff(self) -> str:
        return git_utils.get_staged_diff(self.context)

    def get_branch_diff(self, base: str) -> str:
        current = self.get_current_branch()
        return git_utils.get_branch_diff(self.context, base, current)

    def get_modified_files(self, base: str) -> List[str]:
        current = self.get_current_branch()
        return git_utils.get_modified_files(self.context, base, current)
