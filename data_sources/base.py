# data_sources/base.py
from abc import ABC, abstractmethod
from typing import List

from models import CommitRecord, RepoInfo


class DataSource(ABC):
    """
    History source interface.
    Hides whether commits come from a local git checkout or a remote API.
    """

    @abstractmethod
    def validate(self) -> bool:
        """
        Check that the source is usable, e.g. the path is a git work tree
        or the remote repository can be reached.
        """
        pass

    @abstractmethod
    def fetch_history(self, days: int) -> List[CommitRecord]:
        """
        Commits from the trailing `days` days, newest first.
        An empty list (never an error) when nothing falls in the window.
        """
        pass

    @abstractmethod
    def fetch_between(
        self, from_ref: str, to_ref: str, fallback_count: int = 10
    ) -> List[CommitRecord]:
        """
        Commits between two references, newest first. Unresolvable
        references fall back to a bounded list of recent commits.
        """
        pass

    @abstractmethod
    def repo_metadata(self) -> RepoInfo:
        pass

    @abstractmethod
    def get_current_branch(self) -> str:
        pass

    @abstractmethod
    def get_staged_diff(self) -> str:
        """Staged changes as a unified diff ("" when unavailable)."""
        pass

    @abstractmethod
    def get_branch_diff(self, base: str) -> str:
        """Diff of the current branch against `base` ("" when unavailable)."""
        pass

    @abstractmethod
    def get_modified_files(self, base: str) -> List[str]:
        pass
