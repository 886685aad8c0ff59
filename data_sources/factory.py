# data_sources/factory.py
import logging
from context import RunContext
from .base import DataSource
from .local_git import LocalGitDataSource
from .github_api import GitHubAPIDataSource

logger = logging.getLogger(__name__)


def get_data_source(context: RunContext) -> DataSource:
    """
    Pick the history source for a repository path.
    Remote URLs go through the GitHub API, everything else through local git.
    """
    if context.is_remote:
        logger.info("🔌 Remote URL detected, using the GitHub API data source")
        return GitHubAPIDataSource(context)

    logger.debug("🔌 Using the local git data source")
    return LocalGitDataSource(context)
