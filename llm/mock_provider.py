# llm/mock_provider.py
"""
Offline provider: no API calls, deterministic replies.
Useful for tests and for trying the CLI without a key (`--llm mock`).
"""
import logging
from typing import Any, Dict, Optional, Sequence

from config import LLMSettings
from llm.provider_abc import LLMProvider, register_provider
from models import CommitRecord, CommitStatistics

logger = logging.getLogger(__name__)


@register_provider("mock")
class MockProvider(LLMProvider):
    """
    Returns fixed strings built from its inputs.
    """

    def __init__(self, settings: LLMSettings):
        super().__init__(settings)
        logger.debug("✅ MockProvider ready (no API key needed)")

    def analyze_history(
        self,
        commits: Sequence[CommitRecord],
        stats: CommitStatistics,
        repo_name: str,
        compact: bool = False,
    ) -> Optional[str]:
        return (
            f"# [Mock] Analysis of {repo_name}\n\n"
            f"- {stats.total} commits, busiest on {stats.busiest_weekday} "
            f"at {stats.busiest_hour}h\n"
            f"- Average message length: {stats.message_length.avg}"
        )

    def improve_commit_message(self, draft_message: str, diff: str = "") -> Optional[str]:
        return f"[Mock] {draft_message.strip().capitalize()}"

    def generate_pr_description(
        self, diff: str, current_branch: str, base_branch: str
    ) -> Optional[str]:
        return (
            f"Title: [Mock] Merge {current_branch} into {base_branch}\n\n"
            f"Diff size: {len(diff)} characters"
        )

    def generate_release_notes(self, commits: Sequence[CommitRecord]) -> Optional[str]:
        lines = ["# [Mock] Release Notes", ""]
        lines.extend(f"- {c.message}" for c in commits)
        return "\n".join(lines)

    def answer_repo_question(self, question: str, repo_info: Dict[str, Any]) -> Optional[str]:
        return f"[Mock] {question} ({repo_info.get('totalCommits', 0)} commits)"
