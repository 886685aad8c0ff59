# llm/provider_abc.py
"""
Abstract base for all LLM providers, plus the provider registry.
"""
import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Type

from config import LLMSettings
from models import CommitRecord, CommitStatistics

logger = logging.getLogger(__name__)

# --- Registry ---
# Maps "provider_id" -> provider class
PROVIDER_REGISTRY: Dict[str, Type["LLMProvider"]] = {}


def register_provider(provider_id: str):
    """
    Class decorator that adds a provider implementation to the registry.

    Example:
        @register_provider("gemini")
        class GeminiProvider(PromptedProvider):
            ...
    """

    def decorator(cls):
        if provider_id in PROVIDER_REGISTRY:
            raise ValueError(
                f"Provider id '{provider_id}' is already registered ({PROVIDER_REGISTRY[provider_id].__name__})"
            )
        PROVIDER_REGISTRY[provider_id] = cls
        return cls

    return decorator


class LLMProvider(ABC):
    """
    Narrative generator interface: text in, text out.
    """

    def __init__(self, settings: LLMSettings):
        self.settings = settings

    @abstractmethod
    def analyze_history(
        self,
        commits: Sequence[CommitRecord],
        stats: CommitStatistics,
        repo_name: str,
        compact: bool = False,
    ) -> Optional[str]:
        """Insights about the commit patterns of a repository."""
        pass

    @abstractmethod
    def improve_commit_message(self, draft_message: str, diff: str = "") -> Optional[str]:
        pass

    @abstractmethod
    def generate_pr_description(
        self, diff: str, current_branch: str, base_branch: str
    ) -> Optional[str]:
        pass

    @abstractmethod
    def generate_release_notes(self, commits: Sequence[CommitRecord]) -> Optional[str]:
        pass

    @abstractmethod
    def answer_repo_question(self, question: str, repo_info: Dict[str, Any]) -> Optional[str]:
        pass


# --- Prompt-template providers ---

# (temperature, max output tokens) per task
GENERATION_SETTINGS: Dict[str, tuple] = {
    "analyze_history": (0.7, 800),
    "analyze_history_compact": (0.7, 300),
    "commit_message": (0.4, 200),
    "pr_description": (0.5, 800),
    "release_notes": (0.5, 800),
    "repo_question": (0.5, 500),
}

COMMIT_DIFF_LIMIT = 2000
PR_DIFF_LIMIT = 4000
COMMIT_SAMPLE_SIZE = 7


def load_prompts_from_dir(prompt_dir: str) -> Dict[str, str]:
    """Recursively load every .txt template under prompt_dir, keyed by relative path."""
    prompts = {}
    for root, _, files in os.walk(prompt_dir):
        for filename in files:
            if filename.endswith(".txt"):
                file_path = os.path.join(root, filename)
                relative_path = os.path.relpath(file_path, prompt_dir)
                key = os.path.splitext(relative_path)[0].replace(os.path.sep, "/")
                with open(file_path, "r", encoding="utf-8") as f:
                    prompts[key] = f.read()

    if not prompts:
        logger.warning(f"⚠️ No .txt prompts found under {prompt_dir}")
    return prompts


def truncate_diff(diff: str, limit: int) -> str:
    if len(diff) <= limit:
        return diff
    return diff[:limit] + "\n... (diff truncated)"


class PromptedProvider(LLMProvider):
    """
    Shared prompt handling for real endpoints.
    Subclasses only implement `_complete`.
    """

    def __init__(self, settings: LLMSettings):
        super().__init__(settings)
        self.prompts = load_prompts_from_dir(settings.prompts_dir)
        self.system_prompt = self.prompts.get("system", "You are a helpful assistant.")

    @abstractmethod
    def _complete(self, prompt: str, temperature: float, max_tokens: int) -> Optional[str]:
        """Send one prompt to the endpoint and return the text reply."""
        pass

    def _generate(self, prompt_key: str, format_kwargs: dict, settings_key: Optional[str] = None) -> Optional[str]:
        prompt_template = self.prompts.get(prompt_key)
        if not prompt_template:
            logger.error(f"❌ [{self.__class__.__name__}] Prompt not found: '{prompt_key}'")
            return None
        try:
            prompt = prompt_template.format(**format_kwargs)
        except KeyError as e:
            logger.error(f"❌ [{self.__class__.__name__}] Prompt '{prompt_key}' is missing key {e}")
            return None

        temperature, max_tokens = GENERATION_SETTINGS[settings_key or prompt_key]
        return self._complete(prompt, temperature, max_tokens)

    def analyze_history(
        self,
        commits: Sequence[CommitRecord],
        stats: CommitStatistics,
        repo_name: str,
        compact: bool = False,
    ) -> Optional[str]:
        commit_samples = "\n".join(
            f"- {c.message} ({c.timestamp.strftime('%Y-%m-%d')})"
            for c in commits[:COMMIT_SAMPLE_SIZE]
        )
        tone = (
            "Be very concise with just 1-2 sentences per point. Keep the entire response under 10 lines."
            if compact
            else "Be conversational but focused - like a helpful senior developer giving advice."
        )
        return self._generate(
            "analyze_history",
            {
                "repo_name": repo_name,
                "total": stats.total,
                "busiest_weekday": stats.busiest_weekday,
                "busiest_hour": stats.busiest_hour,
                "avg_length": stats.message_length.avg,
                "min_length": stats.message_length.min,
                "max_length": stats.message_length.max,
                "commit_samples": commit_samples,
                "tone": tone,
            },
            "analyze_history_compact" if compact else "analyze_history",
        )

    def improve_commit_message(self, draft_message: str, diff: str = "") -> Optional[str]:
        diff_block = ""
        if diff:
            diff_block = (
                "Here's the code diff to provide context:\n```\n"
                f"{truncate_diff(diff, COMMIT_DIFF_LIMIT)}\n```"
            )
        return self._generate(
            "commit_message",
            {"draft_message": draft_message, "diff_block": diff_block},
        )

    def generate_pr_description(
        self, diff: str, current_branch: str, base_branch: str
    ) -> Optional[str]:
        return self._generate(
            "pr_description",
            {
                "current_branch": current_branch,
                "base_branch": base_branch,
                "diff": truncate_diff(diff, PR_DIFF_LIMIT),
            },
        )

    def generate_release_notes(self, commits: Sequence[CommitRecord]) -> Optional[str]:
        commit_lines: List[str] = [f"- {c.short_hash}: {c.message}" for c in commits]
        return self._generate("release_notes", {"commits": "\n".join(commit_lines)})

    def answer_repo_question(self, question: str, repo_info: Dict[str, Any]) -> Optional[str]:
        return self._generate(
            "repo_question",
            {
                "question": question,
                "repo_info": json.dumps(repo_info, indent=2, default=str),
            },
        )
