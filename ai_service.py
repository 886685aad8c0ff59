# ai_service.py
import importlib
import logging
import os
from typing import Any, Dict, Optional, Sequence

from config import GlobalConfig
from context import RunContext
from hooks.manager import PluginManager
from llm.provider_abc import LLMProvider, PROVIDER_REGISTRY
from models import CommitRecord, CommitStatistics

logger = logging.getLogger(__name__)


# --- Dynamic loader ---
def load_providers_dynamically(script_base_path: str):
    """
    Import every module under llm/ so that their @register_provider
    decorators fill PROVIDER_REGISTRY.
    """
    llm_dir = os.path.join(script_base_path, "llm")
    if not os.path.exists(llm_dir):
        logger.warning(f"⚠️ llm directory not found: {llm_dir}")
        return

    for filename in sorted(os.listdir(llm_dir)):
        if (
            filename.endswith(".py")
            and filename != "__init__.py"
            and filename != "provider_abc.py"
        ):
            module_name = f"llm.{filename[:-3]}"
            try:
                importlib.import_module(module_name)
            except Exception as e:
                logger.error(f"❌ Failed to load provider module {module_name}: {e}")


def get_llm_provider(provider_id: str, global_config: GlobalConfig) -> LLMProvider:
    """
    Provider factory backed by PROVIDER_REGISTRY.
    """
    logger.debug(f"Initialising LLM provider: {provider_id}")

    # 1. Make sure every provider module is registered
    load_providers_dynamically(global_config.SCRIPT_BASE_PATH)

    # 2. Check configuration
    if not global_config.is_provider_configured(provider_id):
        logger.error(f"❌ Provider '{provider_id}' has no API key configured.")
        raise ValueError(
            f"Provider '{provider_id}' is not configured. "
            f"Run `gitwise setup` or set its API key in your .env file."
        )

    # 3. Look it up
    if provider_id not in PROVIDER_REGISTRY:
        logger.error(f"❌ Unknown LLM provider: '{provider_id}'")
        logger.error(f"   Available providers: {sorted(PROVIDER_REGISTRY.keys())}")
        raise ValueError(f"Unknown LLM provider: {provider_id}")

    # 4. Instantiate with explicit settings
    provider_class = PROVIDER_REGISTRY[provider_id]
    return provider_class(global_config.llm_settings(provider_id))


class AIService:
    """
    Narrative generator facade.
    Every call is delegated to the provider; failures are logged and
    reported as None so that commands can decide how to exit.
    """

    def __init__(
        self,
        context: RunContext,
        plugin_manager: Optional[PluginManager] = None,
        provider: Optional[LLMProvider] = None,
    ):
        self.context = context
        self.plugin_manager = plugin_manager
        self.provider: LLMProvider = provider or get_llm_provider(
            context.llm_id, context.global_config
        )
        logger.debug(f"🤖 AI service ready (provider: {self.provider.__class__.__name__})")

    def _finish(self, text: Optional[str]) -> Optional[str]:
        if not text:
            return None
        if self.plugin_manager:
            text = self.plugin_manager.filter("on_ai_text_generated", text)
        return text

    def analyze_commit_history(
        self,
        commits: Sequence[CommitRecord],
        stats: CommitStatistics,
        repo_name: str,
        compact: bool = False,
    ) -> Optional[str]:
        try:
            return self._finish(
                self.provider.analyze_history(commits, stats, repo_name, compact)
            )
        except Exception as e:
            logger.error(f"❌ analyze_commit_history failed: {e}")
            return None

    def improve_commit_message(self, draft_message: str, diff: str = "") -> Optional[str]:
        try:
            return self._finish(self.provider.improve_commit_message(draft_message, diff))
        except Exception as e:
            logger.error(f"❌ improve_commit_message failed: {e}")
            return None

    def generate_pr_description(
        self, diff: str, current_branch: str, base_branch: str
    ) -> Optional[str]:
        try:
            return self._finish(
                self.provider.generate_pr_description(diff, current_branch, base_branch)
            )
        except Exception as e:
            logger.error(f"❌ generate_pr_description failed: {e}")
            return None

    def generate_release_notes(self, commits: Sequence[CommitRecord]) -> Optional[str]:
        try:
            return self._finish(self.provider.generate_release_notes(commits))
        except Exception as e:
            logger.error(f"❌ generate_release_notes failed: {e}")
            return None

    def answer_repo_question(self, question: str, repo_info: Dict[str, Any]) -> Optional[str]:
        try:
            return self._finish(self.provider.answer_repo_question(question, repo_info))
        except Exception as e:
            logger.error(f"❌ answer_repo_question failed: {e}")
            return None
