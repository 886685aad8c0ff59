# config.py
"""
Global configuration for GitWise.
Credentials live in a single .env file next to the program (see `gitwise setup`).
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


# --- Program base path ---
SCRIPT_BASE_PATH = os.path.abspath(os.path.dirname(__file__))
ENV_FILE_PATH = os.path.join(SCRIPT_BASE_PATH, ".env")
if os.path.exists(ENV_FILE_PATH):
    load_dotenv(ENV_FILE_PATH)
else:
    load_dotenv()


@dataclass(frozen=True)
class LLMSettings:
    """Everything a provider needs to reach its endpoint."""

    provider_id: str
    api_key: str
    model: str
    prompts_dir: str
    base_url: Optional[str] = None


class GlobalConfig:
    """
    Application-wide settings: paths, git formats and provider credentials.
    """

    # --- Paths ---
    SCRIPT_BASE_PATH: str = SCRIPT_BASE_PATH
    ENV_FILE: str = ENV_FILE_PATH
    PROMPTS_DIR_NAME: str = "prompts"
    TEMPLATES_DIR_NAME: str = "templates"
    PLUGINS_DIR_NAME: str = "plugins"

    # --- Git formats ---
    # Fields are separated by the ASCII unit separator so that subjects may contain "|".
    GIT_FIELD_SEPARATOR: str = "\x1f"
    GIT_LOG_PRETTY: str = "--pretty=format:%H%x1f%aI%x1f%s%x1f%an%x1f%ae"
    GIT_COMMAND_TIMEOUT: int = 30

    # --- History defaults ---
    DEFAULT_DAYS: int = 30
    DEFAULT_BASE_BRANCH: str = "main"
    DEFAULT_FROM_REF: str = "HEAD~10"
    DEFAULT_TO_REF: str = "HEAD"
    DEFAULT_RELEASE_COUNT: int = 10
    ERROR_FALLBACK_COUNT: int = 5
    REMOTE_COMMIT_LIMIT: int = 100

    # =================================================================
    # --- AI provider configuration ---
    # =================================================================

    # 1. Provider API keys
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    DEEPSEEK_API_KEY: str = os.getenv("DEEPSEEK_API_KEY", "")

    # 2. Provider endpoints
    DEEPSEEK_BASE_URL: str = "https://api.deepseek.com"

    # 3. Application default
    DEFAULT_LLM: str = os.getenv("DEFAULT_LLM", "gemini").lower()

    # 4. Default model per provider
    DEFAULT_MODEL_GEMINI: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    DEFAULT_MODEL_DEEPSEEK: str = os.getenv("DEEPSEEK_MODEL", "deepseek-chat")

    # =================================================================
    # --- GitHub (remote repositories) ---
    # =================================================================
    GITHUB_TOKEN: str = os.getenv("GITHUB_TOKEN", "")

    @property
    def prompts_dir(self) -> str:
        return os.path.join(self.SCRIPT_BASE_PATH, self.PROMPTS_DIR_NAME)

    @property
    def templates_dir(self) -> str:
        return os.path.join(self.SCRIPT_BASE_PATH, self.TEMPLATES_DIR_NAME)

    @property
    def plugins_dir(self) -> str:
        return os.path.join(self.SCRIPT_BASE_PATH, self.PLUGINS_DIR_NAME)

    def is_provider_configured(self, provider: str) -> bool:
        """
        Check whether a provider has its API key set in the environment.
        The mock provider never needs one.
        """
        if provider == "gemini":
            return bool(self.GEMINI_API_KEY)
        if provider == "deepseek":
            return bool(self.DEEPSEEK_API_KEY)
        if provider == "mock":
            return True
        return False

    def llm_settings(self, provider: str) -> LLMSettings:
        """Build the explicit settings object handed to a provider."""
        if provider == "gemini":
            return LLMSettings(
                provider_id=provider,
                api_key=self.GEMINI_API_KEY,
                model=self.DEFAULT_MODEL_GEMINI,
                prompts_dir=self.prompts_dir,
            )
        if provider == "deepseek":
            return LLMSettings(
                provider_id=provider,
                api_key=self.DEEPSEEK_API_KEY,
                model=self.DEFAULT_MODEL_DEEPSEEK,
                prompts_dir=self.prompts_dir,
                base_url=self.DEEPSEEK_BASE_URL,
            )
        return LLMSettings(
            provider_id=provider,
            api_key="",
            model=provider,
            prompts_dir=self.prompts_dir,
        )
