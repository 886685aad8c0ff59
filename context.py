# context.py
"""
Runtime configuration model.
"""
from dataclasses import dataclass

from config import GlobalConfig


@dataclass
class RunContext:
    """
    Everything one command run needs.
    This is the only object passed from the CLI to the orchestrator.
    """

    # --- Target repository (local path or remote URL) ---
    repo_path: str

    # --- AI provider ---
    llm_id: str

    # --- Global configuration ---
    # API keys, constants and values loaded from .env
    global_config: GlobalConfig

    @property
    def is_remote(self) -> bool:
        return self.repo_path.lower().startswith(("http://", "https://", "git@"))
