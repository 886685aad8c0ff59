# hooks/base.py
from abc import ABC
from typing import List

from context import RunContext
from models import CommitRecord


class BasePlugin(ABC):
    """
    Plugin base class with every lifecycle hook.
    User plugins in plugins/*.py subclass this and override what they need.
    """

    # Shown in logs; subclasses should override it.
    name: str = "BasePlugin"

    def on_start(self, context: RunContext, command: str):
        """[hook] A command is about to run."""
        pass

    def on_commits_fetched(self, context: RunContext, commits: List[CommitRecord]):
        """[hook] The history source returned commits for this command."""
        pass

    def on_ai_text_generated(self, context: RunContext, text: str) -> str:
        """
        [filter hook] Runs on every piece of generated text.
        **Must return a string**; return `text` unchanged to leave it alone.
        """
        return text

    def on_finish(self, context: RunContext, command: str, exit_code: int):
        """[hook] The command finished without crashing."""
        pass
