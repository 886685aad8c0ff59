# hooks/clean_output.py
import logging
import re

from hooks.base import BasePlugin
from context import RunContext

logger = logging.getLogger(__name__)

FENCE_START = re.compile(r"^```(markdown|md|text)?[ \t]*\n", re.IGNORECASE)


class CleanOutputPlugin(BasePlugin):
    """
    Strips the ```markdown ... ``` wrapper LLMs like to put around a reply.
    Fences inside the reply are left alone.
    """

    name = "CleanMarkdownOutput"

    def on_ai_text_generated(self, context: RunContext, text: str) -> str:
        if not text:
            return text

        cleaned = text.strip()
        if FENCE_START.match(cleaned) and cleaned.endswith("```"):
            cleaned = FENCE_START.sub("", cleaned, count=1)
            cleaned = cleaned[:-3].strip()

        if cleaned != text:
            logger.debug("🧹 Removed the code-fence wrapper from the AI reply")

        return cleaned
