# plugins/secret_redactor.py
import logging
import re

from hooks.base import BasePlugin
from context import RunContext

logger = logging.getLogger(__name__)


class SecretRedactorPlugin(BasePlugin):
    """
    Masks credentials that a model may echo back from a diff
    (GitHub tokens, Google API keys, sk- style keys, password assignments).
    """

    name = "SecretRedactor"

    PATTERNS = [
        re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}\b"),
        re.compile(r"\bAIza[0-9A-Za-z_\-]{35}\b"),
        re.compile(r"\bsk-[A-Za-z0-9]{20,}\b"),
        re.compile(r"(?i)(password\s*[=:]\s*)\S+"),
    ]

    def on_ai_text_generated(self, context: RunContext, text: str) -> str:
        if not text:
            return text

        count = 0
        for pattern in self.PATTERNS:
            if pattern.groups:
                text, found = pattern.subn(r"\1***", text)
            else:
                text, found = pattern.subn("***", text)
            count += found

        if count > 0:
            logger.info(f"🛡️ [SecretRedactor] Masked {count} secret(s) in the generated text.")
        return text
