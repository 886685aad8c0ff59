# llm/gemini_provider.py
"""
LLMProvider implementation for Google Gemini.
"""
import logging
from typing import Optional

from google import genai
from google.genai import types

from config import LLMSettings
from llm.provider_abc import PromptedProvider, register_provider

logger = logging.getLogger(__name__)


@register_provider("gemini")
class GeminiProvider(PromptedProvider):
    """
    Gemini through the genai.Client API.
    """

    def __init__(self, settings: LLMSettings):
        if not settings.api_key:
            logger.error("❌ GEMINI_API_KEY is not set. Run `gitwise setup` or edit your .env file.")
            raise ValueError("GEMINI_API_KEY is not set.")

        super().__init__(settings)
        try:
            self.client = genai.Client(api_key=settings.api_key)
        except Exception as e:
            logger.error(f"❌ Gemini client initialisation failed: {e}")
            raise ValueError(f"Gemini client initialisation failed: {e}")

        logger.debug(f"✅ GeminiProvider ready (model {settings.model}, {len(self.prompts)} prompts)")

    def _complete(self, prompt: str, temperature: float, max_tokens: int) -> Optional[str]:
        try:
            response = self.client.models.generate_content(
                model=f"models/{self.settings.model}",
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=self.system_prompt,
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                ),
            )
            if not response or not response.text:
                raise RuntimeError("Gemini returned an empty reply")
            return response.text
        except Exception as e:
            logger.error(f"❌ [GeminiProvider] Generation failed: {e}")
            raise
