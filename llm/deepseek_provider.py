# llm/deepseek_provider.py
"""
LLMProvider implementation for DeepSeek (OpenAI-compatible API).
"""
import logging
from typing import Optional

from openai import OpenAI

from config import LLMSettings
from llm.provider_abc import PromptedProvider, register_provider

logger = logging.getLogger(__name__)


@register_provider("deepseek")
class DeepSeekProvider(PromptedProvider):
    """
    DeepSeek chat completions through the openai client.
    """

    def __init__(self, settings: LLMSettings):
        if not settings.api_key:
            logger.error("❌ DEEPSEEK_API_KEY is not set. Check your .env file.")
            raise ValueError("DEEPSEEK_API_KEY is not set.")

        super().__init__(settings)
        try:
            self.client = OpenAI(api_key=settings.api_key, base_url=settings.base_url)
        except Exception as e:
            logger.error(f"❌ DeepSeek (OpenAI) client initialisation failed: {e}")
            raise ValueError(f"DeepSeek (OpenAI) client initialisation failed: {e}")

        logger.debug(f"✅ DeepSeekProvider ready (model {settings.model}, {len(self.prompts)} prompts)")

    def _complete(self, prompt: str, temperature: float, max_tokens: int) -> Optional[str]:
        messages = [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": prompt},
        ]
        try:
            response = self.client.chat.completions.create(
                model=self.settings.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            if response.choices and response.choices[0].message.content:
                return response.choices[0].message.content.strip()
            raise RuntimeError("No content received from the DeepSeek API")
        except Exception as e:
            logger.error(f"❌ [DeepSeekProvider] Generation failed: {e}")
            raise
