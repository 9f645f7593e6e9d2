"""
OpenRouter chat-completion client
"""

import json
import re
from typing import Any, Dict, Optional

import structlog
from openai import AsyncOpenAI, OpenAIError

from config.settings import settings

logger = structlog.get_logger()


class LLMError(Exception):
    """Raised when the LLM cannot produce a usable reply"""


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse the JSON object embedded in an LLM reply"""
    t = text.strip()
    # strip code fences if the model wrapped it
    if t.startswith("```"):
        t = t[t.index("\n") + 1:] if "\n" in t else t[3:]
        if t.endswith("```"):
            t = t[:-3]
        t = t.strip()

    try:
        data = json.loads(t)
    except json.JSONDecodeError:
        m = re.search(r"\{[\s\S]*\}", text)
        if not m:
            raise ValueError("No JSON found in response")
        try:
            data = json.loads(m.group())
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in response: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Response JSON is not an object")
    return data


class LLMClient:
    """Thin wrapper over an OpenAI-compatible chat completions endpoint"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.OPENROUTER_API_KEY
        self.base_url = base_url or settings.OPENROUTER_BASE_URL
        self.model = model or settings.OPENROUTER_MODEL
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.api_key) or self._client is not None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise LLMError("OpenRouter API key is not configured")
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=settings.LLM_TIMEOUT,
                max_retries=0,
                default_headers={
                    "HTTP-Referer": settings.OPENROUTER_REFERER,
                    "X-Title": settings.OPENROUTER_TITLE,
                },
            )
        return self._client

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 600,
        temperature: float = 0.3,
    ) -> str:
        """Send one system+user exchange and return the reply text"""
        logger.info(
            "Sending prompt to LLM", model=self.model, prompt_chars=len(user_prompt)
        )
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except OpenAIError as e:
            logger.warning("LLM request failed", model=self.model, error=str(e))
            raise LLMError(f"OpenRouter API failed: {e}") from e

        choices = getattr(response, "choices", None) or []
        message = choices[0].message if choices else None
        content = (message.content or "").strip() if message else ""
        if not content:
            raise LLMError("Invalid OpenRouter response format")

        logger.info("LLM replied", model=self.model, reply_chars=len(content))
        return content
