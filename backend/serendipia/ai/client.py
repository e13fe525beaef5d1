import logging
import json
from typing import Optional, Dict, Any

import litellm

from serendipia.config import settings

logger = logging.getLogger(__name__)

litellm.drop_params = True

# provider -> (model prefix, settings attribute holding the API key)
PROVIDERS = {
    "openrouter": ("openrouter/", "openrouter_api_key"),
    "ollama": ("ollama/", None),
    "anthropic": ("", "anthropic_api_key"),
    "openai": ("", "openai_api_key"),
}


class AIClient:

    def __init__(self):
        self.provider = settings.ai_provider
        self.model = self._get_model_string()
        self.api_base = self._get_api_base()

    def _get_model_string(self) -> str:
        model = settings.ai_model
        prefix = PROVIDERS.get(self.provider, ("", None))[0]
        if prefix and not model.startswith(prefix):
            return f"{prefix}{model}"
        return model

    def _get_api_base(self) -> Optional[str]:
        if self.provider == "openrouter":
            return "https://openrouter.ai/api/v1"
        if self.provider == "ollama":
            return settings.ai_base_url or "http://localhost:11434"
        return settings.ai_base_url

    def _api_key(self) -> Optional[str]:
        attribute = PROVIDERS.get(self.provider, ("", None))[1]
        return getattr(settings, attribute) if attribute else None

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 1500,
        json_mode: bool = False
    ) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ]

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if self.api_base:
            kwargs["api_base"] = self.api_base

        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        # Per-call key; never written to os.environ
        api_key = self._api_key()
        if api_key:
            kwargs["api_key"] = api_key

        try:
            response = await litellm.acompletion(**kwargs)
            return response.choices[0].message.content
        except Exception as e:
            logger.error(f"AI completion error: {e}")
            raise

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 1500
    ) -> Dict[str, Any]:
        response = await self.complete(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=True
        )

        cleaned = response.strip()
        if cleaned.startswith("```json"):
            cleaned = cleaned[7:]
        if cleaned.startswith("```"):
            cleaned = cleaned[3:]
        if cleaned.endswith("```"):
            cleaned = cleaned[:-3]

        return json.loads(cleaned.strip())


_ai_client: Optional[AIClient] = None

def get_ai_client() -> AIClient:
    global _ai_client
    if _ai_client is None:
        _ai_client = AIClient()
    return _ai_client
