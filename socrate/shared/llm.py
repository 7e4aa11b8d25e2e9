"""
Model proxy: forwards a prompt to the vendor selected by model name.
Holds the vendor credentials server-side and returns the raw vendor JSON.
"""

from typing import Optional, Dict, Any, Tuple
from enum import Enum

import httpx
import openai
import anthropic
from openai import AsyncOpenAI
from anthropic import AsyncAnthropic

from socrate.shared.config import settings, VendorConfig
from socrate.shared.exceptions import VendorError, UnsupportedModelError
from socrate.shared.logging import get_logger

logger = get_logger(__name__)


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


def resolve_provider(model: str) -> LLMProvider:
    """Pick the vendor from the model name."""
    name = model.lower()
    if name.startswith("gemini"):
        return LLMProvider.GEMINI
    if name.startswith("claude"):
        return LLMProvider.ANTHROPIC
    if name.startswith(("gpt", "o1", "o3", "o4", "chatgpt")):
        return LLMProvider.OPENAI
    raise UnsupportedModelError(f"Unsupported model: {model}")


class VendorProxy:
    """Thin proxy in front of the generative-text vendors."""

    def __init__(
        self,
        config: Optional[VendorConfig] = None,
        default_model: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config or settings.vendor
        self.default_model = default_model or settings.gateway.default_model
        self._transport = transport
        self._openai: Optional[AsyncOpenAI] = None
        self._anthropic: Optional[AsyncAnthropic] = None

    async def forward(
        self,
        prompt: str,
        model: Optional[str] = None
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Forward a prompt to the vendor.

        Args:
            prompt: Full prompt text
            model: Vendor model name; defaults to the gateway default

        Returns:
            (status_code, raw vendor JSON)

        Raises:
            VendorError if the credential is missing or the vendor is unreachable
        """
        model = model or self.default_model
        provider = resolve_provider(model)

        logger.info(
            "Forwarding prompt to vendor",
            extra={"action": "proxy_forward", "provider": provider.value, "model": model},
        )

        if provider == LLMProvider.GEMINI:
            return await self._gemini_forward(prompt, model)
        elif provider == LLMProvider.OPENAI:
            return await self._openai_forward(prompt, model)
        return await self._anthropic_forward(prompt, model)

    async def _gemini_forward(self, prompt: str, model: str) -> Tuple[int, Dict[str, Any]]:
        """Google Generative Language REST call."""
        api_key = self.config.gemini_api_key
        if not api_key:
            raise VendorError("Gemini API key not configured")

        url = f"{self.config.gemini_base_url}/models/{model}:generateContent"
        body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                response = await client.post(url, params={"key": api_key}, json=body)
        except httpx.HTTPError as e:
            raise VendorError(f"Gemini request failed: {str(e)}") from e

        try:
            data = response.json()
        except ValueError:
            data = {"error": {"code": response.status_code, "message": response.text}}

        return response.status_code, data

    async def _openai_forward(self, prompt: str, model: str) -> Tuple[int, Dict[str, Any]]:
        """OpenAI chat completion call."""
        if self._openai is None:
            api_key = self.config.openai_api_key
            if not api_key:
                raise VendorError("OpenAI API key not configured")
            self._openai = AsyncOpenAI(api_key=api_key)

        try:
            response = await self._openai.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except openai.APIStatusError as e:
            return e.status_code, _error_body(e.body, e)
        except openai.APIError as e:
            raise VendorError(f"OpenAI request failed: {str(e)}") from e

        return 200, response.model_dump(mode="json")

    async def _anthropic_forward(self, prompt: str, model: str) -> Tuple[int, Dict[str, Any]]:
        """Anthropic messages call."""
        if self._anthropic is None:
            api_key = self.config.anthropic_api_key
            if not api_key:
                raise VendorError("Anthropic API key not configured")
            self._anthropic = AsyncAnthropic(api_key=api_key)

        try:
            response = await self._anthropic.messages.create(
                model=model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as e:
            return e.status_code, _error_body(e.body, e)
        except anthropic.APIError as e:
            raise VendorError(f"Anthropic request failed: {str(e)}") from e

        return 200, response.model_dump(mode="json")


def _error_body(body: Any, error: Exception) -> Dict[str, Any]:
    if isinstance(body, dict):
        return body
    return {"error": {"message": str(error)}}
