"""
Model gateway client: prompt in, generated text out.

Talks to the model proxy either over HTTP (``proxy_url``) or in-process
through a ``VendorProxy``. There is no retry and no local timeout unless
configured.
"""

import json
from typing import Optional, Dict, Any

import httpx

from socrate.shared.config import settings
from socrate.shared.exceptions import GatewayError
from socrate.shared.llm import VendorProxy
from socrate.shared.logging import get_logger

logger = get_logger(__name__)


def extract_text(data: Any) -> str:
    """
    Navigate the vendor response to the generated text.

    Gemini: candidates[0].content.parts[0].text
    OpenAI: choices[0].message.content
    Anthropic: content[0].text

    Falls back to the serialized response when no path matches.
    """
    if isinstance(data, dict):
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
            if text:
                return text
        except (KeyError, IndexError, TypeError):
            pass

        try:
            text = data["choices"][0]["message"]["content"]
            if text:
                return text
        except (KeyError, IndexError, TypeError):
            pass

        try:
            text = data["content"][0]["text"]
            if text:
                return text
        except (KeyError, IndexError, TypeError):
            pass

    return json.dumps(data, ensure_ascii=False)


class ModelGateway:
    """Turns a prompt string into generated text."""

    def __init__(
        self,
        proxy_url: Optional[str] = None,
        model: Optional[str] = None,
        proxy: Optional[VendorProxy] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.proxy_url = proxy_url
        self.model = model or settings.gateway.default_model
        self.proxy = proxy
        self.timeout = timeout
        self._transport = transport

        if not self.proxy_url and self.proxy is None:
            raise GatewayError("Either proxy_url or an in-process proxy is required")

    @classmethod
    def from_settings(cls, proxy: Optional[VendorProxy] = None) -> "ModelGateway":
        """Build from settings; an empty proxy_url selects the in-process proxy."""
        proxy_url = settings.gateway.proxy_url or None
        if proxy_url is None and proxy is None:
            proxy = VendorProxy()
        return cls(
            proxy_url=proxy_url,
            model=settings.gateway.default_model,
            proxy=proxy,
            timeout=settings.gateway.timeout_seconds,
        )

    async def generate(self, prompt: str) -> str:
        """
        Send a prompt and return the generated text.

        Raises:
            GatewayError on network failure or a non-2xx status
        """
        if self.proxy_url:
            data = await self._post(prompt)
        else:
            status, data = await self.proxy.forward(prompt, self.model)
            if not 200 <= status < 300:
                raise GatewayError(f"API Error: {status}")

        return extract_text(data)

    async def _post(self, prompt: str) -> Dict[str, Any]:
        """POST {prompt, model} to the proxy endpoint."""
        payload = {"prompt": prompt, "model": self.model}

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.post(self.proxy_url, json=payload)
        except httpx.HTTPError as e:
            raise GatewayError(f"Network error: {str(e)}") from e

        if response.is_error:
            raise GatewayError(f"API Error: {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise GatewayError(f"Invalid JSON from proxy: {str(e)}") from e
