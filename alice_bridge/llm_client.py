import logging
from typing import Dict, List, Optional

import httpx
import openai
from openai import AsyncOpenAI

from alice_bridge.config import Settings
from alice_bridge.errors import UpstreamError
from alice_bridge.prompt_builder import build_text_prompt

logger = logging.getLogger(__name__)

Messages = List[Dict[str, str]]


class ChatCompletionClient:
    """OpenAI-compatible /chat/completions (DeepSeek, OpenAI, Groq, ...)."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 512,
        timeout: float = 60.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if http_client is None:
            http_client = httpx.AsyncClient(timeout=timeout)
        # no retries: a failed call becomes the apology right away
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            http_client=http_client,
            max_retries=0,
        )
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def complete(self, messages: Messages) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                stream=False,
            )
        except openai.APIStatusError as e:
            logger.error("🔴 %s API error: %s %s", self.model, e.status_code, e.message)
            raise UpstreamError(f"upstream returned {e.status_code}") from e
        except openai.APIError as e:
            raise UpstreamError(f"upstream call failed: {e}") from e

        if not response.choices:
            raise UpstreamError("upstream returned no choices")
        reply = (response.choices[0].message.content or "").strip()
        if not reply:
            raise UpstreamError("empty reply from upstream")
        return reply

    async def aclose(self):
        await self.client.close()


class TextGenerationClient:
    """Hugging Face Inference API text-generation endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 300,
        timeout: float = 60.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if http_client is None:
            http_client = httpx.AsyncClient(timeout=timeout)
        self.http_client = http_client
        self.url = f"{base_url.rstrip('/')}/{model}"
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def complete(self, messages: Messages) -> str:
        body = {
            "inputs": build_text_prompt(messages),
            "parameters": {
                "max_new_tokens": self.max_tokens,
                "temperature": self.temperature,
                "return_full_text": False,
            },
            "options": {"wait_for_model": True},
        }
        try:
            response = await self.http_client.post(self.url, json=body, headers=self.headers)
        except httpx.HTTPError as e:
            raise UpstreamError(f"upstream call failed: {e}") from e

        if response.is_error:
            logger.error("🔴 %s API error: %s %s", self.model, response.status_code, response.text)
            raise UpstreamError(f"upstream returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("upstream returned invalid JSON") from e

        if isinstance(data, list) and data:
            data = data[0]
        reply = data.get("generated_text") if isinstance(data, dict) else None
        if not isinstance(reply, str) or not reply.strip():
            raise UpstreamError("empty reply from upstream")
        return reply

    async def aclose(self):
        await self.http_client.aclose()


def build_client(settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
    profile = settings.profile
    client_cls = TextGenerationClient if profile.kind == "text" else ChatCompletionClient
    return client_cls(
        api_key=settings.api_key,
        base_url=profile.base_url,
        model=settings.model,
        temperature=profile.temperature,
        max_tokens=profile.max_tokens,
        timeout=settings.upstream_timeout,
        http_client=http_client,
    )
