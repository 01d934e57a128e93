# g6pd_agent/models.py
"""Clients for the remote completion models that answer safety checks.

Each invoker makes exactly one request per ``complete`` call and never retries;
every failure surfaces as ``TransportError`` so the caller owns the fallback
policy. Credentials and endpoints are constructor arguments.
"""
import json
import time
from typing import Any, Dict, Optional

import httpx
import openai
from openai import OpenAI

from .errors import TransportError


class BaseInvoker:
    provider = "base"

    def __init__(self, api_key: str, model_id: str, max_tokens: int = 1000, timeout: float = 30.0):
        self.api_key = api_key
        self.model_id = model_id
        self.max_tokens = int(max_tokens)
        self.timeout = float(timeout)

    def complete(self, prompt: str) -> str:
        """Sends one user message and returns the completion text."""
        raise NotImplementedError

    def _require_key(self):
        if not self.api_key:
            raise TransportError(f"authentication failed: no API key configured for {self.provider}")


class AnthropicInvoker(BaseInvoker):
    """Anthropic Messages API over plain httpx."""
    provider = "anthropic"

    def __init__(
        self,
        api_key: str,
        model_id: str,
        base_url: Optional[str] = None,
        api_version: str = "2023-06-01",
        max_tokens: int = 1000,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__(api_key, model_id, max_tokens, timeout)
        self.base_url = (base_url or "https://api.anthropic.com").rstrip("/")
        self.api_version = api_version
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
        }

    def complete(self, prompt: str) -> str:
        self._require_key()
        payload: Dict[str, Any] = {
            "model": self.model_id,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        # httpx timeouts apply per phase; the deadline bounds the whole body read
        deadline = time.monotonic() + self.timeout
        chunks = []
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                with client.stream(
                    "POST", f"{self.base_url}/v1/messages", headers=self._headers(), json=payload
                ) as r:
                    for chunk in r.iter_bytes():
                        if time.monotonic() > deadline:
                            raise TransportError(f"request timed out after {self.timeout}s")
                        chunks.append(chunk)
        except httpx.TimeoutException as e:
            raise TransportError(f"request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise TransportError(f"request failed: {e.__class__.__name__}") from e

        if r.status_code in (401, 403):
            raise TransportError(f"authentication failed: HTTP {r.status_code}")
        if not r.is_success:
            raise TransportError(f"API Error: {r.status_code}")

        try:
            data = json.loads(b"".join(chunks))
        except ValueError as e:
            raise TransportError("response envelope is not JSON") from e

        content = data.get("content") if isinstance(data, dict) else None
        first = content[0] if isinstance(content, list) and content else None
        text = first.get("text") if isinstance(first, dict) else None
        if not isinstance(text, str):
            raise TransportError("response envelope has no completion text")
        return text


class OpenAIInvoker(BaseInvoker):
    """OpenAI chat completions through the official SDK."""
    provider = "openai"

    def __init__(
        self,
        api_key: str,
        model_id: str,
        base_url: Optional[str] = None,
        max_tokens: int = 1000,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ):
        super().__init__(api_key, model_id, max_tokens, timeout)
        self.base_url = base_url
        self.http_client = http_client

    def complete(self, prompt: str) -> str:
        self._require_key()
        client = OpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
            http_client=self.http_client,
        )
        try:
            resp = client.chat.completions.create(
                model=self.model_id,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.AuthenticationError as e:
            raise TransportError(f"authentication failed: HTTP {e.status_code}") from e
        except openai.APITimeoutError as e:
            raise TransportError(f"request timed out after {self.timeout}s") from e
        except openai.APIStatusError as e:
            raise TransportError(f"API Error: {e.status_code}") from e
        except openai.APIError as e:
            raise TransportError(f"request failed: {e.__class__.__name__}") from e

        choices = getattr(resp, "choices", None)
        first = choices[0] if isinstance(choices, list) and choices else None
        message = getattr(first, "message", None)
        text = getattr(message, "content", None)
        if not isinstance(text, str):
            raise TransportError("response envelope has no completion text")
        return text


def build_invoker(settings: Dict[str, Any], api_key: str) -> BaseInvoker:
    """Creates the invoker for the resolved model settings (see config.model_settings)."""
    provider = str(settings.get("provider", "anthropic")).lower()
    if provider == "openai":
        return OpenAIInvoker(
            api_key=api_key,
            model_id=settings["id"],
            base_url=settings.get("base_url"),
            max_tokens=settings.get("max_tokens", 1000),
            timeout=settings.get("timeout_seconds", 30.0),
        )
    if provider == "anthropic":
        return AnthropicInvoker(
            api_key=api_key,
            model_id=settings["id"],
            base_url=settings.get("base_url"),
            api_version=settings.get("api_version", "2023-06-01"),
            max_tokens=settings.get("max_tokens", 1000),
            timeout=settings.get("timeout_seconds", 30.0),
        )
    raise ValueError(f"unknown model provider: {provider}")
