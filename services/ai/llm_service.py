# services/ai/llm_service.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import httpx

from config.settings import AppSettings
from services.ai.errors import InferenceTransportError, RemoteAPIError

logger = logging.getLogger(__name__)


# ============================================================================
# PUBLIC INTERFACE
# ============================================================================

@dataclass(frozen=True)
class GenerationParams:
    max_tokens: int = 2048
    temperature: Optional[float] = None  # None = provider default


class InferenceGateway(Protocol):
    model: str

    async def complete(self, prompt: str, params: GenerationParams) -> str:
        """Send one user message, return the assistant's text."""


@dataclass
class InferenceConfig:
    api_key: str
    endpoint: str
    model: str
    timeout_s: float = 120.0

    @staticmethod
    def from_settings(settings: AppSettings) -> "InferenceConfig":
        return InferenceConfig(
            api_key=settings.api_key,
            endpoint=settings.endpoint,
            model=settings.model,
            timeout_s=settings.timeout_s,
        )


# ============================================================================
# PROVIDER CLIENT
# ============================================================================

class ChatCompletionsClient:
    """
    Azure AI inference style `/chat/completions` client (GitHub Models).

    Every call is bounded by `timeout_s` and runs as a plain awaitable, so
    cancelling the calling task aborts the outbound request.
    """

    def __init__(self, cfg: InferenceConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cfg = cfg
        self.model = cfg.model
        self._transport = transport

    def _build_body(self, prompt: str, params: GenerationParams) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": params.max_tokens,
        }
        if params.temperature is not None:
            body["temperature"] = params.temperature
        return body

    async def _post(self, body: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.cfg.timeout_s, transport=self._transport
        ) as client:
            return await client.post(
                f"{self.cfg.endpoint.rstrip('/')}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.cfg.api_key}",
                    "Content-Type": "application/json",
                },
                json=body,
            )

    @staticmethod
    def _error_payload(r: httpx.Response) -> Any:
        try:
            data = r.json()
        except ValueError:
            return {"message": r.text or r.reason_phrase, "status": r.status_code}
        if isinstance(data, dict) and data.get("error") is not None:
            return data["error"]
        return data

    @staticmethod
    def _extract_text(data: Any) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return ""
        return content or ""

    async def complete(self, prompt: str, params: GenerationParams) -> str:
        body = self._build_body(prompt, params)
        try:
            r = await asyncio.wait_for(self._post(body), timeout=self.cfg.timeout_s)
        except asyncio.TimeoutError as e:
            raise InferenceTransportError(
                f"Inference call exceeded deadline of {self.cfg.timeout_s:g}s"
            ) from e
        except httpx.HTTPError as e:
            raise InferenceTransportError(str(e) or type(e).__name__) from e

        if not r.is_success:
            raise RemoteAPIError(r.status_code, self._error_payload(r))

        try:
            data = r.json()
        except ValueError as e:
            raise InferenceTransportError("Inference API returned a non-JSON body") from e

        text = self._extract_text(data)
        logger.debug("inference_complete model=%s chars=%d", self.model, len(text))
        return text


def build_gateway(settings: AppSettings) -> InferenceGateway:
    return ChatCompletionsClient(InferenceConfig.from_settings(settings))
