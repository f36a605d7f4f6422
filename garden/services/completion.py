"""
Completion client: thin async wrapper over an OpenAI-compatible
`/chat/completions` endpoint.

Every failure mode (transport, timeout, HTTP status, error body, missing
content, unparseable JSON) surfaces as `UpstreamUnavailableError` so callers
handle exactly one exception kind.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from garden.core.config import Settings
from garden.core.errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)


class CompletionClient:
    """Send a system (+ optional user) prompt, get back the reply text."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    def _client(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "CompletionClient":
        return cls(
            settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            model=settings.OPENAI_MODEL,
            timeout=settings.OPENAI_TIMEOUT,
            **kwargs,
        )

    async def complete(
        self,
        system_prompt: str,
        user_content: Optional[str] = None,
        *,
        temperature: float = 0.7,
        json_mode: bool = False,
    ) -> str:
        if not self.api_key:
            raise UpstreamUnavailableError("OPENAI_API_KEY is not set")

        messages: list[dict[str, str]] = [{"role": "system", "content": system_prompt}]
        if user_content is not None:
            messages.append({"role": "user", "content": user_content})

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        data = await self._post("/chat/completions", payload)

        if data.get("error"):
            err = data["error"]
            message = err.get("message") if isinstance(err, dict) else str(err)
            raise UpstreamUnavailableError(f"Upstream error: {message}")

        choices = data.get("choices") or []
        if not choices:
            raise UpstreamUnavailableError("Upstream response missing choices")
        message = (choices[0] or {}).get("message") or {}
        content = message.get("content")
        if not isinstance(content, str):
            raise UpstreamUnavailableError("Upstream response missing message content")
        return content

    async def complete_json(
        self,
        system_prompt: str,
        user_content: Optional[str] = None,
        *,
        temperature: float = 0.7,
    ) -> dict[str, Any]:
        content = await self.complete(
            system_prompt, user_content, temperature=temperature, json_mode=True
        )
        try:
            result = json.loads(content)
        except ValueError as exc:
            raise UpstreamUnavailableError(f"Upstream returned invalid JSON: {exc}") from exc
        if not isinstance(result, dict):
            raise UpstreamUnavailableError("Upstream JSON reply is not an object")
        return result

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = await self._client().post(url, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            logger.error("Completion request timed out after %ss", self.timeout)
            raise UpstreamUnavailableError(f"Upstream timeout: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error("Completion request failed: %s", exc)
            raise UpstreamUnavailableError(f"Upstream network error: {exc}") from exc

        if not response.is_success:
            logger.error(
                "Completion endpoint returned %s: %s",
                response.status_code, response.text[:400],
            )
            raise UpstreamUnavailableError(
                f"Upstream returned {response.status_code}",
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamUnavailableError("Upstream returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise UpstreamUnavailableError("Upstream body is not a JSON object")
        return data
