"""Chat client for an Ollama-compatible model endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol, runtime_checkable

import httpx

from reactAgent.utils.cancellation import CancellationToken
from reactAgent.utils.error_handler import ModelInvocationError, handle_model_error

if TYPE_CHECKING:
    from reactAgent.config.settings import Settings

LOGGER = logging.getLogger(__name__)

WireMessages = List[Dict[str, str]]


@runtime_checkable
class ChatModel(Protocol):
    """Anything that turns a ``[{role, content}]`` transcript into reply text."""

    async def chat(
        self,
        messages: WireMessages,
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        ...


class OllamaChatClient:
    """Non-streaming client for ``POST {endpoint}/api/chat``.

    A response carrying a populated ``error`` field, an HTTP error status or
    a missing ``message.content`` raises ``ModelInvocationError``.

    Args:
        endpoint: Base URL of the server, e.g. ``http://localhost:11434``
        model: Model identifier sent with every request
        timeout_ms: Per-request timeout in milliseconds
        temperature: Sampling temperature option
        top_p: Nucleus sampling option
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)
    """

    def __init__(
        self,
        endpoint: str,
        model: str,
        *,
        timeout_ms: int = 300_000,
        temperature: float = 0.7,
        top_p: float = 0.9,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.model = model
        self.timeout = timeout_ms / 1000
        self.options = {"temperature": temperature, "top_p": top_p}
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        settings: Optional["Settings"] = None,
    ) -> "OllamaChatClient":
        """Build a client from ``settings.model``; explicit endpoint and model win."""
        from reactAgent.config.settings import get_settings

        settings = (settings or get_settings()).model
        return cls(
            endpoint or settings.endpoint,
            model or settings.model,
            timeout_ms=settings.request_timeout_ms,
            temperature=settings.temperature,
            top_p=settings.top_p,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _post_chat(self, payload: Dict[str, Any]) -> str:
        url = f"{self.endpoint}/api/chat"
        try:
            async with self._client() as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            LOGGER.error(f"Chat request to {url} failed: {type(e).__name__}: {e}")
            raise ModelInvocationError(str(e) or type(e).__name__, user_message=handle_model_error(e)) from e
        except ValueError as e:
            raise ModelInvocationError(f"Invalid JSON from model endpoint: {e}") from e

        if data.get("error"):
            raise ModelInvocationError(f"Model endpoint error: {data['error']}")

        content = (data.get("message") or {}).get("content")
        if content is None:
            raise ModelInvocationError("Invalid response from model endpoint: missing message content")
        return content

    async def chat(
        self,
        messages: WireMessages,
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """Send the transcript and return the assistant reply text."""
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": dict(self.options),
        }
        LOGGER.info(f"Chat request: model={self.model}, messages={len(messages)}")

        if cancel_token is not None:
            reply = await cancel_token.run(self._post_chat(payload))
        else:
            reply = await self._post_chat(payload)

        LOGGER.debug(f"Chat reply ({len(reply)} chars)")
        return reply

    async def list_models(self) -> List[str]:
        """Return the model names installed on the server (``GET /api/tags``)."""
        url = f"{self.endpoint}/api/tags"
        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            LOGGER.error(f"Listing models from {url} failed: {e}")
            raise ModelInvocationError(str(e) or type(e).__name__, user_message=handle_model_error(e)) from e

        return [entry.get("name", "") for entry in data.get("models", []) if entry.get("name")]


__all__ = ["ChatModel", "OllamaChatClient", "WireMessages"]
