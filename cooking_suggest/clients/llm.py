import httpx
from typing import Any, Dict, List, Optional

from cooking_suggest.core import config


class ChatCompletionsClient:
    """Minimal client for an OpenAI-compatible /chat/completions endpoint."""

    def __init__(
        self,
        base_url: str = "https://api.cerebras.ai/v1",
        api_key: str = "",
        model: str = "llama3.1-8b",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    async def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.8,
        max_tokens: int = 800,
        timeout_s: float = 60,
    ) -> str:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        async with httpx.AsyncClient(timeout=timeout_s, transport=self.transport) as client:
            r = await client.post(f"{self.base_url}/chat/completions", json=payload, headers=self._headers())
            r.raise_for_status()
            data = r.json()

        # {"choices": [{"message": {"role": "assistant", "content": "..."}}], ...}
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ValueError(f"Malformed completion response: {e!r}") from e
        if not isinstance(content, str):
            raise ValueError("Malformed completion response: content is not text")
        return content

    async def ping(self, timeout_s: float = 2.0) -> None:
        async with httpx.AsyncClient(timeout=timeout_s, transport=self.transport) as client:
            r = await client.get(f"{self.base_url}/models", headers=self._headers())
            r.raise_for_status()


def build_client() -> ChatCompletionsClient:
    return ChatCompletionsClient(
        base_url=config.LLM_BASE_URL,
        api_key=config.LLM_API_KEY,
        model=config.LLM_MODEL,
    )
