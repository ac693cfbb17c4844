from typing import Any, Dict, List, Optional

import requests

from llm_config import LLM_API_KEY, LLM_TIMEOUT


class AgentError(Exception):
    """Base class for failures talking to the model backend."""


class LLMConfigError(AgentError):
    """The backend cannot be called as configured (e.g. no API key)."""


class LLMResponseError(AgentError):
    """The call failed or the reply could not be used."""


class LLMQuotaError(LLMResponseError):
    """The provider rejected the call for quota / rate-limit reasons."""


def looks_like_quota_error(error: Exception) -> bool:
    if isinstance(error, requests.HTTPError) and error.response is not None:
        if error.response.status_code == 429:
            return True
    return "quota" in str(error).lower()


class OpenAIStyleClient:
    """Low-level HTTP client for OpenAI-style /v1/chat/completions."""

    def __init__(
        self,
        base_url: str,
        model_name: str,
        api_key: Optional[str] = LLM_API_KEY,
        timeout: float = LLM_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.model_name = model_name
        self.api_key = api_key
        self.timeout = timeout

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise LLMConfigError("LLM API key is not configured.")

    def chat(self, messages: List[Dict[str, Any]], **kwargs: Any) -> str:
        self.ensure_configured()
        headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        payload: Dict[str, Any] = {
            "model": self.model_name,
            "messages": messages,
            "temperature": kwargs.get("temperature", 0.7),
            "max_tokens": kwargs.get("max_tokens", 1024),
            "stream": False,
        }
        if kwargs.get("response_format"):
            payload["response_format"] = kwargs["response_format"]

        url = self.base_url + "/v1/chat/completions"
        resp = requests.post(url, headers=headers, json=payload, timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()

        # Standard OpenAI-style result
        return data["choices"][0]["message"]["content"] or ""
