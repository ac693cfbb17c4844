# llm_config.py
"""
Central configuration for the hosted model used by Digital Aqua.

- UI_TEST_MODE: if True, do not call any real model, return canned outputs.
- LLM_BASE_URL: base URL of the OpenAI-compatible server.
- VISION_MODEL_NAME: multimodal model that reads the water test report photo.
- ADVISOR_MODEL_NAME: text model that writes the threat forecast.
- LLM_API_KEY: credential; both agents refuse to call out without it.
"""

import os


def _bool_env(name: str, default: str = "false") -> bool:
    value = os.getenv(name, default).strip().lower()
    return value in {"1", "true", "yes", "y"}


# If True, do not call any real model and always return canned outputs.
UI_TEST_MODE: bool = _bool_env("UI_TEST_MODE", "false")

# Base URL for the OpenAI-compatible server
LLM_BASE_URL: str = os.getenv("LLM_BASE_URL", "https://api.openai.com").rstrip("/")

# Underlying base model name
BASE_MODEL_NAME: str = os.getenv("BASE_MODEL_NAME", "gpt-4o-mini")

# Logical model names for the two agents
VISION_MODEL_NAME: str = os.getenv("VISION_MODEL_NAME", BASE_MODEL_NAME)
ADVISOR_MODEL_NAME: str = os.getenv("ADVISOR_MODEL_NAME", BASE_MODEL_NAME)

LLM_API_KEY: str | None = os.getenv("LLM_API_KEY") or None

# HTTP timeout
try:
    LLM_TIMEOUT: float = float(os.getenv("LLM_TIMEOUT", "60"))
except ValueError:
    LLM_TIMEOUT = 60.0
