import json
import logging
import re
from typing import Any, Dict, List, Optional

from agents.base import (
    LLMQuotaError,
    LLMResponseError,
    OpenAIStyleClient,
    looks_like_quota_error,
)
from agents.prompt_extractor import EXTRACTOR_PROMPT_V1, EXTRACTOR_TEST_REPLY
from llm_config import LLM_BASE_URL, UI_TEST_MODE, VISION_MODEL_NAME
from models import REPORT_STATUSES, coerce_parameters

logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)

REQUIRED_FIELDS = ("parameters", "status", "suggestions")


class ExtractionStructureError(LLMResponseError):
    """The reply parsed but lacks parameters, status or suggestions."""


def _strip_to_json_object(text: str) -> str:
    s = (text or "").strip()
    m = FENCE_RE.match(s)
    if m and m.group(1):
        s = m.group(1).strip()
    start = s.find("{")
    end = s.rfind("}")
    if start != -1 and end > start:
        s = s[start:end + 1]
    return s


def parse_extraction_reply(text: str) -> Dict[str, Any]:
    """
    Turn the model's reply into {"parameters", "status", "suggestions"}.

    Tolerates markdown fences and chatter around the JSON object. Every
    parameter is re-validated here no matter what the model claims.
    """
    try:
        data = json.loads(_strip_to_json_object(text))
    except json.JSONDecodeError as e:
        raise LLMResponseError(f"Reply is not valid JSON: {e}") from e

    if not isinstance(data, dict) or any(data.get(k) in (None, "") for k in REQUIRED_FIELDS):
        raise ExtractionStructureError("Invalid data structure from the model.")

    status = data["status"] if data["status"] in REPORT_STATUSES else "Unknown"
    suggestions = data["suggestions"]
    if isinstance(suggestions, str):
        suggestions = [suggestions]
    if not isinstance(suggestions, list):
        raise ExtractionStructureError("Invalid data structure from the model.")

    return {
        "parameters": coerce_parameters(data["parameters"]),
        "status": status,
        "suggestions": [str(s) for s in suggestions if str(s).strip()],
    }


class ReportExtractorAgent:
    """
    Reads a photo of a water test sheet and returns structured readings.
    """

    def __init__(self, client: Optional[OpenAIStyleClient] = None, test_mode: bool = UI_TEST_MODE):
        self.client = client or OpenAIStyleClient(LLM_BASE_URL, VISION_MODEL_NAME)
        self.test_mode = test_mode

    def build_messages(self, image_base64: str, mime_type: str) -> List[Dict[str, Any]]:
        return [
            {
                "role": "user",
                "content": [
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{mime_type};base64,{image_base64}"},
                    },
                    {"type": "text", "text": EXTRACTOR_PROMPT_V1.strip()},
                ],
            }
        ]

    def analyze_report_image(self, image_base64: str, mime_type: str = "image/jpeg") -> Dict[str, Any]:
        if self.test_mode:
            return parse_extraction_reply(EXTRACTOR_TEST_REPLY)

        self.client.ensure_configured()
        messages = self.build_messages(image_base64, mime_type)
        try:
            reply = self.client.chat(
                messages,
                temperature=0.2,
                response_format={"type": "json_object"},
            )
            return parse_extraction_reply(reply)
        except ExtractionStructureError as e:
            logger.error("Extraction reply missing required fields: %s", e)
            raise ExtractionStructureError(f"Failed to analyze image. API error: {e}") from e
        except Exception as e:
            logger.error("Error analyzing water report image: %s", e)
            if looks_like_quota_error(e):
                raise LLMQuotaError(
                    "API request failed due to quota limits. Please check your API plan."
                ) from e
            raise LLMResponseError(f"Failed to analyze image. API error: {e}") from e


report_extractor_agent = ReportExtractorAgent()
