"""
AI health tip generation over the Gemini generateContent REST endpoint.

The response text is untrusted: fences are stripped, the body must parse as a
JSON array, and every element is validated before anything is inserted.
"""

import json
import re
import logging
import httpx
from pydantic import ValidationError
from typing import Any, Dict, List, Optional

from admin_panel.config.settings import settings
from admin_panel.modules.tips.schemas import GeneratedTip, TipCreate

logger = logging.getLogger(__name__)

DEFAULT_TIP_COUNT = 5
MAX_TIP_COUNT = 20

_FENCE_RE = re.compile(r"```(?:json)?\n?")


class TipGenerationError(Exception):
    pass


def clamp_count(value: Any) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        return DEFAULT_TIP_COUNT
    return min(max(count, 1), MAX_TIP_COUNT)


def build_prompt(count: int) -> str:
    return (
        f"Generate {count} unique health tips. Return ONLY valid JSON array: "
        '[{"title":"...","content":"...","category":"health","priority":5}]. '
        "Categories: health, nutrition, fitness, mental, product."
    )


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def extract_text(payload: Dict[str, Any]) -> str:
    """candidates[0].content.parts[0].text of a generateContent response"""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise TipGenerationError("AI response contained no candidates")
    if not isinstance(text, str) or not text.strip():
        raise TipGenerationError("AI response text was empty")
    return text


def parse_tips(text: str) -> List[TipCreate]:
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise TipGenerationError(f"AI response was not valid JSON: {e}")
    if not isinstance(data, list):
        raise TipGenerationError("AI response was not a JSON array")
    if not data:
        raise TipGenerationError("AI response contained no tips")
    tips = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise TipGenerationError(f"Tip {index + 1} is not an object")
        try:
            tips.append(GeneratedTip(**item).to_create())
        except ValidationError as e:
            raise TipGenerationError(f"Tip {index + 1} is invalid: {e.errors()[0]['msg']}")
    return tips


class TipGenerator:
    def __init__(self, http_client: httpx.Client, endpoint: Optional[str] = None):
        self.http_client = http_client
        self.endpoint = endpoint or settings.gemini_endpoint

    def request_text(self, prompt: str, api_key: str) -> str:
        try:
            response = self.http_client.post(
                self.endpoint,
                params={"key": api_key},
                json={"contents": [{"parts": [{"text": prompt}]}]},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise TipGenerationError(f"AI service returned HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            raise TipGenerationError(f"AI service request failed: {e}")
        except ValueError:
            raise TipGenerationError("AI service returned a non-JSON body")
        return extract_text(payload)

    def generate(self, count: int, api_key: Optional[str]) -> List[TipCreate]:
        """Ask for `count` tips and return them validated, active and ready to insert"""
        if not api_key:
            raise TipGenerationError("No Gemini API key saved on your admin profile")
        count = clamp_count(count)
        logger.info(f"Requesting {count} AI tips")
        tips = parse_tips(self.request_text(build_prompt(count), api_key))
        logger.info(f"AI returned {len(tips)} valid tips")
        return tips
