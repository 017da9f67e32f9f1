"""
Keep/delete classification of brand labels.

All distinct brands go to Gemini in one prompt; the answer is expected to be a
JSON object mapping each brand to "keep" or "delete", possibly wrapped in a
markdown code fence.
"""

import json
import logging
from typing import Any, Dict, Optional, Sequence

from prompts import load_prompt
from services.errors import DecisionParseError
from services.gemini import GeminiService
from services.text_utils import unwrap_code_fence

logger = logging.getLogger(__name__)

CLASSIFY_PROMPT_ID = "listing_filter/classify_brands"


def build_classification_prompt(brands: Sequence[str]) -> str:
    return load_prompt(CLASSIFY_PROMPT_ID, brands=list(brands))


def parse_decisions(text: str) -> Dict[str, Any]:
    """Parse cleaned model text into a brand -> decision mapping.

    Values are returned untouched; anything other than "delete" is treated as
    keep when the decisions are applied.
    """
    try:
        decisions = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing Gemini response as JSON: {e}; raw text: {text!r}")
        raise DecisionParseError(f"Gemini response is not valid JSON: {e}", raw_text=text) from e

    if not isinstance(decisions, dict):
        logger.error(f"Gemini response is JSON but not an object: {text!r}")
        raise DecisionParseError("Gemini response is not a JSON object", raw_text=text)
    return decisions


class BrandClassifier:
    def __init__(self, gemini_service: Optional[GeminiService] = None):
        self.gemini_service = gemini_service or GeminiService()

    async def classify(self, brands: Sequence[str], api_key: str) -> Dict[str, Any]:
        distinct = list(dict.fromkeys(brands))
        if not distinct:
            logger.info("No brand names found.")
            return {}

        prompt = build_classification_prompt(distinct)
        text, latency = await self.gemini_service.generate(prompt, api_key)
        logger.info(f"Classified {len(distinct)} brands in {latency:.2f}s")

        return parse_decisions(unwrap_code_fence(text))
