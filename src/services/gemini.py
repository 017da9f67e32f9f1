import logging
import time
from typing import Any, Optional

import httpx

from config import settings
from services.errors import NetworkError, ResponseShapeError

logger = logging.getLogger(__name__)


class GeminiService:
    """Single-shot client for the Gemini ``generateContent`` endpoint.

    The API key travels as the ``key`` query parameter. One request per call,
    no retries. With no timeout configured the request waits indefinitely.
    """

    def __init__(
        self,
        api_base: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_base = (api_base or settings.gemini_api_base).rstrip("/")
        self.model = model or settings.gemini_model
        self.timeout = timeout if timeout is not None else settings.gemini_timeout
        self._transport = transport

    def _build_url(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    def _build_headers(self) -> dict:
        return {"Content-Type": "application/json"}

    def _build_payload(self, prompt: str) -> dict:
        return {"contents": [{"parts": [{"text": prompt}]}]}

    async def generate(self, prompt: str, api_key: str) -> tuple[str, float]:
        url = self._build_url()
        payload = self._build_payload(prompt)

        start_time = time.time()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    url,
                    params={"key": api_key},
                    json=payload,
                    headers=self._build_headers(),
                )
            except httpx.HTTPError as e:
                logger.error(f"Gemini API request to {url} failed: {e}")
                raise NetworkError(f"Gemini API request failed: {e}") from e
        latency = time.time() - start_time

        if not response.is_success:
            logger.warning(f"Gemini API returned HTTP {response.status_code} for model {self.model}")

        try:
            result = response.json()
        except ValueError as e:
            logger.error(f"Gemini response was not JSON: {response.text[:500]}")
            raise ResponseShapeError("Gemini response body is not JSON", payload=response.text) from e

        logger.debug(f"Gemini raw response: {result}")
        return self._parse_response(result), latency

    def _parse_response(self, result: Any) -> str:
        try:
            text = result["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Gemini response didn't take expected format: {result}")
            raise ResponseShapeError("Gemini response has no candidate text", payload=result) from e

        if not isinstance(text, str):
            logger.error(f"Gemini candidate text is not a string: {result}")
            raise ResponseShapeError("Gemini candidate text is not a string", payload=result)
        return text
