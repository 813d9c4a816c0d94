"""
GeminiService - Insight text generation using Google Gemini.

The composer only needs prompt in, text out; this adapter adds a minimum
delay between calls, backoff on quota errors and blocked-reply detection.
"""

import logging
import asyncio
import time
from typing import Optional

import google.generativeai as genai

from ..core.config import Config
from ..core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class GeminiService:
    """
    Rate-limited Gemini text generator.

    Example usage:
        gemini = GeminiService()
        text = await gemini.generate_text("Summarize the sponsorship in this video...")
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        requests_per_minute: Optional[int] = None
    ):
        """
        Args:
            api_key: Gemini API key (if None, uses Config.GEMINI_API_KEY)
            model: Gemini model to use (if None, uses Config.GEMINI_INSIGHT_MODEL)
            requests_per_minute: Rate limit (if None, uses Config.GEMINI_REQUESTS_PER_MINUTE)

        Raises:
            ValueError: If API key not found
        """
        self.api_key = api_key or Config.GEMINI_API_KEY
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY not found in environment")

        self.model_name = model or Config.GEMINI_INSIGHT_MODEL

        genai.configure(api_key=self.api_key)
        self.model = genai.GenerativeModel(self.model_name)

        self._last_call_time = 0.0
        self.set_rate_limit(requests_per_minute or Config.GEMINI_REQUESTS_PER_MINUTE)

        logger.info(
            f"GeminiService initialized with model: {self.model_name}, "
            f"rate limit: {self._requests_per_minute} req/min"
        )

    def set_rate_limit(self, requests_per_minute: int) -> None:
        """
        Change the minimum spacing between calls.

        Args:
            requests_per_minute: Allowed calls per minute
        """
        self._requests_per_minute = requests_per_minute
        self._min_delay = 60.0 / requests_per_minute
        logger.debug(f"Rate limit set to {requests_per_minute} req/min (delay: {self._min_delay:.1f}s)")

    async def generate_text(self, prompt: str, max_retries: int = 3) -> str:
        """
        Generate a free-text reply for a prompt.

        Args:
            prompt: Full prompt text
            max_retries: Maximum retries on rate limit errors

        Returns:
            Reply text

        Raises:
            ExternalServiceError: If the reply is blocked/empty, all retries
                fail, or a non-rate-limit error occurs
        """
        await self._rate_limit()

        retry_count = 0

        while retry_count <= max_retries:
            try:
                logger.debug(f"Generating text with Gemini (prompt: {prompt[:50]}...)")
                response = await self.model.generate_content_async(prompt)
                return self._extract_text(response)

            except ExternalServiceError:
                raise

            except Exception as e:
                if not self._is_rate_limit_error(e):
                    logger.error(f"Error generating text: {e}")
                    raise ExternalServiceError("gemini", str(e)) from e

                retry_count += 1
                if retry_count > max_retries:
                    logger.error("Max retries exceeded for text generation")
                    raise ExternalServiceError(
                        "gemini", f"Rate limit exceeded after {max_retries} retries: {e}"
                    ) from e

                # Exponential backoff: 15s, 30s, 60s
                retry_delay = 15 * (2 ** (retry_count - 1))
                logger.warning(f"Gemini quota hit, retry {retry_count}/{max_retries} in {retry_delay}s")
                await asyncio.sleep(retry_delay)

        raise ExternalServiceError("gemini", "Unknown error during text generation")

    async def _rate_limit(self) -> None:
        """Sleep until the minimum delay since the previous call has passed."""
        now = time.time()
        elapsed = now - self._last_call_time

        if elapsed < self._min_delay:
            wait_time = self._min_delay - elapsed
            logger.debug(f"Gemini spacing: sleeping {wait_time:.1f}s")
            await asyncio.sleep(wait_time)

        self._last_call_time = time.time()

    @staticmethod
    def _is_rate_limit_error(error: Exception) -> bool:
        error_str = str(error).lower()
        return "429" in error_str or "quota" in error_str or "rate" in error_str

    @staticmethod
    def _extract_text(response) -> str:
        """Return response text, rejecting blocked or empty candidates."""
        if not response.candidates:
            block_reason = getattr(response.prompt_feedback, 'block_reason', 'UNKNOWN')
            logger.error(f"Gemini response blocked or empty. Block reason: {block_reason}")
            raise ExternalServiceError("gemini", f"Response blocked: {block_reason}")

        candidate = response.candidates[0]
        finish_reason = getattr(candidate, 'finish_reason', None)
        if finish_reason not in (None, 1):
            logger.error(f"Gemini candidate blocked. Finish reason: {finish_reason}")
            raise ExternalServiceError("gemini", f"Response blocked: finish_reason={finish_reason}")

        if not getattr(candidate, 'content', None) or not getattr(candidate.content, 'parts', None):
            logger.error("Gemini response has no content parts")
            raise ExternalServiceError("gemini", "Response has no content")

        return response.text
