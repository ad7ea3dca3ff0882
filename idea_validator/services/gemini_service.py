# idea_validator/services/gemini_service.py
import asyncio # For running synchronous SDK calls in a thread pool
import json
import logging
from typing import Any, Optional

import google.generativeai as genai
from google.api_core.exceptions import DeadlineExceeded, GoogleAPIError, PermissionDenied, ResourceExhausted
from google.generativeai.types import HarmBlockThreshold, HarmCategory

from idea_validator.core.config import settings
from idea_validator.core.exceptions import AnalysisFailed

logger = logging.getLogger(__name__)

class GeminiService:
    """
    Model provider backed by Google Gemini.
    Takes a prompt and a response schema and returns the decoded JSON object.
    Every failure surfaces as AnalysisFailed; nothing is retried here.
    """
    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.model = None
        self.model_name = model_name or settings.GEMINI_MODEL_NAME
        api_key = api_key or settings.GEMINI_API_KEY
        if not api_key:
            logger.error("GeminiService: GEMINI_API_KEY is not configured. Service will be non-operational.")
            return

        try:
            genai.configure(api_key=api_key)
            self.model = genai.GenerativeModel(self.model_name)
            logger.info(f"GeminiService initialized successfully with model: {self.model_name}.")
        except Exception as e:
            logger.error(f"GeminiService: Failed to configure or initialize GenerativeModel "
                         f"({self.model_name}). Error: {e}", exc_info=True)
            # self.model remains None, subsequent calls fail with AnalysisFailed.

    async def generate_structured(self, prompt: str, response_schema: dict[str, Any]) -> dict[str, Any]:
        """
        Asks Gemini for a JSON object constrained by ``response_schema``.

        Args:
            prompt: The full natural-language prompt.
            response_schema: OpenAPI-subset schema the output must follow.

        Returns:
            The decoded JSON object. Contract checks are the caller's job.

        Raises:
            AnalysisFailed: On configuration, quota, permission, timeout, API,
                content-blocking or decoding failures.
        """
        if not self.model:
            logger.error("GeminiService.generate_structured: Model not initialized due to configuration issues.")
            raise AnalysisFailed("Gemini AI service is not properly configured. Please check API key and server logs.",
                                 component="gemini")

        try:
            # The SDK is synchronous; keep it off the event loop. If the awaiting
            # request is cancelled the thread's result is simply discarded.
            response = await asyncio.to_thread(
                self.model.generate_content,
                prompt,
                generation_config=self._get_generation_config(response_schema),
                safety_settings=self._get_safety_settings(),
                request_options={"timeout": settings.GEMINI_TIMEOUT_SECONDS},
            )
        except ResourceExhausted as e:
            logger.error(f"GeminiService: Quota exhausted. Error: {e}", exc_info=True)
            raise AnalysisFailed(f"Gemini API quota exceeded. Details: {e.message}", component="gemini") from e
        except PermissionDenied as e:
            logger.error(f"GeminiService: Permission denied. Check API key and IAM permissions. Error: {e}", exc_info=True)
            raise AnalysisFailed(f"Gemini API permission denied. Details: {e.message}", component="gemini") from e
        except DeadlineExceeded as e:
            logger.error(f"GeminiService: Request timed out after {settings.GEMINI_TIMEOUT_SECONDS}s. Error: {e}")
            raise AnalysisFailed("Gemini API request timed out.", component="gemini") from e
        except GoogleAPIError as e:
            logger.error(f"GeminiService: A Google API error occurred. Error: {e}", exc_info=True)
            raise AnalysisFailed(f"An error occurred with the Gemini API: {getattr(e, 'message', None) or str(e)}",
                                 component="gemini") from e
        except Exception as e:
            logger.critical(f"GeminiService: An unexpected error occurred during Gemini call. Error: {e}", exc_info=True)
            raise AnalysisFailed(f"An unexpected error occurred while contacting the Gemini service: {e}",
                                 component="gemini") from e

        return self._process_gemini_response(response)

    def _get_generation_config(self, response_schema: dict[str, Any]) -> dict:
        """Generation configuration forcing JSON output that follows the schema."""
        return {
            "temperature": settings.GEMINI_TEMPERATURE,
            "top_p": 0.95,
            "top_k": 40,
            "max_output_tokens": settings.GEMINI_MAX_OUTPUT_TOKENS,
            "candidate_count": 1,
            "response_mime_type": "application/json",
            "response_schema": response_schema,
        }

    def _get_safety_settings(self) -> dict:
        return {
            HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
            HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
            HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
            HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
        }

    def _process_gemini_response(self, response) -> dict[str, Any]:
        """Extracts and decodes the JSON payload from a Gemini response."""
        if not response.candidates:
            block_reason_msg = "Content generation blocked by AI provider."
            if response.prompt_feedback and response.prompt_feedback.block_reason:
                block_reason_msg = (f"Content generation blocked due to safety policy: "
                                    f"{response.prompt_feedback.block_reason.name}.")
            logger.warning(f"GeminiService: {block_reason_msg}")
            raise AnalysisFailed(block_reason_msg, component="gemini")

        try:
            generated_text = response.text.strip()
        except (AttributeError, ValueError) as e: # .text raises ValueError when the candidate has no text part
            logger.error("GeminiService: Malformed response from Gemini, no text part available.", exc_info=True)
            raise AnalysisFailed("AI service returned a malformed response.", component="gemini") from e

        if not generated_text:
            logger.warning("GeminiService: Received an empty text response from Gemini.")
            raise AnalysisFailed("AI service returned an empty response.", component="gemini")

        try:
            payload = json.loads(generated_text)
        except json.JSONDecodeError as e:
            logger.error(f"GeminiService: Response is not valid JSON ({e.msg} at position {e.pos}).")
            logger.debug(f"GeminiService: Undecodable response text: {generated_text[:500]}")
            raise AnalysisFailed("AI service returned output that could not be parsed.", component="gemini") from e

        if not isinstance(payload, dict):
            logger.error(f"GeminiService: Expected a JSON object, got {type(payload).__name__}.")
            raise AnalysisFailed("AI service returned output that could not be parsed.", component="gemini")

        logger.info(f"GeminiService: Successfully decoded structured response. Content length: {len(generated_text)}")
        return payload


_gemini_service: Optional[GeminiService] = None


def get_gemini_service() -> GeminiService:
    """Lazily created singleton, used as a FastAPI dependency."""
    global _gemini_service
    if _gemini_service is None:
        _gemini_service = GeminiService()
    return _gemini_service
