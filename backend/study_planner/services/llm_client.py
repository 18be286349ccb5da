"""Thin wrapper over the OpenAI-compatible chat completions API."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

import httpx
import openai

from study_planner.core.config import settings
from study_planner.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_SUFFIX = "/chat/completions"

Message = Dict[str, str]


def base_url_from_endpoint(api_endpoint: str) -> str:
    """Accept either a full .../chat/completions URL or a bare base URL."""
    endpoint = api_endpoint.strip().rstrip("/")
    if endpoint.endswith(CHAT_COMPLETIONS_SUFFIX):
        endpoint = endpoint[: -len(CHAT_COMPLETIONS_SUFFIX)]
    return endpoint


class ChatCompletionClient:
    """One request per call: no retries, bounded timeout, errors mapped to ExternalServiceError."""

    def __init__(
        self,
        *,
        api_key: str,
        model_name: str,
        api_endpoint: str,
        timeout: float | None = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.model_name = model_name
        self._client = openai.OpenAI(
            api_key=api_key,
            base_url=base_url_from_endpoint(api_endpoint),
            timeout=timeout if timeout is not None else settings.llm_timeout_seconds,
            max_retries=0,
            http_client=http_client,
        )

    def complete(
        self,
        messages: List[Message],
        *,
        max_tokens: int,
        temperature: float | None = None,
    ) -> Optional[str]:
        """Return the first choice's text, or None when the reply carries none."""
        params: Dict[str, object] = {
            "model": self.model_name,
            "messages": messages,
            "max_tokens": max_tokens,
        }
        if temperature is not None:
            params["temperature"] = temperature

        try:
            response = self._client.chat.completions.with_raw_response.create(**params)
        except openai.APITimeoutError as exc:
            logger.warning("Text-generation request timed out (model=%s)", self.model_name)
            raise ExternalServiceError("Text-generation service timed out") from exc
        except openai.APIStatusError as exc:
            payload = exc.response.text
            logger.warning(
                "Text-generation service returned HTTP %s (model=%s)", exc.status_code, self.model_name
            )
            raise ExternalServiceError(f"API returned an error: {payload}", payload=payload) from exc
        except openai.APIConnectionError as exc:
            logger.warning("Text-generation request failed: %s", exc)
            raise ExternalServiceError(f"Request failed: {exc}") from exc
        except openai.APIError as exc:
            raise ExternalServiceError(f"Failed to read response: {exc}") from exc

        return _first_choice_text(response)


def _first_choice_text(response) -> Optional[str]:
    """Extract the reply text; an empty choices list yields None."""
    payload = response.http_response.text
    try:
        completion = response.parse()
    except (ValueError, openai.APIResponseValidationError) as exc:
        logger.warning("Text-generation response could not be decoded")
        raise ExternalServiceError(f"Failed to read response: {exc}", payload=payload) from exc

    choices = getattr(completion, "choices", None)
    if choices is None:
        raise ExternalServiceError(f"Failed to read response: {payload}", payload=payload)
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    if message is None:
        raise ExternalServiceError(f"Failed to read response: {payload}", payload=payload)
    return message.content
