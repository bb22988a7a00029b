"""One-shot chat-completions call to the matching service (OpenRouter by default)."""
from __future__ import annotations

from typing import Any

import openai
from openai import OpenAI

from jobfit.config import MatcherSettings
from jobfit.errors import ServiceNotConfigured, ServiceTimeout, ServiceUnavailable
from jobfit.log import get_logger
from jobfit.prompt import MatchRequest

log = get_logger(__name__)


class MatchingClient:
    """Sends a composed request and returns the raw response envelope.

    No retries: a model call is slow and billed, so a failure is reported
    once and the caller degrades to no recommendations.
    """

    def __init__(self, settings: MatcherSettings, openai_client: Any = None) -> None:
        self.settings = settings
        self._client = openai_client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.settings.configured:
                raise ServiceNotConfigured("OpenRouter API key is not configured")
            self._client = OpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
                max_retries=0,
                default_headers={
                    "HTTP-Referer": self.settings.referer,
                    "X-Title": self.settings.app_title,
                },
            )
        return self._client

    def send(self, request: MatchRequest) -> dict[str, Any]:
        client = self._get_client()
        log.info(
            "Requesting recommendations from %s for %d job(s)",
            self.settings.model,
            len(request.job_ids),
        )
        try:
            resp = client.chat.completions.create(
                model=self.settings.model,
                messages=request.messages,
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_tokens,
            )
        except openai.APITimeoutError as exc:
            raise ServiceTimeout(f"Matching service timed out after {self.settings.timeout:.0f}s") from exc
        except openai.APIStatusError as exc:
            raise ServiceUnavailable(f"Matching service returned HTTP {exc.status_code}") from exc
        except openai.OpenAIError as exc:
            raise ServiceUnavailable(f"Matching service request failed: {exc}") from exc

        return resp.model_dump() if hasattr(resp, "model_dump") else resp
