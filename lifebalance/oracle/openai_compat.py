import http.client
import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from ..core.errors import OracleError
from ..core.events import Polarity
from ..metrics import track_oracle_duration, track_oracle_request
from .base import RatingOracle
from .models import RatingSuggestion

# Set up a logger for this module
logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.groq.com/openai"
DEFAULT_MODEL = "llama-3.3-70b-versatile"

SYSTEM_PROMPT = """You are an expert at rating the impact of life events on a scale of 1-20.

Rating Scale:
- 1-5: Minor impact (small annoyance or small win)
- 6-10: Moderate impact (noticeable effect on your day)
- 11-15: Significant impact (affects your week or emotional state)
- 16-20: Life-changing impact (major life events)

Consider: emotional weight, practical consequences, duration of impact, and context.

Respond ONLY with a JSON object in this exact format:
{"rating": <number 1-20>, "reasoning": "<brief 1 sentence explanation>"}"""


class OpenAICompatRatingOracle(RatingOracle):
    """
    Rating oracle backed by an OpenAI-compatible chat completions endpoint
    (Groq by default).

    It is designed to be resilient to configuration and network errors:
    without an API key, or when the endpoint fails, suggest() returns None
    and the caller proceeds with a manually chosen magnitude.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = 10.0,
        max_retries: int = 1,
        retry_backoff: float = 0.5,
    ) -> None:
        self.base = base_url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.retry_backoff = retry_backoff
        self._ready = bool(api_key)

        if self._ready:
            logger.info(f"Rating oracle configured for model '{self.model}' at {self.base}")
        else:
            logger.warning("No API key for rating oracle. Suggestions are unavailable.")

    def is_ready(self) -> bool:
        """Returns True if the oracle has the credentials it needs."""
        return self._ready

    def _build_request(self, description: str, polarity: Polarity) -> urllib.request.Request:
        kind = "Misfortune (negative)" if polarity is Polarity.NEGATIVE else "Good Fortune (positive)"
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": f'Event Type: {kind}\nDescription: "{description}"\n\nRate this event\'s impact (1-20):',
                },
            ],
            "temperature": 0.3,
            "max_tokens": 150,
            "response_format": {"type": "json_object"},
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        return urllib.request.Request(
            f"{self.base}/v1/chat/completions",
            data=json.dumps(payload).encode("utf-8"),
            headers=headers,
            method="POST",
        )

    def _post(self, req: urllib.request.Request) -> Dict[str, Any]:
        """
        Send the request, retrying network errors and 5xx responses.

        Raises:
            OracleError: When every attempt fails or the response is not JSON
        """
        attempts = self.max_retries + 1
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                with urllib.request.urlopen(req, timeout=self.timeout) as response:
                    body = response.read().decode("utf-8")
                return json.loads(body)
            except urllib.error.HTTPError as e:
                last_error = e
                if e.code < 500:
                    raise OracleError(f"oracle rejected request with status {e.code}") from e
            except (OSError, http.client.HTTPException) as e:
                last_error = e
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise OracleError(f"oracle returned a non-JSON body: {e}") from e

            if attempt < attempts:
                logger.warning(f"Oracle request failed (attempt {attempt}/{attempts}): {last_error}")
                time.sleep(self.retry_backoff * attempt)

        raise OracleError(f"oracle unreachable after {attempts} attempts: {last_error}")

    @staticmethod
    def _parse(resp_data: Dict[str, Any]) -> RatingSuggestion:
        try:
            content = resp_data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise OracleError(f"unexpected oracle response shape: {e}") from e
        if not content:
            raise OracleError("empty oracle response")

        try:
            return RatingSuggestion.model_validate(json.loads(content))
        except (json.JSONDecodeError, TypeError) as e:
            raise OracleError(f"oracle content is not JSON: {e}") from e
        except PydanticValidationError as e:
            raise OracleError(f"oracle content out of contract: {e}") from e

    def suggest(self, description: str, polarity: Polarity) -> Optional[RatingSuggestion]:
        description = (description or "").strip()
        if not description:
            return None

        if not self.is_ready():
            track_oracle_request("unavailable")
            return None

        try:
            with track_oracle_duration():
                resp_data = self._post(self._build_request(description, polarity))
            suggestion = self._parse(resp_data)
        except OracleError as e:
            logger.error(f"Rating suggestion unavailable: {e}")
            track_oracle_request("error")
            return None

        track_oracle_request("ok")
        return suggestion
