import json
import logging
import time
from typing import Callable, Iterator, Optional

import requests

from docsync.domain.stream_event import StreamEvent
from docsync.exceptions import ChatStreamError
from docsync.services.stream_aggregator import DEFAULT_FLUSH_INTERVAL_SECONDS, aggregate_stream

logger = logging.getLogger(__name__)


class ChatStreamClient:
    """Streams chat completions from an OpenAI-compatible endpoint.

    Requires http_client callable (normally `requests.post`) for dependency
    injection; it must accept `stream=True` and return a response exposing
    `raise_for_status()` and `iter_lines(decode_unicode=True)`.
    """

    def __init__(
        self,
        *,
        http_client: Callable,
        api_url: str,
        api_key: Optional[str],
        model: str,
        temperature: float = 0.1,
        timeout: int = 60,
    ):
        self.http_client = http_client
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.timeout = timeout

    @property
    def completions_url(self) -> str:
        return f"{self.api_url}/chat/completions"

    def _payload(self, messages: list[dict], max_tokens: Optional[int]) -> dict:
        payload = {
            "model": self.model,
            "temperature": self.temperature,
            "messages": messages,
            "stream": True,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        return payload

    @staticmethod
    def parse_line(line) -> Optional[StreamEvent]:
        """Turn one server-sent-events line into a StreamEvent, or None to skip it.

        Raises ValueError when a `data:` payload is not a chat completion chunk.
        """
        if isinstance(line, bytes):
            line = line.decode("utf-8")
        if not line or not line.startswith("data:"):
            return None
        data = line[len("data:"):].strip()
        if not data or data == "[DONE]":
            return None
        chunk = json.loads(data)
        if not isinstance(chunk, dict):
            raise ValueError(f"expected a JSON object, got {type(chunk).__name__}")
        choices = chunk.get("choices") or []
        if not isinstance(choices, list):
            raise ValueError("'choices' is not a list")
        if not choices:
            return None
        choice = choices[0]
        if not isinstance(choice, dict):
            raise ValueError("choice is not an object")
        delta = choice.get("delta") or {}
        if not isinstance(delta, dict):
            raise ValueError("'delta' is not an object")
        return StreamEvent(content=delta.get("content"), finish_reason=choice.get("finish_reason"))

    def stream_events(self, messages: list[dict], max_tokens: Optional[int] = None) -> Iterator[StreamEvent]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        logger.info("chat_stream - model: %s", self.model)
        try:
            resp = self.http_client(
                self.completions_url,
                headers=headers,
                json=self._payload(messages, max_tokens),
                stream=True,
                timeout=self.timeout,
            )
            # Released however iteration ends, including an early stop by the consumer.
            try:
                resp.raise_for_status()
                for line in resp.iter_lines(decode_unicode=True):
                    if isinstance(line, str) and line.strip() == "data: [DONE]":
                        return
                    try:
                        event = self.parse_line(line)
                    except ValueError as e:
                        logger.warning("Malformed stream line from %s: %r", self.completions_url, line)
                        raise ChatStreamError(self.completions_url, e) from e
                    if event is not None:
                        yield event
            finally:
                resp.close()
        except requests.exceptions.RequestException as e:
            raise ChatStreamError(self.completions_url, e) from e

    def chat_stream(
        self,
        messages: list[dict],
        callback: Callable[[str], None],
        interval_seconds: float = DEFAULT_FLUSH_INTERVAL_SECONDS,
        max_tokens: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> str:
        """Stream a completion, handing text to `callback` at most every `interval_seconds`.

        Returns the full completion text.
        """
        if not callable(callback):
            raise TypeError("Chat stream callback is not a function.")
        return aggregate_stream(
            self.stream_events(messages, max_tokens),
            callback,
            interval_seconds=interval_seconds,
            clock=clock,
        )
