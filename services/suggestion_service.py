"""Event title suggestions from OpenAI, with a local pattern-based fallback.

The remote call races a deadline. Whichever finishes first decides the
answer; a remote answer that shows up after the deadline is dropped.
"""

import logging
from collections import namedtuple
from datetime import datetime

from background_jobs import run_with_deadline
from services.ai_gateway import call_chat_text, get_openai_client
from text_helpers import clean_suggestion, fallback_title

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 3.0
MAX_EVENTS_FOR_CONTEXT = 10

SOURCE_AI = "ai"
SOURCE_FALLBACK = "fallback"

Suggestion = namedtuple("Suggestion", ["title", "source"])

SYSTEM_PROMPT = (
    "You are an assistant helping users create meaningful event titles. "
    "Based on the user's event history and current context, suggest a concise, "
    "professional event title of 1-4 words that fits their patterns. "
    "Respond with only the title, no explanations or additional text."
)


def current_time_context(now=None):
    hour = (now or datetime.now()).hour
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def build_event_history(events):
    if not events:
        return ""
    lines = ["Recent events:"]
    for event in events[:MAX_EVENTS_FOR_CONTEXT]:
        lines.append(f"- {event.name} ({event.date})")
    return "\n".join(lines)


def build_user_prompt(events, time_context, location_context=None):
    parts = []
    history = build_event_history(events)
    if history:
        parts.append(history)
        parts.append("")
    parts.append("Current context:")
    parts.append(f"- Time: {time_context}")
    if location_context:
        parts.append(f"- Location: {location_context}")
    return "\n".join(parts)


class SuggestionService:
    def __init__(self, enabled=True, timeout=DEFAULT_TIMEOUT_SECONDS, model=None, api_key=None, client_factory=None):
        self.enabled = enabled
        self.timeout = timeout
        self.model = model
        self._client_factory = client_factory or (lambda: get_openai_client(api_key, timeout=timeout))

    def suggest(self, recent_events, time_context=None, location_context=None):
        """Always returns a Suggestion; never raises for remote failures."""
        recent_events = list(recent_events or [])[:MAX_EVENTS_FOR_CONTEXT]
        time_context = time_context or current_time_context()

        if not self.enabled:
            logger.info("Title suggestions disabled, using local fallback")
            return self._fallback(recent_events, time_context)

        finished, raw = run_with_deadline(
            self._fetch_remote,
            self.timeout,
            args=(recent_events, time_context, location_context),
            on_error=lambda exc: logger.warning("Title suggestion failed: %s", exc),
        )
        if not finished:
            logger.warning("Title suggestion timed out after %.1fs, using fallback", self.timeout)
            return self._fallback(recent_events, time_context)
        if not raw or not raw.strip():
            return self._fallback(recent_events, time_context)
        return Suggestion(clean_suggestion(raw), SOURCE_AI)

    def _fetch_remote(self, recent_events, time_context, location_context):
        return call_chat_text(
            SYSTEM_PROMPT,
            build_user_prompt(recent_events, time_context, location_context),
            client=self._client_factory(),
            model=self.model,
            logger=logger,
        )

    def _fallback(self, recent_events, time_context):
        return Suggestion(fallback_title([e.name for e in recent_events], time_context), SOURCE_FALLBACK)
