import threading
from datetime import datetime
from types import SimpleNamespace

from services.event_types import EventEntry
from services.suggestion_service import (
    SOURCE_AI,
    SOURCE_FALLBACK,
    SuggestionService,
    build_user_prompt,
    current_time_context,
)


class FakeCompletions:
    def __init__(self, content=None, error=None, wait_for=None):
        self.content = content
        self.error = error
        self.wait_for = wait_for
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.wait_for is not None:
            self.wait_for.wait(5)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def _events(*names):
    return [EventEntry(i, name, "3/10/2025") for i, name in enumerate(names, start=1)]


def test_remote_answer_is_cleaned_up():
    completions = FakeCompletions(content='"Title: Weekly Planning"\nbecause you plan a lot')
    service = SuggestionService(timeout=2, model="gpt-4o-mini", client_factory=lambda: _client(completions))
    suggestion = service.suggest(_events("Team Sync"), time_context="morning")
    assert suggestion == ("Weekly Planning", SOURCE_AI)
    sent = completions.requests[0]
    assert sent["model"] == "gpt-4o-mini"
    assert "- Team Sync (3/10/2025)" in sent["messages"][1]["content"]


def test_slow_remote_falls_back_and_late_answer_is_dropped():
    release = threading.Event()
    completions = FakeCompletions(content="Too Late", wait_for=release)
    service = SuggestionService(timeout=0.05, client_factory=lambda: _client(completions))
    try:
        suggestion = service.suggest(_events("Gym session", "Morning workout"), time_context="morning")
    finally:
        release.set()
    assert suggestion.source == SOURCE_FALLBACK
    assert suggestion.title == "Morning Workout"


def test_remote_error_or_empty_answer_falls_back():
    failing = FakeCompletions(error=RuntimeError("rate limited"))
    service = SuggestionService(timeout=2, client_factory=lambda: _client(failing))
    assert service.suggest(_events("Lunch with Sam"), time_context="afternoon") == ("Afternoon Meal", SOURCE_FALLBACK)

    empty = FakeCompletions(content="   ")
    service = SuggestionService(timeout=2, client_factory=lambda: _client(empty))
    assert service.suggest([], time_context="evening") == ("Evening Event", SOURCE_FALLBACK)


def test_missing_api_key_falls_back(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    service = SuggestionService(timeout=2)
    assert service.suggest(_events("Dentist checkup"), time_context="night").source == SOURCE_FALLBACK


def test_disabled_service_never_calls_remote():
    completions = FakeCompletions(content="Remote")
    service = SuggestionService(enabled=False, client_factory=lambda: _client(completions))
    assert service.suggest(_events("Call with Bob"), time_context="morning") == ("Morning Meeting", SOURCE_FALLBACK)
    assert completions.requests == []


def test_time_context_boundaries():
    assert current_time_context(datetime(2025, 3, 10, 5)) == "morning"
    assert current_time_context(datetime(2025, 3, 10, 12)) == "afternoon"
    assert current_time_context(datetime(2025, 3, 10, 17)) == "evening"
    assert current_time_context(datetime(2025, 3, 10, 21)) == "night"
    assert current_time_context(datetime(2025, 3, 10, 4)) == "night"


def test_prompt_uses_at_most_ten_events_and_optional_location():
    prompt = build_user_prompt(_events(*[f"Event {n}" for n in range(15)]), "morning", "Office")
    assert prompt.count("\n- Event ") == 10
    assert prompt.endswith("- Time: morning\n- Location: Office")
    assert build_user_prompt([], "night") == "Current context:\n- Time: night"
