"""
Shared fakes: an AsyncOpenAI-shaped client with scripted answers and a
scripted invoker for orchestrator tests. No network calls are made.
"""

from types import SimpleNamespace

import pytest


def make_completion(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


class FakeCompletions:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return make_completion(outcome)


class FakeClientFactory:
    """Stands in for ``default_client_factory``; records every client built."""

    def __init__(self, outcomes):
        self.completions = FakeCompletions(outcomes)
        self.built = []

    def __call__(self, api_key, base_url=None):
        self.built.append((api_key, base_url))
        return SimpleNamespace(chat=SimpleNamespace(completions=self.completions))

    @property
    def calls(self):
        return self.completions.calls

    @property
    def models_called(self):
        return [c["model"] for c in self.completions.calls]


class ScriptedInvoker:
    """Returns canned answers in order and records the prompts it saw."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []
        self.json_flags = []

    async def invoke(self, prompt, *, json_response=False, system=None):
        self.prompts.append(prompt)
        self.json_flags.append(json_response)
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer


@pytest.fixture
def no_env_credentials(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("EXAMGEN_PREFERRED_MODEL", raising=False)
    monkeypatch.delenv("EXAMGEN_BASE_URL", raising=False)
