"""
Fixture condivise: oracolo LLM finto e client Ollama / LM Studio finti.

Nessun test parla con un LLM reale.
"""

from types import SimpleNamespace

import pytest


class FakeOracle:
    """
    Sostituto di LLMService: restituisce risposte preimpostate.

    responses può essere una stringa (sempre la stessa risposta), un dict
    {testo: risposta} cercato nel prompt tra virgolette, oppure un'eccezione
    da sollevare.
    """

    def __init__(self, responses=None, default=""):
        self.responses = responses
        self.default = default
        self.prompts = []

    def generate(self, prompt, system_prompt=None, temperature=None):
        self.prompts.append(prompt)

        if isinstance(self.responses, Exception):
            raise self.responses
        if isinstance(self.responses, dict):
            # prima il testo esatto tra virgolette (prompt embedding), poi substring
            keys = [k for k in self.responses if f'"{k}"' in prompt]
            keys += [k for k in self.responses if k in prompt and k not in keys]
            if not keys:
                return self.default
            response = self.responses[keys[0]]
            if isinstance(response, Exception):
                raise response
            return response
        if self.responses is None:
            return self.default
        return self.responses


class FakeOllamaClient:
    def __init__(self, models=("mistral:latest",), response="", error=None, list_error=None):
        self.models = list(models)
        self.response = response
        self.error = error
        self.list_error = list_error
        self.calls = []

    def list(self):
        if self.list_error is not None:
            raise self.list_error
        return SimpleNamespace(models=[SimpleNamespace(model=name) for name in self.models])

    def generate(self, model, prompt, system=None, options=None):
        self.calls.append({"model": model, "prompt": prompt, "system": system, "options": options})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(response=self.response)


class FakeOpenAIClient:
    """Client OpenAI compatibile (LM Studio) con le sole API usate."""

    def __init__(self, models=("qwen2.5-7b-instruct",), content=""):
        self.calls = []
        self.models = SimpleNamespace(
            list=lambda: SimpleNamespace(data=[SimpleNamespace(id=name) for name in models])
        )

        def create(model, messages, temperature):
            self.calls.append({"model": model, "messages": messages, "temperature": temperature})
            message = SimpleNamespace(content=content)
            return SimpleNamespace(choices=[SimpleNamespace(message=message)])

        self.chat = SimpleNamespace(completions=SimpleNamespace(create=create))


@pytest.fixture
def fake_oracle():
    return FakeOracle


@pytest.fixture
def fake_ollama_client():
    return FakeOllamaClient


@pytest.fixture
def fake_openai_client():
    return FakeOpenAIClient


@pytest.fixture(autouse=True)
def clean_llm_env(monkeypatch):
    for name in ("OLLAMA_BASE_URL", "OLLAMA_MODEL", "LMSTUDIO_BASE_URL", "LMSTUDIO_API_KEY", "LMSTUDIO_MODEL", "LLM_PROVIDER"):
        monkeypatch.delenv(name, raising=False)
