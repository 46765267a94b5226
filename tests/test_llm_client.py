from types import SimpleNamespace

import httpx
from openai import APITimeoutError

import services.llm_client as llm


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error

    def create(self, **kwargs):
        if self.error:
            raise self.error
        msg = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=msg)])


def _fake_client(**kwargs):
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(**kwargs)))


def test_llm_available_follows_env(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert llm.llm_available() is False
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    assert llm.llm_available() is True


def test_text_is_stripped(monkeypatch):
    monkeypatch.setattr(llm, "_client", _fake_client(content="  Report body \n"))
    assert llm.call_llm_text([{"role": "user", "content": "hi"}]) == "Report body"


def test_blank_answer_is_none(monkeypatch):
    monkeypatch.setattr(llm, "_client", _fake_client(content="   "))
    assert llm.call_llm_text([]) is None


def test_timeout_is_none(monkeypatch):
    err = APITimeoutError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
    monkeypatch.setattr(llm, "_client", _fake_client(error=err))
    assert llm.call_llm_text([]) is None
