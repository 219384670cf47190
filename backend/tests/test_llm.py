from types import SimpleNamespace

import pytest


def _fake_client(create):
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def _response(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.mark.asyncio
async def test_call_llm_blank_prompt_short_circuit():
    from app.ai_reasoning.llm import call_llm

    assert await call_llm("") == "{}"
    assert await call_llm("   ", json_mode=False) == ""


@pytest.mark.asyncio
async def test_call_llm_success_with_mock(monkeypatch: pytest.MonkeyPatch):
    from app.ai_reasoning import llm

    seen = {}

    async def _fake_create(*args, **kwargs):
        seen.update(kwargs)
        return _response(' {"ok": true} ')

    monkeypatch.setattr(llm, "client", _fake_client(_fake_create))

    result = await llm.call_llm("return json")
    assert result == '{"ok": true}'
    assert seen["messages"][0]["content"] == llm.JSON_SYSTEM_PROMPT
    assert seen["messages"][1]["content"] == "return json"


@pytest.mark.asyncio
async def test_call_llm_text_mode_uses_text_system_prompt(monkeypatch: pytest.MonkeyPatch):
    from app.ai_reasoning import llm

    seen = {}

    async def _fake_create(*args, **kwargs):
        seen.update(kwargs)
        return _response("What was the p99 before the change?")

    monkeypatch.setattr(llm, "client", _fake_client(_fake_create))

    result = await llm.call_llm("ask a follow-up", json_mode=False)
    assert result == "What was the p99 before the change?"
    assert seen["messages"][0]["content"] == llm.TEXT_SYSTEM_PROMPT


@pytest.mark.asyncio
async def test_call_llm_single_attempt_then_raises(monkeypatch: pytest.MonkeyPatch):
    from app.ai_reasoning import llm

    attempts = []

    async def _boom(*args, **kwargs):
        attempts.append(1)
        raise RuntimeError("forced")

    monkeypatch.setattr(llm, "client", _fake_client(_boom))

    with pytest.raises(llm.CollaboratorError):
        await llm.call_llm("will fail")
    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_missing_api_key_raises_collaborator_error(monkeypatch: pytest.MonkeyPatch):
    from app.ai_reasoning import llm

    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr(llm, "OPENAI_API_KEY", "")
    monkeypatch.setattr(llm, "client", None)

    with pytest.raises(llm.CollaboratorError):
        await llm.call_llm("return json")
    assert llm.client is None


def test_client_is_built_lazily(monkeypatch: pytest.MonkeyPatch):
    from app.ai_reasoning import llm

    monkeypatch.setattr(llm, "OPENAI_API_KEY", "test-key")
    monkeypatch.setattr(llm, "client", None)

    built = llm.get_client()
    assert built is llm.get_client()
    assert built.api_key == "test-key"
