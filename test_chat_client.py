"""ChatCompletionClient request building and error conversion."""

import pytest
import requests

from libs.llm_openai.chat_client import (
    ChatClientConfig,
    ChatCompletionClient,
    LLMMalformedOutputError,
    LLMTransportError,
    build_image_data_url,
)


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self._text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._body is None:
            raise ValueError("not json")
        return self._body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


CONFIG = ChatClientConfig(
    api_url="https://llm.example.com/v1/chat/completions",
    api_key="sk-test",
    model_name="text-model",
    temperature=0.3,
    timeout_seconds=12.0,
)


def _ok(content):
    return FakeResponse(body={"choices": [{"message": {"role": "assistant", "content": content}}]})


def test_complete_sends_payload_and_returns_content():
    session = FakeSession(response=_ok("hello"))
    client = ChatCompletionClient(CONFIG, session=session)

    out = client.complete([{"role": "user", "content": "hi"}], max_tokens=2000)

    assert out == "hello"
    call = session.calls[0]
    assert call["url"] == CONFIG.api_url
    assert call["timeout"] == 12.0
    assert call["headers"]["Authorization"] == "Bearer sk-test"
    assert call["json"] == {
        "model": "text-model",
        "messages": [{"role": "user", "content": "hi"}],
        "temperature": 0.3,
        "max_tokens": 2000,
    }


def test_complete_overrides_temperature_and_model():
    session = FakeSession(response=_ok("x"))
    client = ChatCompletionClient(CONFIG, session=session)

    client.complete([], max_tokens=400, temperature=0.1, model_name="vision-model")

    payload = session.calls[0]["json"]
    assert payload["temperature"] == 0.1
    assert payload["model"] == "vision-model"
    assert payload["max_tokens"] == 400


def test_non_2xx_is_transport_error():
    client = ChatCompletionClient(CONFIG, session=FakeSession(response=FakeResponse(status_code=503)))
    with pytest.raises(LLMTransportError):
        client.complete([], max_tokens=10)


def test_timeout_is_transport_error():
    client = ChatCompletionClient(CONFIG, session=FakeSession(error=requests.Timeout("slow")))
    with pytest.raises(LLMTransportError, match="timed out"):
        client.complete([], max_tokens=10)


def test_connection_error_is_transport_error():
    client = ChatCompletionClient(CONFIG, session=FakeSession(error=requests.ConnectionError("down")))
    with pytest.raises(LLMTransportError):
        client.complete([], max_tokens=10)


def test_missing_api_key_is_transport_error():
    session = FakeSession(response=_ok("x"))
    client = ChatCompletionClient(
        ChatClientConfig(api_url=CONFIG.api_url, api_key="", model_name="m"), session=session
    )
    with pytest.raises(LLMTransportError):
        client.complete([], max_tokens=10)
    assert session.calls == []


@pytest.mark.parametrize("response", [
    FakeResponse(body=None),
    FakeResponse(body={"choices": []}),
    FakeResponse(body={"id": "x"}),
    FakeResponse(body={"choices": [{"message": {"content": ""}}]}),
    FakeResponse(body={"choices": [{"message": None}]}),
])
def test_bad_bodies_are_malformed(response):
    client = ChatCompletionClient(CONFIG, session=FakeSession(response=response))
    with pytest.raises(LLMMalformedOutputError):
        client.complete([], max_tokens=10)


def test_build_image_data_url():
    assert build_image_data_url(b"abc", "image/png") == "data:image/png;base64,YWJj"
