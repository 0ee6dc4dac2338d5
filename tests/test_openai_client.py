"""Tests for the OpenAI suggestion client."""

import asyncio
import json

import pytest

from reeldine.adapters.openai_suggestion_client import OpenAISuggestionClient


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str) -> None:
        self.responses = _FakeResponses(output_text)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def test_openai_client_requests_strict_schema() -> None:
    fake = _FakeOpenAI(json.dumps({"recipes": []}))
    client = OpenAISuggestionClient(client=fake)

    result = asyncio.run(
        client.generate(
            model="gpt-4o-mini",
            prompt="Suggest recipes",
            schema={"type": "object"},
            schema_name="recipe_suggestions",
        )
    )

    assert result == {"recipes": []}
    payload = fake.responses.last_payload
    assert payload is not None
    assert payload["model"] == "gpt-4o-mini"
    assert payload["store"] is False
    assert payload["text"]["format"]["name"] == "recipe_suggestions"
    assert payload["text"]["format"]["strict"] is True

    asyncio.run(client.close())
    assert fake.closed is True


def test_openai_client_rejects_empty_output() -> None:
    client = OpenAISuggestionClient(client=_FakeOpenAI(""))

    with pytest.raises(RuntimeError, match="empty response"):
        asyncio.run(
            client.generate(
                model="gpt-4o-mini",
                prompt="Suggest hashtags",
                schema={"type": "object"},
                schema_name="hashtags",
            )
        )
