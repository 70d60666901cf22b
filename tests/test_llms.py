"""
Tests for the provider backends against stubbed SDK clients.
"""

from types import SimpleNamespace

import pytest

from basechat.generation.schemas import response_json_schema
from basechat.llms.anthropic import RESPONSE_TOOL_NAME, AnthropicLLM
from basechat.llms.base import LLMMessage, Roles, split_system_messages
from basechat.llms.google import GoogleLLM
from basechat.llms.openai import OpenAILLM

CONVERSATION = [
    LLMMessage(role=Roles.SYSTEM, content="Grounding"),
    LLMMessage(role=Roles.SYSTEM, content="Chunks"),
    LLMMessage(role=Roles.USER, content="Hi"),
    LLMMessage(role=Roles.ASSISTANT, content="Hello"),
    LLMMessage(role=Roles.USER, content="More"),
]


async def as_async_iter(items):
    for item in items:
        yield item


def test_split_system_messages():
    system, turns = split_system_messages(CONVERSATION)
    assert system == "Grounding\n\nChunks"
    assert [message.content for message in turns] == ["Hi", "Hello", "More"]


class StubCompletions:
    def __init__(self, chunks):
        self.chunks = chunks
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return as_async_iter(self.chunks)


@pytest.mark.asyncio
async def test_openai_streams_content_deltas():
    deltas = ['{"message"', ': "Hi"}']
    chunks = [SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=d))]) for d in deltas]
    chunks.append(SimpleNamespace(choices=[]))
    completions = StubCompletions(chunks)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))

    llm = OpenAILLM("gpt-4o", client=client)
    out = [delta async for delta in llm.stream_structured(CONVERSATION, response_json_schema(), 0.3)]

    assert out == deltas
    assert completions.kwargs["model"] == "gpt-4o"
    assert completions.kwargs["temperature"] == 0.3
    assert completions.kwargs["stream"] is True
    assert completions.kwargs["response_format"]["json_schema"]["schema"] == response_json_schema()
    assert completions.kwargs["messages"][0] == {"role": "system", "content": "Grounding"}


class StubAnthropicStream:
    def __init__(self, events):
        self.events = events

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def __aiter__(self):
        return as_async_iter(self.events)


class StubMessages:
    def __init__(self, events):
        self.events = events
        self.kwargs = None

    def stream(self, **kwargs):
        self.kwargs = kwargs
        return StubAnthropicStream(self.events)


@pytest.mark.asyncio
async def test_anthropic_forces_tool_and_streams_input_json():
    events = [
        SimpleNamespace(type="message_start"),
        SimpleNamespace(type="content_block_delta", delta=SimpleNamespace(type="input_json_delta", partial_json='{"message": ')),
        SimpleNamespace(type="content_block_delta", delta=SimpleNamespace(type="text_delta", text="ignored")),
        SimpleNamespace(type="content_block_delta", delta=SimpleNamespace(type="input_json_delta", partial_json='"Hi"}')),
        SimpleNamespace(type="message_stop"),
    ]
    messages = StubMessages(events)
    llm = AnthropicLLM("claude-3-7-sonnet-latest", client=SimpleNamespace(messages=messages))

    out = [delta async for delta in llm.stream_structured(CONVERSATION, response_json_schema(), 0.3)]

    assert "".join(out) == '{"message": "Hi"}'
    assert messages.kwargs["system"] == "Grounding\n\nChunks"
    assert [m["role"] for m in messages.kwargs["messages"]] == ["user", "assistant", "user"]
    assert messages.kwargs["tool_choice"] == {"type": "tool", "name": RESPONSE_TOOL_NAME}
    assert messages.kwargs["tools"][0]["input_schema"] == response_json_schema()


def test_google_maps_assistant_role_to_model():
    _, turns = split_system_messages(CONVERSATION)
    contents = GoogleLLM._to_contents(turns)
    assert [content.role for content in contents] == ["user", "model", "user"]
    assert contents[1].parts[0].text == "Hello"
