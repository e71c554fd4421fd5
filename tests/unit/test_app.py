"""Tests for runtime assembly."""

import json

import pytest
from langchain_core.messages import AIMessageChunk

from shellagent import AgentRunner, build_application
from shellagent.hitl import CommandApprovalChecker
from shellagent.protocol import UserMessageAction


class ScriptedChatModel:
    def __init__(self, text, chunk_size=4):
        self.text = text
        self.chunk_size = chunk_size

    async def astream(self, messages):
        for start in range(0, len(self.text), self.chunk_size):
            yield AIMessageChunk(content=self.text[start:start + self.chunk_size])


class TestBuildApplication:
    @pytest.mark.asyncio
    async def test_default_client_streams_through_resolver(self, mocker, events, make_settings):
        payload = {"intent": "command", "action": "inspect_memory", "done": False, "commands": []}
        chat_model = ScriptedChatModel(f"Checking memory first.\nJSON:{json.dumps(payload)}")
        resolver = mocker.Mock(return_value=chat_model)

        runner = build_application(
            executor=mocker.Mock(),
            emit_event=events,
            settings=make_settings(),
            model_resolver=resolver,
        )
        await runner.handle_action(
            UserMessageAction(session_id="s1", message_id="m1", content="how is memory?", model="gpt-5-mini")
        )

        assert isinstance(runner, AgentRunner)
        resolver.assert_called_once_with("gpt-5-mini")
        assert events.final_messages()[0].content == "Checking memory first."
        assert events.last_tool_call().input == {"command": "free -h"}
        assert events.kinds()[-1] == "waiting_for_approval"

    def test_explicit_checker_is_used(self, mocker, events, make_settings):
        checker = CommandApprovalChecker()

        runner = build_application(
            executor=mocker.Mock(),
            emit_event=events,
            settings=make_settings(),
            model_client=mocker.AsyncMock(),
            approval_checker=checker,
        )

        assert runner.settings.agent.max_steps == 8
        assert events.events == []
