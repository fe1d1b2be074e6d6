"""Runs an agent's plan → act → observe loop until it produces a final answer.

Each iteration asks the agent for the next step.  An ``AgentAction`` is
dispatched to the named tool and its observation is recorded; the growing
list of ``(action, observation)`` pairs is handed back to the agent on the
next call.  An ``AgentFinish`` ends the run, and when memory is attached the
user's input and the final answer are stored as a human/AI exchange.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from typing import Any, Union

from chainkit.agents.base import Agent
from chainkit.errors import AgentError, MaxIterationsError, ToolNotFoundError
from chainkit.schemas.agent import AgentAction, AgentFinish, AgentStep
from chainkit.schemas.memory import BaseChatMessageHistory
from chainkit.schemas.messages import AIMessage, HumanMessage
from chainkit.tools.base import Tool

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 10

ExecutorInput = Union[str, Mapping[str, Any]]
ExecutorEvent = Union[AgentAction, AgentStep, AgentFinish]


def _check_max_iterations(max_iterations: int | None) -> int | None:
    if max_iterations is not None and max_iterations <= 0:
        raise ValueError(f"max_iterations must be positive or None, got {max_iterations}")
    return max_iterations


class AgentExecutor:
    def __init__(
        self,
        agent: Agent,
        tools: Sequence[Tool],
        *,
        max_iterations: int | None = DEFAULT_MAX_ITERATIONS,
        memory: BaseChatMessageHistory | None = None,
    ) -> None:
        self.agent = agent
        self.tools: dict[str, Tool] = {}
        for t in tools:
            if t.name in self.tools:
                raise ValueError(f"Duplicate tool name: {t.name}")
            self.tools[t.name] = t
        self.max_iterations = _check_max_iterations(max_iterations)
        self.memory = memory

    @classmethod
    def from_agent_and_tools(
        cls,
        agent: Agent,
        tools: Sequence[Tool],
        max_iterations: int | None = DEFAULT_MAX_ITERATIONS,
        memory: BaseChatMessageHistory | None = None,
    ) -> AgentExecutor:
        return cls(agent, tools, max_iterations=max_iterations, memory=memory)

    def with_memory(self, memory: BaseChatMessageHistory) -> AgentExecutor:
        self.memory = memory
        return self

    def with_max_iterations(self, max_iterations: int | None) -> AgentExecutor:
        self.max_iterations = _check_max_iterations(max_iterations)
        return self

    # ── Helpers ──────────────────────────────────────────────────────────

    def _prepare_inputs(self, inputs: ExecutorInput) -> dict[str, Any]:
        values: dict[str, Any] = {"input": inputs} if isinstance(inputs, str) else dict(inputs)
        values["chat_history"] = self.memory.messages() if self.memory is not None else []
        return values

    def _get_tool(self, action: AgentAction) -> Tool:
        tool = self.tools.get(action.tool)
        if tool is None:
            raise ToolNotFoundError(action.tool)
        return tool

    def _spend_iteration(self, remaining: int | None) -> int | None:
        if remaining is None:
            return None
        remaining -= 1
        if remaining <= 0:
            logger.warning("Agent stopped after %d iterations without a final answer", self.max_iterations)
            raise MaxIterationsError(self.max_iterations)
        return remaining

    def _finish(self, values: Mapping[str, Any], finish: AgentFinish) -> str:
        if self.memory is not None:
            human_input = values.get("input")
            if human_input is None:
                raise AgentError("Human input not found")
            self.memory.add_message(HumanMessage(content=str(human_input)))
            self.memory.add_message(AIMessage(content=finish.return_values))
        return finish.return_values

    # ── Entry points ─────────────────────────────────────────────────────

    def run(self, inputs: ExecutorInput) -> str:
        values = self._prepare_inputs(inputs)
        steps: list[tuple[AgentAction, str]] = []
        remaining = self.max_iterations

        while True:
            event = self.agent.plan(steps, values)
            if isinstance(event, AgentFinish):
                return self._finish(values, event)

            logger.info("Agent action: %s(%r)", event.tool, event.tool_input)
            observation = self._get_tool(event).call(event.tool_input)
            logger.debug("Observation: %s", observation)
            steps.append((event, observation))
            remaining = self._spend_iteration(remaining)

    async def arun(self, inputs: ExecutorInput) -> str:
        result = ""
        async for event in self.astream(inputs):
            if isinstance(event, AgentFinish):
                result = event.return_values
        return result

    async def astream(self, inputs: ExecutorInput) -> AsyncIterator[ExecutorEvent]:
        """Yield each action, its executed step, and finally the finish event."""
        values = self._prepare_inputs(inputs)
        steps: list[tuple[AgentAction, str]] = []
        remaining = self.max_iterations

        while True:
            event = await self.agent.aplan(steps, values)
            if isinstance(event, AgentFinish):
                self._finish(values, event)
                yield event
                return

            yield event
            logger.info("Agent action: %s(%r)", event.tool, event.tool_input)
            observation = await self._get_tool(event).acall(event.tool_input)
            logger.debug("Observation: %s", observation)
            steps.append((event, observation))
            yield AgentStep(action=event, observation=observation)
            remaining = self._spend_iteration(remaining)
