"""Agent and output-parser interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from chainkit.schemas.agent import AgentAction, AgentEvent

# (action taken, observation returned by the tool)
IntermediateSteps = Sequence[tuple[AgentAction, str]]


class Agent(ABC):
    """Decides the next step given the inputs and what has happened so far."""

    @abstractmethod
    def plan(self, intermediate_steps: IntermediateSteps, inputs: Mapping[str, Any]) -> AgentEvent:
        ...

    @abstractmethod
    async def aplan(self, intermediate_steps: IntermediateSteps, inputs: Mapping[str, Any]) -> AgentEvent:
        ...


class AgentOutputParser(ABC):
    @abstractmethod
    def parse(self, text: str) -> AgentEvent:
        ...

    @abstractmethod
    def get_format_instructions(self) -> str:
        ...
