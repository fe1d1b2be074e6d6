"""Events produced by an agent's planning step."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass
class AgentAction:
    """The agent wants ``tool`` invoked with ``tool_input``.

    ``log`` is the raw LLM output that led to the decision; it is replayed in
    the scratchpad so the model sees its own reasoning on the next turn.
    """

    tool: str
    tool_input: str
    log: str = ""


@dataclass
class AgentFinish:
    """The agent produced its final answer."""

    return_values: str
    log: str = ""


@dataclass
class AgentStep:
    """An executed action and the observation the tool returned."""

    action: AgentAction
    observation: str


AgentEvent = Union[AgentAction, AgentFinish]
