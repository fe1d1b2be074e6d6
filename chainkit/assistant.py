"""Ready-made conversational assistant used by the CLI and the API server.

Wiring::

    ChatOpenAI ──▶ ConversationalAgent (persona prefix + tools) ──▶ AgentExecutor
                                                                        │
                                                        memory (one per session)

The chat model and tools carry no per-conversation state, so a single
``ChatOpenAI`` can be shared by every session's executor.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from chainkit.agents import AgentExecutor, ConversationalAgentBuilder
from chainkit.chat_models import BaseChatModel, ChatOpenAI
from chainkit.config import AGENT_MAX_ITERATIONS
from chainkit.prompts import get_assistant_prefix
from chainkit.schemas.memory import BaseChatMessageHistory, SimpleMemory
from chainkit.tools import BUILTIN_TOOLS, Tool

logger = logging.getLogger(__name__)


def create_assistant(
    memory: BaseChatMessageHistory | None = None,
    llm: BaseChatModel | None = None,
    tools: Sequence[Tool] | None = None,
    *,
    max_iterations: int | None = AGENT_MAX_ITERATIONS,
) -> AgentExecutor:
    """Build an :class:`AgentExecutor` around a conversational agent.

    Defaults: ``ChatOpenAI()`` with the configured chat model, the built-in
    tools, and a fresh :class:`SimpleMemory`.
    """
    llm = llm or ChatOpenAI()
    tools = list(tools) if tools is not None else list(BUILTIN_TOOLS)
    memory = memory if memory is not None else SimpleMemory()

    agent = (
        ConversationalAgentBuilder()
        .llm(llm)
        .tools(tools)
        .prefix(get_assistant_prefix())
        .build()
    )
    logger.debug("Assistant ready: %d tools (%s)", len(tools), ", ".join(t.name for t in tools))
    return AgentExecutor.from_agent_and_tools(agent, tools, max_iterations=max_iterations, memory=memory)
