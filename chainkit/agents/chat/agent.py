"""The conversational ReAct agent and its builder."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from chainkit.agents.base import Agent, AgentOutputParser, IntermediateSteps
from chainkit.agents.chat.output_parser import ConvoOutputParser
from chainkit.agents.chat.prompt import PREFIX, SUFFIX, TEMPLATE_TOOL_RESPONSE
from chainkit.chains.chat_chain import LLMChatChain
from chainkit.chat_models.base import BaseChatModel
from chainkit.errors import AgentBuildError
from chainkit.prompt.chat import ChatPromptTemplate, HumanMessagePromptTemplate, MessagesPlaceholder
from chainkit.schemas.agent import AgentEvent
from chainkit.schemas.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from chainkit.tools.base import Tool

logger = logging.getLogger(__name__)


class ConversationalAgent(Agent):
    """Asks a chat model for the next step, given history and a scratchpad.

    Prompt layout::

        system:  prefix + tool list + format instructions + suffix
        ...      chat_history
        user:    {input}
        ...      agent_scratchpad (AI action log / tool response, per step)
    """

    def __init__(
        self,
        llm: BaseChatModel,
        tools: Sequence[Tool],
        *,
        output_parser: AgentOutputParser | None = None,
        prefix: str = PREFIX,
        suffix: str = SUFFIX,
        template_tool_response: str = TEMPLATE_TOOL_RESPONSE,
    ) -> None:
        self.tools = list(tools)
        self.output_parser = output_parser or ConvoOutputParser()
        self.template_tool_response = template_tool_response
        self.prompt = self.create_prompt(
            self.tools, prefix, suffix, self.output_parser.get_format_instructions(),
        )
        self.chain = LLMChatChain(self.prompt, llm)

    @staticmethod
    def create_prompt(
        tools: Sequence[Tool],
        prefix: str,
        suffix: str,
        format_instructions: str,
    ) -> ChatPromptTemplate:
        tool_strings = "\n".join(f"> {t.name}: {t.description}" for t in tools)
        tool_names = ", ".join(t.name for t in tools)
        system = "\n\n".join(
            [prefix, tool_strings, format_instructions.format(tool_names=tool_names), suffix]
        )
        return ChatPromptTemplate.from_messages(
            [
                SystemMessage(content=system),
                MessagesPlaceholder("chat_history"),
                HumanMessagePromptTemplate.from_template("{input}"),
                MessagesPlaceholder("agent_scratchpad"),
            ]
        )

    def construct_scratchpad(self, intermediate_steps: IntermediateSteps) -> list[BaseMessage]:
        thoughts: list[BaseMessage] = []
        for action, observation in intermediate_steps:
            thoughts.append(AIMessage(content=action.log))
            thoughts.append(
                HumanMessage(content=self.template_tool_response.format(observation=observation))
            )
        return thoughts

    def _prompt_values(self, intermediate_steps: IntermediateSteps, inputs: Mapping[str, Any]) -> dict[str, Any]:
        return {**inputs, "agent_scratchpad": self.construct_scratchpad(intermediate_steps)}

    def plan(self, intermediate_steps: IntermediateSteps, inputs: Mapping[str, Any]) -> AgentEvent:
        output = self.chain.run(self._prompt_values(intermediate_steps, inputs))
        logger.debug("Agent output: %s", output)
        return self.output_parser.parse(output)

    async def aplan(self, intermediate_steps: IntermediateSteps, inputs: Mapping[str, Any]) -> AgentEvent:
        output = await self.chain.arun(self._prompt_values(intermediate_steps, inputs))
        logger.debug("Agent output: %s", output)
        return self.output_parser.parse(output)


class ConversationalAgentBuilder:
    """Fluent construction of a :class:`ConversationalAgent`.

    >>> agent = (ConversationalAgentBuilder()
    ...          .llm(ChatOpenAI())
    ...          .tools([current_datetime])
    ...          .build())
    """

    def __init__(self) -> None:
        self._llm: BaseChatModel | None = None
        self._tools: list[Tool] | None = None
        self._output_parser: AgentOutputParser | None = None
        self._prefix: str | None = None
        self._suffix: str | None = None
        self._template_tool_response: str | None = None

    def llm(self, llm: BaseChatModel) -> ConversationalAgentBuilder:
        self._llm = llm
        return self

    def tools(self, tools: Sequence[Tool]) -> ConversationalAgentBuilder:
        self._tools = list(tools)
        return self

    def output_parser(self, parser: AgentOutputParser) -> ConversationalAgentBuilder:
        self._output_parser = parser
        return self

    def prefix(self, prefix: str) -> ConversationalAgentBuilder:
        self._prefix = prefix
        return self

    def suffix(self, suffix: str) -> ConversationalAgentBuilder:
        self._suffix = suffix
        return self

    def template_tool_response(self, template: str) -> ConversationalAgentBuilder:
        self._template_tool_response = template
        return self

    def build(self) -> ConversationalAgent:
        if self._llm is None:
            raise AgentBuildError("LLM is not provided.")
        if self._tools is None:
            raise AgentBuildError("Tools are not provided.")
        return ConversationalAgent(
            self._llm,
            self._tools,
            output_parser=self._output_parser,
            prefix=self._prefix or PREFIX,
            suffix=self._suffix or SUFFIX,
            template_tool_response=self._template_tool_response or TEMPLATE_TOOL_RESPONSE,
        )
