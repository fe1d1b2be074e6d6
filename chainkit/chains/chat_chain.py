"""Chat prompt template + chat model, with optional conversational memory.

Message order sent to the model::

    header_prompts → memory history → sandwich_prompts → rendered prompt

After each reply the rendered *user* messages and the AI reply are appended
to memory, so the next call sees the exchange as history.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence

from chainkit.chains.base import Chain, ChainInput
from chainkit.chat_models.base import BaseChatModel
from chainkit.prompt.chat import ChatPromptTemplate
from chainkit.schemas.memory import BaseChatMessageHistory
from chainkit.schemas.messages import AIMessage, BaseMessage, MessageType

logger = logging.getLogger(__name__)


class LLMChatChain(Chain):
    def __init__(
        self,
        prompt: ChatPromptTemplate,
        llm: BaseChatModel,
        *,
        memory: BaseChatMessageHistory | None = None,
        header_prompts: Sequence[BaseMessage] | None = None,
        sandwich_prompts: Sequence[BaseMessage] | None = None,
    ) -> None:
        self.prompt = prompt
        self.llm = llm
        self.memory = memory
        self.header_prompts = list(header_prompts) if header_prompts else None
        self.sandwich_prompts = list(sandwich_prompts) if sandwich_prompts else None

    def with_memory(self, memory: BaseChatMessageHistory) -> LLMChatChain:
        self.memory = memory
        return self

    def with_header_prompts(self, header_prompts: Sequence[BaseMessage]) -> LLMChatChain:
        self.header_prompts = list(header_prompts)
        return self

    def with_sandwich_prompts(self, sandwich_prompts: Sequence[BaseMessage]) -> LLMChatChain:
        self.sandwich_prompts = list(sandwich_prompts)
        return self

    def order_messages(self, prompt_messages: list[BaseMessage]) -> list[list[BaseMessage]]:
        groups: list[list[BaseMessage]] = []
        if self.header_prompts:
            groups.append(list(self.header_prompts))
        groups.append(self.memory.messages() if self.memory is not None else [])
        if self.sandwich_prompts:
            groups.append(list(self.sandwich_prompts))
        groups.append(prompt_messages)
        return groups

    def _remember(self, prompt_messages: list[BaseMessage], reply: AIMessage) -> None:
        if self.memory is None:
            return
        for message in prompt_messages:
            if message.type is MessageType.USER:
                self.memory.add_message(message)
        self.memory.add_message(reply)
        logger.debug("Stored exchange in memory (%d messages)", len(self.memory.messages()))

    def run(self, inputs: ChainInput) -> str:
        prompt_messages = self.prompt.format_messages(inputs)
        reply = self.llm.generate(self.order_messages(prompt_messages))
        self._remember(prompt_messages, reply)
        return reply.content

    async def arun(self, inputs: ChainInput) -> str:
        prompt_messages = self.prompt.format_messages(inputs)
        reply = await self.llm.agenerate(self.order_messages(prompt_messages))
        self._remember(prompt_messages, reply)
        return reply.content

    async def astream(self, inputs: ChainInput) -> AsyncIterator[str]:
        """Forward reply chunks as they arrive.

        Memory is only updated once the stream has been fully consumed.
        """
        prompt_messages = self.prompt.format_messages(inputs)
        chunks: list[str] = []
        async for chunk in self.llm.astream(self.order_messages(prompt_messages)):
            chunks.append(chunk)
            yield chunk
        self._remember(prompt_messages, AIMessage(content="".join(chunks)))
