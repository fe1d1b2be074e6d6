"""Prompt template + completion model."""

from __future__ import annotations

from chainkit.chains.base import Chain, ChainInput
from chainkit.llm.base import BaseLLM
from chainkit.prompt.template import PromptTemplate


class LLMChain(Chain):
    """Render ``prompt`` and send it to a :class:`BaseLLM`.

    >>> chain = LLMChain(OpenAI())
    >>> chain.run("What is the capital of Peru?")   # default prompt: "{question}"
    """

    def __init__(self, llm: BaseLLM, prompt: PromptTemplate | None = None) -> None:
        self.llm = llm
        self.prompt = prompt or PromptTemplate.from_template("{question}")

    def run(self, inputs: ChainInput) -> str:
        return self.llm.generate(self.prompt.format(inputs))

    async def arun(self, inputs: ChainInput) -> str:
        return await self.llm.agenerate(self.prompt.format(inputs))
