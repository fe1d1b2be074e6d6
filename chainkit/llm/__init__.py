from chainkit.llm.base import BaseLLM
from chainkit.llm.openai import LLMModel, OpenAI

__all__ = ["BaseLLM", "LLMModel", "OpenAI"]
