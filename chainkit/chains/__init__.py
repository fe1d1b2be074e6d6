from chainkit.chains.base import Chain, ChainInput
from chainkit.chains.chat_chain import LLMChatChain
from chainkit.chains.llm_chain import LLMChain

__all__ = ["Chain", "ChainInput", "LLMChain", "LLMChatChain"]
