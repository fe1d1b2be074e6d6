from chainkit.schemas.agent import AgentAction, AgentEvent, AgentFinish, AgentStep
from chainkit.schemas.memory import BaseChatMessageHistory, SimpleMemory, WindowBufferMemory
from chainkit.schemas.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    MessageType,
    SystemMessage,
    message_from_dict,
    message_to_dict,
    messages_from_dicts,
    messages_to_dicts,
    to_openai_message,
)
from chainkit.schemas.prompt import ChatPromptValue, PromptValue, StringPromptValue

__all__ = [
    "AIMessage",
    "AgentAction",
    "AgentEvent",
    "AgentFinish",
    "AgentStep",
    "BaseChatMessageHistory",
    "BaseMessage",
    "ChatPromptValue",
    "HumanMessage",
    "MessageType",
    "PromptValue",
    "SimpleMemory",
    "StringPromptValue",
    "SystemMessage",
    "WindowBufferMemory",
    "message_from_dict",
    "message_to_dict",
    "messages_from_dicts",
    "messages_to_dicts",
    "to_openai_message",
]
