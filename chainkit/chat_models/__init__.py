from chainkit.chat_models.base import BaseChatModel, MessagesInput, flatten_messages
from chainkit.chat_models.openai import ChatModel, ChatOpenAI

__all__ = ["BaseChatModel", "ChatModel", "ChatOpenAI", "MessagesInput", "flatten_messages"]
