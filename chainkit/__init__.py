"""chainkit: composable LLM calls, prompts, memory and a ReAct agent loop.

Architecture Overview
=====================

The library is a set of small layers over an OpenAI-style HTTP API:

1. **transport**: ``OpenAIClient`` (``services/openai_client.py``) owns the
   ``httpx`` clients, retries, SSE streaming and error mapping.

2. **models**: ``ChatOpenAI`` (chat completions), ``OpenAI`` (text
   completions) and ``OpenAIEmbedder`` (embeddings) shape requests and parse
   responses with Pydantic models.

3. **prompts**: ``PromptTemplate`` and ``ChatPromptTemplate`` render
   ``str.format`` style templates into strings or message lists.

4. **chains**: ``LLMChain`` and ``LLMChatChain`` glue a prompt to a model,
   optionally with conversational memory.

5. **agents**: ``ConversationalAgent`` asks the model for the next step
   (a JSON action blob or a final answer) and ``AgentExecutor`` runs the
   plan/act/observe loop until the agent finishes or the iteration budget
   runs out.

Loop: plan → (action?) → tool → observation → plan … → (finish?) → memory → END

Package Structure
-----------------
- ``chainkit/config.py``: Centralized configuration from environment variables
- ``chainkit/errors.py``: Exception hierarchy (OpenAI, AWS, prompt, agent)
- ``chainkit/schemas/``: Messages, prompt values, agent events, memory
- ``chainkit/prompt/``: String and chat prompt templates
- ``chainkit/chat_models/``: Chat model interface + OpenAI implementation
- ``chainkit/llm/``: Completion model interface + OpenAI implementation
- ``chainkit/embedding/``: Embedder interface + OpenAI implementation
- ``chainkit/chains/``: LLM and chat chains
- ``chainkit/tools/``: Tool interface, ``@tool`` decorator, built-in tools
- ``chainkit/agents/``: Conversational agent and the executor loop
- ``chainkit/ai_helpers/``: AWS Textract PDF OCR
- ``chainkit/services/``: HTTP transport, LRU cache, metrics
- ``chainkit/main.py`` / ``chainkit/server.py``: CLI and FastAPI surfaces
"""

from chainkit.agents import (
    AgentExecutor,
    ConversationalAgent,
    ConversationalAgentBuilder,
    ConvoOutputParser,
)
from chainkit.chains import LLMChain, LLMChatChain
from chainkit.chat_models import ChatModel, ChatOpenAI
from chainkit.embedding import OpenAIEmbedder
from chainkit.llm import OpenAI
from chainkit.prompt import (
    AIMessagePromptTemplate,
    ChatPromptTemplate,
    HumanMessagePromptTemplate,
    MessagesPlaceholder,
    PromptTemplate,
    SystemMessagePromptTemplate,
)
from chainkit.schemas import (
    AgentAction,
    AgentFinish,
    AgentStep,
    AIMessage,
    HumanMessage,
    SimpleMemory,
    SystemMessage,
    WindowBufferMemory,
)
from chainkit.tools import FunctionTool, Tool, tool

__version__ = "0.1.0"

__all__ = [
    "AIMessage",
    "AIMessagePromptTemplate",
    "AgentAction",
    "AgentExecutor",
    "AgentFinish",
    "AgentStep",
    "ChatModel",
    "ChatOpenAI",
    "ChatPromptTemplate",
    "ConversationalAgent",
    "ConversationalAgentBuilder",
    "ConvoOutputParser",
    "FunctionTool",
    "HumanMessage",
    "HumanMessagePromptTemplate",
    "LLMChain",
    "LLMChatChain",
    "MessagesPlaceholder",
    "OpenAI",
    "OpenAIEmbedder",
    "PromptTemplate",
    "SimpleMemory",
    "SystemMessage",
    "SystemMessagePromptTemplate",
    "Tool",
    "WindowBufferMemory",
    "tool",
]
