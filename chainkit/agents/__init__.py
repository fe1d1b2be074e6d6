from chainkit.agents.base import Agent, AgentOutputParser, IntermediateSteps
from chainkit.agents.chat import ConversationalAgent, ConversationalAgentBuilder, ConvoOutputParser
from chainkit.agents.executor import AgentExecutor

__all__ = [
    "Agent",
    "AgentExecutor",
    "AgentOutputParser",
    "ConversationalAgent",
    "ConversationalAgentBuilder",
    "ConvoOutputParser",
    "IntermediateSteps",
]
