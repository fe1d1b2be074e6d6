from chainkit.agents.chat.agent import ConversationalAgent, ConversationalAgentBuilder
from chainkit.agents.chat.output_parser import FINAL_ANSWER_ACTION, ConvoOutputParser

__all__ = ["FINAL_ANSWER_ACTION", "ConversationalAgent", "ConversationalAgentBuilder", "ConvoOutputParser"]
