from chainkit.prompt.chat import (
    AIMessagePromptTemplate,
    BaseMessagePromptTemplate,
    ChatPromptTemplate,
    HumanMessagePromptTemplate,
    MessageLike,
    MessagesPlaceholder,
    SystemMessagePromptTemplate,
)
from chainkit.prompt.template import (
    PromptTemplate,
    TemplateArgs,
    extract_input_variables,
    render,
    to_template_values,
)

__all__ = [
    "AIMessagePromptTemplate",
    "BaseMessagePromptTemplate",
    "ChatPromptTemplate",
    "HumanMessagePromptTemplate",
    "MessageLike",
    "MessagesPlaceholder",
    "PromptTemplate",
    "SystemMessagePromptTemplate",
    "TemplateArgs",
    "extract_input_variables",
    "render",
    "to_template_values",
]
