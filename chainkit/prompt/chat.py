"""Chat prompt templates: an ordered list of message templates and placeholders."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Union

from chainkit.errors import DataNotProvidedError
from chainkit.prompt.template import PromptTemplate, TemplateArgs
from chainkit.schemas.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    message_from_dict,
)
from chainkit.schemas.prompt import ChatPromptValue


class BaseMessagePromptTemplate:
    """Renders one message of a fixed type from a :class:`PromptTemplate`."""

    message_class: type[BaseMessage] = HumanMessage

    def __init__(self, prompt: PromptTemplate | str) -> None:
        if isinstance(prompt, str):
            prompt = PromptTemplate.from_template(prompt)
        self.prompt = prompt

    @classmethod
    def from_template(cls, template: str):
        return cls(PromptTemplate.from_template(template))

    @property
    def input_variables(self) -> list[str]:
        return self.prompt.input_variables

    def format_messages(self, values: Mapping[str, Any]) -> list[BaseMessage]:
        own = {k: values[k] for k in self.input_variables if k in values}
        return [self.message_class(content=self.prompt.format(own))]


class SystemMessagePromptTemplate(BaseMessagePromptTemplate):
    message_class = SystemMessage


class HumanMessagePromptTemplate(BaseMessagePromptTemplate):
    message_class = HumanMessage


class AIMessagePromptTemplate(BaseMessagePromptTemplate):
    message_class = AIMessage


class MessagesPlaceholder:
    """Expands to the list of messages stored under ``variable_name``.

    Values may be :class:`BaseMessage` instances or ``{"type", "content"}``
    dicts.  A missing variable expands to nothing.
    """

    def __init__(self, variable_name: str) -> None:
        self.variable_name = variable_name

    @property
    def input_variables(self) -> list[str]:
        return [self.variable_name]

    def format_messages(self, values: Mapping[str, Any]) -> list[BaseMessage]:
        raw = values.get(self.variable_name) or []
        if isinstance(raw, (BaseMessage, Mapping)):
            raw = [raw]
        messages: list[BaseMessage] = []
        for item in raw:
            if isinstance(item, BaseMessage):
                messages.append(item)
            elif isinstance(item, Mapping):
                messages.append(message_from_dict(item))
            else:
                raise TypeError(
                    f"{self.variable_name} must contain messages, got {type(item).__name__}"
                )
        return messages


MessageLike = Union[BaseMessagePromptTemplate, MessagesPlaceholder, BaseMessage]


class ChatPromptTemplate:
    """An ordered sequence of message templates, placeholders and fixed messages."""

    def __init__(self, messages: Sequence[MessageLike]) -> None:
        self.messages: list[MessageLike] = list(messages)

    @classmethod
    def from_messages(cls, messages: Sequence[MessageLike]) -> ChatPromptTemplate:
        return cls(messages)

    @property
    def placeholder_variables(self) -> list[str]:
        return [m.variable_name for m in self.messages if isinstance(m, MessagesPlaceholder)]

    @property
    def input_variables(self) -> list[str]:
        names: set[str] = set()
        for message in self.messages:
            if isinstance(message, (BaseMessagePromptTemplate, MessagesPlaceholder)):
                names.update(message.input_variables)
        return sorted(names)

    def _to_values(self, args: TemplateArgs) -> dict[str, Any]:
        if isinstance(args, str):
            placeholders = set(self.placeholder_variables)
            required = [v for v in self.input_variables if v not in placeholders]
            if len(required) != 1:
                raise DataNotProvidedError(
                    f"a single string was given but the chat template expects "
                    f"{len(required)} variables: {required}"
                )
            return {required[0]: args}
        if isinstance(args, Mapping):
            return dict(args)
        raise TypeError(f"Template args must be a str or a mapping, got {type(args).__name__}")

    def format_messages(self, args: TemplateArgs) -> list[BaseMessage]:
        values = self._to_values(args)
        result: list[BaseMessage] = []
        for message in self.messages:
            if isinstance(message, BaseMessage):
                result.append(message)
            else:
                result.extend(message.format_messages(values))
        return result

    def format_prompt(self, args: TemplateArgs) -> ChatPromptValue:
        return ChatPromptValue(self.format_messages(args))

    def format(self, args: TemplateArgs) -> str:
        return self.format_prompt(args).to_string()
