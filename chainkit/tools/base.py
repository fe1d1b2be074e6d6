"""Tool interface and the ``@tool`` decorator.

A tool is a named function from a string input to a string observation.  The
agent sees each tool as ``> name: description`` in its system prompt, so the
description should tell the model when to use it and what input to give.

>>> @tool
... def word_count(text: str) -> str:
...     \"\"\"Count the words in the given text.\"\"\"
...     return str(len(text.split()))
>>> word_count.name, word_count.call("a b c")
('word_count', '3')
"""

from __future__ import annotations

import asyncio
import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Union, overload

ToolFunc = Callable[[str], Union[str, Awaitable[str]]]


class Tool(ABC):
    name: str
    description: str

    @abstractmethod
    def call(self, tool_input: str) -> str:
        ...

    async def acall(self, tool_input: str) -> str:
        """Run :meth:`call` in a worker thread so blocking tools don't stall the loop."""
        return await asyncio.to_thread(self.call, tool_input)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class FunctionTool(Tool):
    """Wrap a plain (or ``async``) function as a :class:`Tool`."""

    def __init__(self, func: ToolFunc, name: str | None = None, description: str | None = None) -> None:
        description = description or inspect.getdoc(func)
        if not description:
            raise ValueError(f"Tool {func.__name__!r} needs a description or a docstring")
        self.func = func
        self.name = name or func.__name__
        self.description = description.strip()
        self._is_async = inspect.iscoroutinefunction(func)

    def call(self, tool_input: str) -> str:
        if self._is_async:
            return str(asyncio.run(self.func(tool_input)))
        return str(self.func(tool_input))

    async def acall(self, tool_input: str) -> str:
        if self._is_async:
            return str(await self.func(tool_input))
        return await super().acall(tool_input)


@overload
def tool(func: ToolFunc) -> FunctionTool: ...


@overload
def tool(
    func: str | None = None, *, name: str | None = None, description: str | None = None,
) -> Callable[[ToolFunc], FunctionTool]: ...


def tool(func=None, *, name=None, description=None):
    """Turn a function into a :class:`FunctionTool`.

    Usable bare (``@tool``), with a name (``@tool("search")``) or with
    keywords (``@tool(name=..., description=...)``).
    """
    if callable(func):
        return FunctionTool(func, name=name, description=description)

    tool_name = func if isinstance(func, str) else name

    def decorator(f: ToolFunc) -> FunctionTool:
        return FunctionTool(f, name=tool_name, description=description)

    return decorator
