"""Chain interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Union

# A single string (bound to the prompt's only variable) or named values
ChainInput = Union[str, Mapping[str, Any]]


class Chain(ABC):
    @abstractmethod
    def run(self, inputs: ChainInput) -> str:
        ...

    @abstractmethod
    async def arun(self, inputs: ChainInput) -> str:
        ...
