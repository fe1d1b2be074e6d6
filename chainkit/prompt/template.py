"""String prompt templates.

Templates use ``str.format`` placeholders::

    >>> PromptTemplate.from_template("Hello, {name} from {city}!").format(
    ...     {"name": "Alice", "city": "NY"})
    'Hello, Alice from NY!'

Literal braces are written ``{{`` and ``}}``.
"""

from __future__ import annotations

import string
from collections.abc import Mapping, Sequence
from typing import Any, Union

from chainkit.errors import DataNotProvidedError, PromptRenderError
from chainkit.schemas.prompt import StringPromptValue


# A single string (for one-variable templates) or a mapping of values
TemplateArgs = Union[str, Mapping[str, Any]]

_FORMATTER = string.Formatter()


def _field_names_in_order(template: str) -> list[str]:
    """Return placeholder names in order of first appearance (no duplicates)."""
    try:
        parsed = list(_FORMATTER.parse(template))
    except ValueError as exc:
        raise PromptRenderError(str(exc)) from exc

    names: list[str] = []
    for _, field_name, _, _ in parsed:
        if not field_name:
            continue
        # "user.name" / "items[0]" → "user" / "items"
        base = field_name.split(".", 1)[0].split("[", 1)[0]
        if base and not base.isdigit() and base not in names:
            names.append(base)
    return names


def extract_input_variables(template: str) -> list[str]:
    """Return the sorted, de-duplicated placeholder names used in *template*."""
    return sorted(_field_names_in_order(template))


def _format(template: str, values: Mapping[str, Any]) -> str:
    try:
        return template.format(**values)
    except (KeyError, IndexError, ValueError, AttributeError) as exc:
        raise PromptRenderError(f"{type(exc).__name__}: {exc}") from exc


def to_template_values(args: TemplateArgs, input_variables: Sequence[str]) -> dict[str, Any]:
    """Normalise template args into a ``name → value`` dict.

    A bare string is only accepted when the template has exactly one input
    variable, in which case it is bound to that variable.
    """
    if isinstance(args, str):
        if len(input_variables) != 1:
            raise DataNotProvidedError(
                f"a single string was given but the template expects "
                f"{len(input_variables)} variables: {list(input_variables)}"
            )
        return {input_variables[0]: args}
    if isinstance(args, Mapping):
        return dict(args)
    raise TypeError(f"Template args must be a str or a mapping, got {type(args).__name__}")


def render(template: str, data: Mapping[str, Any] | Sequence[str]) -> str:
    """Render *template* in one shot.

    *data* is either a mapping, or a sequence whose items are matched to the
    placeholders in the order they first appear in the template.
    """
    names = _field_names_in_order(template)
    if isinstance(data, Mapping):
        values = dict(data)
    else:
        values = dict(zip(names, data))
    missing = [n for n in names if n not in values]
    if missing:
        raise DataNotProvidedError(f"missing values for {missing}")
    return _format(template, values)


class PromptTemplate:
    """A ``str.format`` template with named input variables and optional partials."""

    def __init__(
        self,
        template: str,
        input_variables: list[str] | None = None,
        partial_variables: Mapping[str, Any] | None = None,
    ) -> None:
        self.template = template
        self.input_variables = (
            list(input_variables) if input_variables is not None
            else extract_input_variables(template)
        )
        self.partial_variables: dict[str, Any] | None = None
        if partial_variables:
            self._apply_partials(partial_variables)

    @classmethod
    def from_template(cls, template: str) -> PromptTemplate:
        return cls(template)

    def _apply_partials(self, partial_variables: Mapping[str, Any]) -> None:
        self.input_variables = [v for v in self.input_variables if v not in partial_variables]
        self.partial_variables = {**(self.partial_variables or {}), **partial_variables}

    def with_partial_variables(self, partial_variables: Mapping[str, Any]) -> PromptTemplate:
        """Pre-fill some variables; they are removed from ``input_variables``."""
        self._apply_partials(partial_variables)
        return self

    def merge_partial_and_user_variables(self, user_variables: Mapping[str, Any]) -> dict[str, Any]:
        return {**(self.partial_variables or {}), **user_variables}

    def format(self, args: TemplateArgs) -> str:
        values = to_template_values(args, self.input_variables)
        missing = [v for v in self.input_variables if v not in values]
        if missing:
            raise DataNotProvidedError(f"missing values for {missing}")
        merged = self.merge_partial_and_user_variables(values)
        return _format(self.template, merged)

    def format_prompt(self, args: TemplateArgs) -> StringPromptValue:
        return StringPromptValue(self.format(args))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PromptTemplate):
            return NotImplemented
        return (
            self.template == other.template
            and self.input_variables == other.input_variables
            and self.partial_variables == other.partial_variables
        )

    def __repr__(self) -> str:
        return (
            f"PromptTemplate(template={self.template!r}, "
            f"input_variables={self.input_variables!r})"
        )
