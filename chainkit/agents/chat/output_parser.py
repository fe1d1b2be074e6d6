"""Parse the conversational agent's reply into an action or a final answer.

The model is asked for a fenced JSON blob::

    ```json
    {"action": "search", "action_input": "president of Peru"}
    ```

``"action": "Final Answer"`` ends the run.  Replies without an action blob are
treated as the final answer, using the text after ``Final Answer:`` when the
model wrote that marker.  Only a fenced block must carry ``action``; a bare
``{...}`` without it is just part of a prose answer.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from chainkit.agents.base import AgentOutputParser
from chainkit.agents.chat.prompt import FORMAT_INSTRUCTIONS
from chainkit.errors import OutputParserError
from chainkit.schemas.agent import AgentAction, AgentEvent, AgentFinish

logger = logging.getLogger(__name__)

FINAL_ANSWER_ACTION = "Final Answer"

_FENCED_RE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)
_FINAL_ANSWER_RE = re.compile(r"Final Answer\s*:\s*(.*)", re.DOTALL)
_DECODER = json.JSONDecoder()


def _first_json_object(text: str) -> dict[str, Any] | None:
    """Return the first ``{...}`` in *text* that decodes to a dict with an ``action`` key."""
    for match in re.finditer(r"\{", text):
        try:
            obj, _ = _DECODER.raw_decode(text, match.start())
        except ValueError:
            continue
        if isinstance(obj, dict) and "action" in obj:
            return obj
    return None


class ConvoOutputParser(AgentOutputParser):
    def get_format_instructions(self) -> str:
        return FORMAT_INSTRUCTIONS

    def parse(self, text: str) -> AgentEvent:
        blob = self._extract_blob(text)
        if blob is not None:
            return self._to_event(blob, text)

        final = _FINAL_ANSWER_RE.search(text)
        if final:
            return AgentFinish(return_values=final.group(1).strip(), log=text)

        logger.debug("No action blob in agent output, treating it as the final answer")
        return AgentFinish(return_values=text.strip(), log=text)

    @staticmethod
    def _extract_blob(text: str) -> dict[str, Any] | None:
        fenced = _FENCED_RE.search(text)
        if fenced:
            body = fenced.group(1).strip()
            try:
                blob = json.loads(body)
            except ValueError as exc:
                # Backticks inside a JSON string end the fence early; decode from the brace instead
                whole = _first_json_object(text)
                if whole is not None:
                    return whole
                # Prose answers sometimes contain code fences; fall back to the marker
                if _FINAL_ANSWER_RE.search(text):
                    return None
                raise OutputParserError(f"Could not parse LLM output: {exc}", llm_output=text) from exc
            if not isinstance(blob, dict) or "action" not in blob:
                raise OutputParserError("Action blob is missing the `action` key", llm_output=text)
            return blob
        return _first_json_object(text)

    @staticmethod
    def _to_event(blob: dict[str, Any], text: str) -> AgentEvent:
        action = str(blob["action"]).strip()
        action_input = blob.get("action_input", "")
        if not isinstance(action_input, str):
            action_input = json.dumps(action_input)

        if action == FINAL_ANSWER_ACTION:
            return AgentFinish(return_values=action_input, log=text)
        return AgentAction(tool=action, tool_input=action_input, log=text)
