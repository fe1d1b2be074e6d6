"""CLI entry point: chat with the chainkit assistant in the terminal.

This provides a simple terminal-based chat interface for trying the agent
loop. To serve it over HTTP, use the FastAPI server (chainkit/server.py).

Usage:
    python -m chainkit.main                    # normal mode (quiet)
    python -m chainkit.main --debug            # debug mode (shows API calls)
    python -m chainkit.main --model gpt-4o     # pick the chat model
    python -m chainkit.main --steps            # print tool calls as they happen
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from dotenv import load_dotenv

from chainkit.agents import AgentExecutor
from chainkit.agents.executor import ExecutorEvent
from chainkit.assistant import create_assistant
from chainkit.chat_models import ChatOpenAI
from chainkit.config import AGENT_MAX_ITERATIONS
from chainkit.errors import MaxIterationsError
from chainkit.schemas.agent import AgentAction, AgentFinish, AgentStep
from chainkit.schemas.memory import SimpleMemory

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool = False) -> None:
    """Set up logging: WARNING by default, DEBUG when --debug is passed."""
    root_level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=root_level,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )

    if not debug:
        # Silence chatty HTTP loggers even if root is WARNING
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("botocore").setLevel(logging.WARNING)

    logging.getLogger("chainkit").setLevel(logging.DEBUG if debug else logging.INFO)


def _describe(event: ExecutorEvent) -> str | None:
    """One-line trace of an agent event, or ``None`` for the final answer."""
    if isinstance(event, AgentAction):
        return f"  -> {event.tool}({event.tool_input!r})"
    if isinstance(event, AgentStep):
        observation = event.observation if len(event.observation) <= 200 else event.observation[:200] + "..."
        return f"  <- {observation}"
    return None


async def _chat_loop(executor: AgentExecutor, memory: SimpleMemory, show_steps: bool) -> None:
    # One event loop for the whole session: the async HTTP pool is bound to it
    while True:
        try:
            user_input = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\nGoodbye!")
            return

        if not user_input:
            continue

        if user_input.lower() in ("exit", "quit", "q"):
            print("\nGoodbye!")
            return

        if user_input.lower() == "new":
            memory.clear()
            print("\n>> Conversation cleared.\n")
            continue

        try:
            async for event in executor.astream(user_input):
                if isinstance(event, AgentFinish):
                    print(f"\nAssistant: {event.return_values}\n")
                elif show_steps:
                    print(_describe(event))

        except KeyboardInterrupt:
            print("\n\nGoodbye!")
            return
        except MaxIterationsError:
            logger.warning("Agent gave up after %s iterations", executor.max_iterations)
            print("\nAssistant: I couldn't finish that within my step limit.")
            print("     Try a simpler request, or restart with a higher --max-iterations.\n")
        except Exception as e:
            logger.exception("Error processing message")
            print(f"\nAssistant: I'm sorry, something went wrong: {e}")
            print("     Please try again or type 'new' to start over.\n")


def _iteration_limit(value: str) -> int:
    if not value.isdigit():
        raise argparse.ArgumentTypeError(f"must be 0 (no limit) or a positive integer, got {value!r}")
    return int(value)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="chainkit assistant CLI")
    parser.add_argument(
        "--debug", action="store_true",
        help="Show all log messages including HTTP requests",
    )
    parser.add_argument(
        "--model", default=None,
        help="Chat model to use (defaults to OPENAI_CHAT_MODEL)",
    )
    parser.add_argument(
        "--max-iterations", type=_iteration_limit, default=AGENT_MAX_ITERATIONS,
        help="Tool calls allowed per message; 0 for no limit",
    )
    parser.add_argument(
        "--steps", action="store_true",
        help="Print each tool call and its result as the agent works",
    )
    return parser


def main():
    """Run the interactive CLI chat loop."""
    args = _build_parser().parse_args()

    load_dotenv()
    _configure_logging(debug=args.debug)

    print("\n" + "=" * 60)
    print("  chainkit assistant - CLI Chat")
    print("=" * 60)
    print("  Type your message and press Enter.")
    print("  Commands: 'quit' to exit, 'new' to forget the conversation.")
    print("=" * 60 + "\n")

    memory = SimpleMemory()
    llm = ChatOpenAI(model=args.model)
    executor = create_assistant(memory=memory, llm=llm, max_iterations=args.max_iterations or None)
    logger.info("Assistant started with model %s", llm.model)

    async def _session() -> None:
        try:
            await _chat_loop(executor, memory, args.steps)
        finally:
            await llm.aclose()

    asyncio.run(_session())


if __name__ == "__main__":
    main()
