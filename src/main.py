"""CLI entry point for the Services Assistant.

A terminal chat loop for trying the assistant without the HTTP server.
Uses whichever provider ``LLM_PROVIDER`` selects (``mock`` by default), and
no catalog: suggestion fallbacks come back with an empty list.

Usage:
    uv run python -m src.main                 # chat (quiet)
    uv run python -m src.main --debug         # show provider / store logs
    uv run python -m src.main --locale fr     # answer in French

Commands inside the loop:
    new              start a new conversation
    suggest <text>   ask for service suggestions
    doc <text>       ask for document assistance
    quit             exit
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import uuid

from dotenv import load_dotenv

from src.assistant.guardrails import ValidationError
from src.assistant.models import Caller, ChatRequest, DocumentRequest, SuggestionsRequest
from src.assistant.orchestrator import AssistantOrchestrator, create_assistant

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool = False) -> None:
    """Set up logging: WARNING by default, DEBUG when --debug is passed."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )

    if not debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger("src").setLevel(logging.DEBUG if debug else logging.INFO)


async def _handle(
    assistant: AssistantOrchestrator,
    caller: Caller,
    conversation_id: str,
    locale: str | None,
    user_input: str,
) -> str:
    command, _, rest = user_input.partition(" ")

    if command.lower() == "suggest":
        result = await assistant.suggest_services(
            caller, SuggestionsRequest(context=rest, locale=locale),
        )
        lines = [result.message] if result.message else []
        lines += [f"  • {s.title} — {s.description}" for s in result.suggestions]
        return "\n".join(lines) or "(no suggestions)"

    if command.lower() == "doc":
        result = await assistant.assist_document(
            caller, DocumentRequest(prompt=rest, locale=locale),
        )
        return "\n".join([result.answer, *(f"  ? {q}" for q in result.follow_up)])

    result = await assistant.chat(
        caller,
        ChatRequest(message=user_input, conversation_id=conversation_id, locale=locale),
    )
    suffix = "  [offline]" if result.fallback else ""
    return f"{result.reply}{suffix}"


async def _chat_loop(locale: str | None) -> None:
    assistant = create_assistant()
    caller = Caller(id="cli-user", locale=locale)
    conversation_id = str(uuid.uuid4())
    logger.info("Started new conversation: %s", conversation_id)

    while True:
        try:
            user_input = (await asyncio.to_thread(input, "You: ")).strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\nGoodbye!")
            break

        if not user_input:
            continue

        if user_input.lower() in ("exit", "quit", "q"):
            print("\nGoodbye!")
            break

        if user_input.lower() == "new":
            conversation_id = str(uuid.uuid4())
            print(f"\n>> New conversation started: {conversation_id[:8]}...\n")
            continue

        try:
            reply = await _handle(assistant, caller, conversation_id, locale, user_input)
        except ValidationError as exc:
            print(f"\nAssistant: {exc}\n")
            continue
        print(f"\nAssistant: {reply}\n")


def main():
    """Run the interactive CLI chat loop."""
    parser = argparse.ArgumentParser(description="Services Assistant CLI")
    parser.add_argument(
        "--debug", action="store_true",
        help="Show all log messages including provider calls",
    )
    parser.add_argument("--locale", default=None, help="Preferred locale, e.g. en, fr, ar")
    args = parser.parse_args()

    load_dotenv()
    _configure_logging(debug=args.debug)

    print("\n" + "=" * 60)
    print("  Services Assistant - CLI Chat")
    print("=" * 60)
    print("  Type your message and press Enter.")
    print("  Commands: 'new', 'suggest <text>', 'doc <text>', 'quit'.")
    print("=" * 60 + "\n")

    try:
        asyncio.run(_chat_loop(args.locale))
    except KeyboardInterrupt:
        print("\n\nGoodbye!")


if __name__ == "__main__":
    main()
