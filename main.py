"""
Saba - Portfolio Assistant (console host)

Interactive chat loop around the query resolution engine. Loads the
knowledge base and synonym table, then answers questions about the
portfolio owner's projects, skills and experience until the user quits.

The system integrates:
- Strict small-talk handling for greetings and thanks
- Canonical shortcut questions
- Synonym expansion + weighted fuzzy matching against the knowledge base
- "Did you mean" suggestions and "yes"-driven follow-ups
"""

import sys
from typing import Callable, Optional

import assistant_config as config
from assistant_errors import AssistantError
from conversation_context import ConversationContext
from exception_logger import exception_logger
from knowledge_loader import load_knowledge_base, load_synonyms
from response_manager import ResponseManager

EXIT_COMMANDS = {"quit", "exit", "bye"}


class PortfolioAssistantApp:
    """
    Console orchestrator for the portfolio assistant.

    Owns one ``ConversationContext`` for the whole session and prints each
    answer followed by the next suggested follow-up, if any.

    Attributes:
        engine (ResponseManager): Query resolution engine
        context (ConversationContext): State of the current conversation
        input_fn (callable): Reads one line of user input
        output_fn (callable): Writes one block of assistant output
    """

    def __init__(
        self,
        engine: Optional[ResponseManager] = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        """
        Initialize the app. Loads the configured knowledge base when no
        engine is supplied.

        Raises:
            KnowledgeBaseLoadError: Knowledge base or synonyms unreadable
        """
        exception_logger.set_log_file(config.ERROR_LOG_PATH)
        if engine is None:
            print("[PortfolioAssistant] Loading knowledge base")
            engine = ResponseManager(
                knowledge_base=load_knowledge_base(config.KNOWLEDGE_BASE_SOURCE),
                synonyms=load_synonyms(config.SYNONYMS_SOURCE),
            )
            print(f"[PortfolioAssistant] Indexed {len(engine.index)} documents")

        self.engine = engine
        self.context = ConversationContext()
        self.input_fn = input_fn
        self.output_fn = output_fn

    def handle_message(self, message: str) -> str:
        """Resolve one message and return the text to show (answer + hint)."""
        resolution = self.engine.resolve(message, self.context)
        text = resolution.text
        if self.context.pending_follow_ups:
            prompt = self.context.pending_follow_ups[
                self.context.follow_up_cursor % len(self.context.pending_follow_ups)
            ]
            text += f"\n\nSuggested next: {prompt} (reply yes to continue)"
        return text

    def run(self):
        """Chat until the user types quit/exit or input ends."""
        self.output_fn(config.GREETING)
        while True:
            try:
                message = self.input_fn("> ").strip()
            except (EOFError, KeyboardInterrupt):
                self.output_fn("")
                break

            if not message:
                continue
            if message.lower() in EXIT_COMMANDS:
                break

            try:
                self.output_fn(self.handle_message(message))
            except AssistantError as e:
                exception_logger.log_exception(e, "main", f"message: {message!r}")
                self.output_fn(f"Sorry, I can't answer right now: {e}")


# Application entry point
if __name__ == "__main__":
    try:
        app = PortfolioAssistantApp()
    except AssistantError as e:
        print(f"[PortfolioAssistant] Startup failed: {e}")
        sys.exit(1)
    app.run()
