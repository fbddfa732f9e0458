"""Translation of MySQL-style commands into the session's target dialect."""

import logging

from ..dialect import Dialect
from .directives import DirectiveRewriter, is_directive
from .outcome import RewrittenQuery, TranslationOutcome
from .rules import HELP_RULES, REWRITE_RULES, match_rules

logger = logging.getLogger(__name__)

STATEMENT_TERMINATOR = ";"


class Translator:
    """Recognizes MySQL commands and rewrites them for the target backend.

    Translation is pure: it performs no I/O and never touches session state,
    so the same input always yields the same outcome.
    """

    def __init__(self, dialect: Dialect):
        self.dialect = dialect
        self.directives = DirectiveRewriter()

    def translate(self, raw: str) -> TranslationOutcome:
        """Translate one complete command.

        Args:
            raw: Command text, optionally ending with ';'

        Returns:
            A RewrittenQuery or a SpecialAction. Unrecognized input comes back
            unchanged as a RewrittenQuery.

        Raises:
            CommandSyntaxError: For an unknown backslash directive
            MissingArgumentError: For a directive missing its argument
        """
        if self.dialect.is_native:
            return RewrittenQuery(raw)
        return self._translate_foreign(raw.strip())

    def _translate_foreign(self, command: str) -> TranslationOutcome:
        normalized = self._strip_terminator(command)

        outcome = match_rules(HELP_RULES, normalized)
        if outcome is not None:
            return outcome

        outcome = match_rules(REWRITE_RULES, normalized)
        if outcome is not None:
            logger.debug(f"Rewrote command for {self.dialect.display_name}: {normalized}")
            return outcome

        if is_directive(command):
            return self.directives.rewrite(normalized)

        return RewrittenQuery(command)

    def _strip_terminator(self, command: str) -> str:
        if command.endswith(STATEMENT_TERMINATOR):
            command = command[: -len(STATEMENT_TERMINATOR)].rstrip()
        return command
