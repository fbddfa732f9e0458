"""Recognizer and rewriter for MySQL-style commands."""

from .directives import DirectiveRewriter
from .outcome import (
    ActionKind,
    RewrittenQuery,
    SpecialAction,
    TranslationOutcome,
    is_special,
)
from .rules import RewriteRule, like_to_regex
from .translator import Translator

__all__ = [
    "ActionKind",
    "DirectiveRewriter",
    "RewriteRule",
    "RewrittenQuery",
    "SpecialAction",
    "TranslationOutcome",
    "Translator",
    "is_special",
    "like_to_regex",
]
