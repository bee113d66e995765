"""Rewriting of words by a context-sensitive stochastic rule set."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .rules import CSSLRule, CSSLRuleSet


@dataclass
class CSSLRewriter:
    """Rewrites words right to left using the rules of a rule set."""

    rules: CSSLRuleSet = field(default_factory=CSSLRuleSet)

    MAX_LSIDE_LEN: ClassVar[int] = 3
    """Longest left side (context included) the rewriter looks at."""

    def rewrite(self, text: str) -> tuple[str, list[CSSLRule]]:
        """Rewrite ``text`` once; return the new word and the rules used.

        A window of at most ``MAX_LSIDE_LEN`` characters slides from the end
        of the word; a matching rule replaces its whole left side, otherwise
        the last character of the window is kept.
        """
        pieces: list[str] = []
        used_rules: list[CSSLRule] = []

        i = len(text) - 1
        while i >= 0:
            window = text[max(0, i - self.MAX_LSIDE_LEN + 1) : i + 1]
            rule = self.rules.select(window)
            if rule is None:
                consumed, right = 1, window[-1]
            else:
                if not rule.left:
                    raise ValueError(f"Rule '{rule}' has an empty left side")
                used_rules.append(rule)
                consumed, right = len(rule.left), rule.right
            pieces.append(right)
            i -= consumed

        return "".join(reversed(pieces)), used_rules