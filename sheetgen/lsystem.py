"""Context-sensitive stochastic L-system."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .rewriter import CSSLRewriter
from .rules import CSSLRule, CSSLRuleSet


@dataclass
class LSystemState:
    """Current word of an L-system and the number of steps taken."""

    iter_num: int = 0
    word: str = ""

    def __str__(self) -> str:
        return f"(iter {self.iter_num}): {self.word}"


class CSSLSystem:
    """An axiom expanded step by step by stochastic context-sensitive rules."""

    def __init__(self, axiom: str, rules: CSSLRuleSet) -> None:
        self.rewriter = CSSLRewriter(rules)
        self.axiom = axiom
        self.state = LSystemState(0, axiom)

    @classmethod
    def from_rules(cls, axiom: str, rules: Sequence[str]) -> CSSLSystem:
        """Create a system from rule strings; an invalid rule raises."""
        return cls(axiom, CSSLRuleSet.from_str_rules(rules))

    @property
    def rules(self) -> CSSLRuleSet:
        return self.rewriter.rules

    def step(self) -> list[CSSLRule]:
        """Rewrite the current word once and return the rules used."""
        word, used_rules = self.rewriter.rewrite(self.state.word)
        self.state.word = word
        self.state.iter_num += 1
        return used_rules

    def __repr__(self) -> str:
        return (
            f"CSSLSystem(axiom={self.axiom!r}, rules={self.rules!r}, "
            f"state={self.state!r})"
        )

    def __str__(self) -> str:
        return f"CSSLSystem: {{\n\taxiom = {self.axiom}\n\trules = {self.rules}\n}}"