"""Application state and the operations its panels perform on it."""

from __future__ import annotations

import tarfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .editing import RuleEditState
from .interpret import MusicIntInfo
from .lsystem import CSSLSystem
from .rules import CSSLRule, CSSLRuleSet
from .sanitizer import LilySanitizer

DEFAULT_AXIOM = "F++++F--F++F"

_DEFAULT_RULES = (
    "F -> F % 1/2",
    "F -> FF % 1/15",
    "F -> F+F % 1/15",
    "F -> F-F % 1/15",
    "FF -> [Fd+F-F] % 1/40",
    "FF -> [Fd-F+F] % 1/40",
    "FF -> [dF+F]F % 1/40",
    "FF -> [dF-F]F % 1/40",
    "F+F -> [Fd+F+F] % 1/40",
    "F-F -> [Fd-F-F] % 1/40",
    "F+F -> [dF+F]++F % 1/40",
    "F-F -> [dF-F]--F % 1/40",
    "F-F -> [Fd++F]--F % 1/40",
    "F-F -> [Fd-F]++F % 1/40",
    "F+F -> [Fd+++F--F] % 1/40",
    "F+F -> [Fd----F++F] % 1/40",
)


def default_rules() -> CSSLRuleSet:
    """The rule set the application starts with."""
    return CSSLRuleSet.from_str_rules(_DEFAULT_RULES)


@dataclass
class AppState:
    """Grammar, interpretation settings, the running L-system and its results."""

    rules: CSSLRuleSet = field(default_factory=default_rules)
    axiom: str = DEFAULT_AXIOM
    music_int_info: MusicIntInfo = field(default_factory=MusicIntInfo)
    lily_sanitizer: LilySanitizer = field(default_factory=LilySanitizer)
    l_system: Optional[CSSLSystem] = None
    used_rules_history: list[list[CSSLRule]] = field(default_factory=list)
    score_images: Optional[list[Path]] = None
    score_audio: Optional[Path] = None
    dirty: bool = True

    def __post_init__(self) -> None:
        if self.l_system is None:
            self.l_system = self._new_system()

    def _new_system(self) -> CSSLSystem:
        return CSSLSystem(self.axiom, CSSLRuleSet(list(self.rules.rules)))

    def reset(self) -> None:
        """Restart the L-system from the axiom and drop all results."""
        self.l_system = self._new_system()
        self.used_rules_history.clear()
        self.score_images = None
        self.score_audio = None
        self.dirty = True

    def apply_changes(self) -> None:
        """Rebuild the L-system from the current axiom and rules."""
        self.l_system = self._new_system()

    def export(self, path: Union[str, Path]) -> Path:
        """Pack the score images and audio into a tar archive; return its path.

        A ``.tar`` suffix is added to ``path`` unless it already has one.
        """
        target = Path(path)
        if target.suffix != ".tar":
            target = target.with_name(target.name + ".tar")

        with tarfile.open(target, "w") as archive:
            for image in self.score_images or []:
                archive.add(image, arcname=Path(image).name)
            if self.score_audio is not None:
                archive.add(self.score_audio, arcname=Path(self.score_audio).name)
        return target

    def last_used_rules(self) -> list[CSSLRule]:
        """Rules used by the most recent step, empty before the first one."""
        return self.used_rules_history[-1] if self.used_rules_history else []


class ControlPanel:
    """Steps the L-system forward and back."""

    def __init__(self, app_state: AppState) -> None:
        self.n_steps = 1
        self.prev_word = app_state.axiom

    def step(self, app_state: AppState, n: int = 1) -> None:
        """Advance the L-system ``n`` times, recording the rules used."""
        for _ in range(n):
            self.prev_word = app_state.l_system.state.word
            app_state.used_rules_history.append(app_state.l_system.step())

    def back(self, app_state: AppState) -> None:
        """Return to the word before the last step."""
        state = app_state.l_system.state
        state.word = self.prev_word
        state.iter_num -= 1
        if app_state.used_rules_history:
            app_state.used_rules_history.pop()

    def retry_step(self, app_state: AppState) -> None:
        """Undo the last step and take it again."""
        self.back(app_state)
        self.step(app_state, 1)
        app_state.dirty = True


class GrammarEdit:
    """Edits the rules and axiom before applying them to the application."""

    def __init__(self, app_state: AppState) -> None:
        self.rule_edit_state = RuleEditState.from_ruleset(app_state.rules)
        self.axiom = app_state.axiom

    def apply(self, app_state: AppState) -> None:
        """Check the edited grammar and make it the application's grammar."""
        self.rule_edit_state.check()
        app_state.rules = CSSLRuleSet(list(self.rule_edit_state.rules))
        app_state.apply_changes()
        app_state.axiom = self.axiom