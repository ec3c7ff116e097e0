"""
Named pattern tables used by conflict detection and history analysis.
Path: intention/skills/patterns.py

Kept apart from the matching code so the tables can be reviewed, tested and
extended on their own.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Pattern, Tuple

@dataclass(frozen=True)
class OppositePattern:
    """Two mutually contradicting actions"""
    name: str
    first: Pattern
    second: Pattern

    def opposes(self, left: str, right: str) -> bool:
        """True when left and right match opposite sides of the pair"""
        return bool(
            (self.first.search(left) and self.second.search(right))
            or (self.second.search(left) and self.first.search(right))
        )

@dataclass(frozen=True)
class ThemePattern:
    theme: str
    pattern: Pattern

def _words(*alternatives: str) -> Pattern:
    return re.compile(r"\b(?:" + "|".join(alternatives) + r")\b", re.IGNORECASE)

OPPOSITE_ACTION_PATTERNS: Tuple[OppositePattern, ...] = (
    OppositePattern(
        "add/remove",
        _words(r"add(?:s|ed|ing)?", r"creat(?:e|es|ed|ing)",
               r"implement(?:s|ed|ing)?", r"includ(?:e|es|ed|ing)"),
        _words(r"remov(?:e|es|ed|ing)", r"delet(?:e|es|ed|ing)",
               r"exclud(?:e|es|ed|ing)", r"drop(?:s|ped|ping)?"),
    ),
    OppositePattern(
        "enable/disable",
        _words(r"enabl(?:e|es|ed|ing)", r"activat(?:e|es|ed|ing)", r"turn(?:s|ed|ing)?\s+on"),
        _words(r"disabl(?:e|es|ed|ing)", r"deactivat(?:e|es|ed|ing)", r"turn(?:s|ed|ing)?\s+off"),
    ),
    OppositePattern(
        "increase/decrease",
        _words(r"increas(?:e|es|ed|ing)", r"expand(?:s|ed|ing)?", r"grow(?:s|ing|n)?"),
        _words(r"decreas(?:e|es|ed|ing)", r"reduc(?:e|es|ed|ing)", r"shrink(?:s|ing)?"),
    ),
    OppositePattern(
        "public/private",
        _words(r"public", r"expos(?:e|es|ed|ing)", r"open(?:s|ed|ing)?"),
        _words(r"private", r"hid(?:e|es|ing|den)", r"restrict(?:s|ed|ing)?"),
    ),
    OppositePattern(
        "synchronous/asynchronous",
        _words(r"synchronous(?:ly)?", r"sync"),
        _words(r"asynchronous(?:ly)?", r"async", r"promises?", r"await"),
    ),
    OppositePattern(
        "mutable/immutable",
        _words(r"mutable", r"var", r"let"),
        _words(r"immutable", r"const", r"readonly"),
    ),
)

# Matched in declaration order; ties in theme ranking keep this order
THEME_PATTERNS: Tuple[ThemePattern, ...] = (
    ThemePattern("Bug Fixes", re.compile(r"\bbug\s*fix|\b(?:fix|repair|patch)", re.IGNORECASE)),
    ThemePattern("Feature Development", _words(r"features?", r"implement\w*", r"add\w*", r"creat\w*")),
    ThemePattern("Refactoring", re.compile(r"\b(?:refactor|reorganiz|restructur)", re.IGNORECASE)),
    ThemePattern("Testing", _words(r"tests?", r"testing", r"specs?")),
    ThemePattern("Documentation", re.compile(r"\b(?:document|docs?\b|readme)", re.IGNORECASE)),
    ThemePattern("Security", re.compile(r"\bsecurity|auth|\bpermission", re.IGNORECASE)),
    ThemePattern("Performance", re.compile(r"\b(?:performance|optimi[sz]|speed)", re.IGNORECASE)),
    ThemePattern("UI/UX", _words(r"ui", r"ux", r"interfaces?", r"styles?", r"styling")),
    ThemePattern("API Development", _words(r"apis?", r"endpoints?", r"routes?", r"routing")),
    ThemePattern("Database", re.compile(r"\b(?:database|quer(?:y|ies)|migration)", re.IGNORECASE)),
)

STOP_WORDS: FrozenSet[str] = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at",
    "to", "for", "of", "with", "from",
})

# Tokens of this length or shorter are never significant
MIN_KEYWORD_LENGTH = 3
