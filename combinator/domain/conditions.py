from __future__ import annotations

"""Rule conditions (domain layer).

A condition decides whether a rule applies to a syllable triple. There are
two kinds:

- Always: matches every in-range triple (the catch-all).
- RegexCondition: a pattern matched against the three-jamo spelling of the
  triple, e.g. "ㄱㅏ0" for 가 or "ㅎㅏㄴ" for 한. The pattern must match the
  whole spelling, never a substring.

A regex condition's specificity is the number of triples it matches across
the full syllable space; lower is narrower.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Final, Union

from combinator.domain.errors import ConfigError
from combinator.domain.hangul import iter_syllables, match_string


@dataclass(frozen=True)
class Always:
    pass


@dataclass(frozen=True)
class RegexCondition:
    pattern: re.Pattern[str]

    @property
    def source(self) -> str:
        return self.pattern.pattern


Condition = Union[Always, RegexCondition]

ALWAYS: Final[Always] = Always()

# Priority of the catch-all rule.
ALWAYS_PRIORITY: Final[int] = 0


# -----------------------------------------------------------------------------
# Matching
# -----------------------------------------------------------------------------

def compile_condition(pattern: str) -> RegexCondition:
    """Compile a rule pattern.

    Raises:
        ConfigError: if the pattern is not a valid regular expression.
    """
    try:
        return RegexCondition(re.compile(pattern))
    except re.error as e:
        raise ConfigError("Invalid rule pattern {!r}: {}".format(pattern, e)) from e


def matches(condition: Condition, ini: int, mid: int, fin: int) -> bool:
    spelled = match_string(ini, mid, fin)
    if spelled is None:
        return False
    return _matches_spelled(condition, spelled)


def _matches_spelled(condition: Condition, spelled: str) -> bool:
    if isinstance(condition, Always):
        return True
    if isinstance(condition, RegexCondition):
        return condition.pattern.fullmatch(spelled) is not None
    raise TypeError("Unknown condition kind: {!r}".format(condition))


# -----------------------------------------------------------------------------
# Specificity
# -----------------------------------------------------------------------------

@lru_cache(maxsize=1)
def _all_spellings() -> tuple[str, ...]:
    return tuple(s.label for s in iter_syllables())


def rank_condition(condition: Condition) -> int:
    """Return the rule priority for a condition.

    For a regex this is the count of syllable triples it matches; the catch-all
    is pinned at ALWAYS_PRIORITY.
    """
    if isinstance(condition, Always):
        return ALWAYS_PRIORITY
    return sum(1 for spelled in _all_spellings() if _matches_spelled(condition, spelled))
