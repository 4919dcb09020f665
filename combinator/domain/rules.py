from __future__ import annotations

"""Variant resolution (domain layer).

Each jamo (for example initial ㄱ, or final ㄺ) owns an ordered list of rules.
A rule pairs a condition with the index of the sprite-sheet cell to draw when
the condition holds.

Ordering:
- Regex rules are sorted by ascending priority (match count), so the
  narrowest pattern wins.
- Equal priorities keep declaration order.
- The catch-all rule always comes last.

Resolution is first-match-wins over that order.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from combinator.domain.conditions import ALWAYS, Always, Condition, compile_condition, matches, rank_condition
from combinator.domain.errors import ConfigError


@dataclass(frozen=True)
class Rule:
    condition: Condition
    priority: int
    variant: Optional[int]

    @property
    def is_catch_all(self) -> bool:
        return isinstance(self.condition, Always)

    def sort_key(self) -> tuple[bool, int]:
        return self.is_catch_all, self.priority


def make_rule(condition: Condition, variant: Optional[int]) -> Rule:
    return Rule(condition=condition, priority=rank_condition(condition), variant=variant)


@dataclass(frozen=True)
class GlyphRules:
    """The sorted, immutable rule list of one jamo."""

    rules: tuple[Rule, ...] = ()

    @classmethod
    def from_rules(cls, rules: Iterable[Rule]) -> "GlyphRules":
        return cls(tuple(sorted(rules, key=Rule.sort_key)))

    @classmethod
    def unconfigured(cls) -> "GlyphRules":
        """Rules for a jamo with no configuration: it never contributes a glyph."""
        return cls((Rule(condition=ALWAYS, priority=0, variant=None),))

    @classmethod
    def from_mapping(
        cls,
        regex_table: Optional[Mapping[str, Any]],
        default: Any = None,
        *,
        where: str = "",
    ) -> "GlyphRules":
        """Build rules from a {pattern: variant} table plus an optional catch-all variant.

        Args:
            regex_table: patterns in declaration order.
            default: variant used when no pattern matches, or None.
            where: context for error messages (e.g. "ini/ㄱ").

        Raises:
            ConfigError: for an invalid pattern or a non-integer variant.
        """
        prefix = "{}: ".format(where) if where else ""
        if regex_table is None:
            regex_table = {}
        if not isinstance(regex_table, Mapping):
            raise ConfigError("{}'regex' must be a mapping of pattern to variant".format(prefix))

        rules: list[Rule] = []
        for pattern, variant in regex_table.items():
            if not isinstance(pattern, str):
                raise ConfigError("{}rule pattern must be a string, got {!r}".format(prefix, pattern))
            try:
                condition = compile_condition(pattern)
            except ConfigError as e:
                raise ConfigError("{}{}".format(prefix, e)) from e
            rules.append(make_rule(condition, _variant(variant, prefix, pattern)))

        if default is not None:
            rules.append(make_rule(ALWAYS, _variant(default, prefix, "default")))

        return cls.from_rules(rules)

    def resolve(self, ini: int, mid: int, fin: int) -> Optional[int]:
        for rule in self.rules:
            if matches(rule.condition, ini, mid, fin):
                return rule.variant
        return None

    def max_variant(self) -> Optional[int]:
        variants = [r.variant for r in self.rules if r.variant is not None]
        return max(variants) if variants else None

    def __len__(self) -> int:
        return len(self.rules)


def _variant(value: Any, prefix: str, pattern: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(
            "{}variant for {!r} must be a non-negative integer, got {!r}".format(prefix, pattern, value)
        )
    return value
