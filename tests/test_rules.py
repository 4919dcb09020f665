import pytest

from combinator.domain.conditions import ALWAYS, matches
from combinator.domain.errors import ConfigError
from combinator.domain.hangul import iter_syllables
from combinator.domain.rules import GlyphRules


def test_narrowest_rule_wins_regardless_of_declaration_order():
    rules = GlyphRules.from_mapping({"ㄱ..": 0, "ㄱ[ㅗㅛㅜㅠㅡ].": 1, "ㄱㅗㄴ": 2})
    assert [r.priority for r in rules.rules] == [1, 5 * 28, 21 * 28]
    assert rules.resolve(0, 8, 4) == 2  # 곤
    assert rules.resolve(0, 8, 0) == 1  # 고
    assert rules.resolve(0, 0, 0) == 0  # 가


def test_equal_priority_keeps_declaration_order():
    first = GlyphRules.from_mapping({"ㄱ..": 1, "ㄱ.*": 2})
    second = GlyphRules.from_mapping({"ㄱ.*": 2, "ㄱ..": 1})
    assert first.rules[0].priority == first.rules[1].priority
    assert first.resolve(0, 0, 0) == 1
    assert second.resolve(0, 0, 0) == 2


def test_catch_all_has_priority_zero_but_only_applies_last():
    rules = GlyphRules.from_mapping({"ㄴ..": 3}, default=7)
    assert rules.rules[-1].condition == ALWAYS
    assert rules.rules[-1].priority == 0
    assert rules.resolve(2, 0, 0) == 3
    assert rules.resolve(0, 0, 0) == 7

    broad = GlyphRules.from_mapping({".*": 4}, default=7)
    assert broad.resolve(0, 0, 0) == 4


def test_unconfigured_never_resolves():
    rules = GlyphRules.unconfigured()
    assert len(rules) == 1
    assert rules.max_variant() is None
    assert all(rules.resolve(*s) is None for s in iter_syllables())


def test_zero_rules_never_resolve():
    rules = GlyphRules.from_mapping({})
    assert len(rules) == 0
    assert all(rules.resolve(*s) is None for s in iter_syllables())


def test_resolved_variant_belongs_to_a_matching_rule():
    rules = GlyphRules.from_mapping({"[ㄱㄴ][ㅏㅓ].": 0, ".[ㅗㅜ]0": 1, "ㅎ..": 2})
    for s in iter_syllables():
        variant = rules.resolve(*s)
        if variant is None:
            assert not any(matches(r.condition, *s) for r in rules.rules)
        else:
            first = next(r for r in rules.rules if matches(r.condition, *s))
            assert first.variant == variant


def test_max_variant():
    assert GlyphRules.from_mapping({"ㄱ..": 4, "ㄴ..": 9}, default=2).max_variant() == 9


@pytest.mark.parametrize("variant", [-1, "1", 1.5, True, None])
def test_bad_variant_is_config_error(variant):
    with pytest.raises(ConfigError) as e:
        GlyphRules.from_mapping({"ㄱ..": variant}, where="ini/ㄱ")
    assert "ini/ㄱ" in str(e.value)


def test_bad_pattern_names_jamo_and_pattern():
    with pytest.raises(ConfigError) as e:
        GlyphRules.from_mapping({"(ㄱ": 0}, where="mid/ㅏ")
    msg = str(e.value)
    assert "mid/ㅏ" in msg
    assert "(ㄱ" in msg


def test_regex_table_must_be_mapping():
    with pytest.raises(ConfigError):
        GlyphRules.from_mapping(["ㄱ.."])
