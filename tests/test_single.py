"""Tests for single-duration interpretation.

Covers: lexing, token parsing, bare minutes, unit sums with a trailing
number, time of day (am/pm, 24-hour, closest occurrence) and every
error reason.
"""

import pytest
from datetime import datetime, time, timedelta, timezone

from countchain.interpreter import (
    interpret_single,
    duration_until,
    TimeUnit,
    Meridiem,
    NaN,
    InvalidCharacter,
    InvalidNumber,
    InvalidUnit,
    SmallerThanMilli,
    ClashingFormats,
    TooManySeparators,
    Empty,
    Unknown,
    TrailingMeridiem,
    InvalidTime,
    InterpretError,
)
from countchain.interpreter.evaluate import InputFormat, detect_format
from countchain.interpreter.lexer import Group, GroupKind, lex
from countchain.interpreter.tokens import Token, parse_tokens

NOON = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def minutes(n):
    return timedelta(minutes=n)


# ═══════════════════════════════════════════════════════════════════════════
#  LEXER
# ═══════════════════════════════════════════════════════════════════════════


class TestLexer:

    def test_groups_runs_of_same_kind(self):
        assert lex("12hr30") == [
            Group(GroupKind.NUMBER, "12"),
            Group(GroupKind.TEXT, "hr"),
            Group(GroupKind.NUMBER, "30"),
        ]

    def test_spaces_removed_and_lowercased(self):
        assert lex(" 3 H ") == [
            Group(GroupKind.NUMBER, "3"),
            Group(GroupKind.TEXT, "h"),
        ]

    def test_spaces_join_numbers(self):
        assert lex("1 2") == [Group(GroupKind.NUMBER, "12")]

    def test_every_separator_is_its_own_group(self):
        assert [g.kind for g in lex("1::2")] == [
            GroupKind.NUMBER,
            GroupKind.SEPARATOR,
            GroupKind.SEPARATOR,
            GroupKind.NUMBER,
        ]

    def test_dot_is_part_of_a_number(self):
        assert lex("1.5m")[0] == Group(GroupKind.NUMBER, "1.5")

    def test_invalid_character(self):
        with pytest.raises(InvalidCharacter) as exc:
            lex("3$")
        assert exc.value.args == ("$",)

    def test_empty_text(self):
        assert lex("") == []


# ═══════════════════════════════════════════════════════════════════════════
#  TOKENS
# ═══════════════════════════════════════════════════════════════════════════


class TestTokens:

    def test_number_unit_meridiem_separator(self):
        tokens = parse_tokens(lex("5:30pm"))
        assert tokens == [
            Token.number(5.0),
            Token.separator(),
            Token.number(30.0),
            Token.meridiem(Meridiem.POST),
        ]

    @pytest.mark.parametrize("text, unit", [
        ("ms", TimeUnit.MILLI),
        ("milliseconds", TimeUnit.MILLI),
        ("s", TimeUnit.SEC),
        ("secs", TimeUnit.SEC),
        ("m", TimeUnit.MIN),
        ("minutes", TimeUnit.MIN),
        ("hr", TimeUnit.HOUR),
        ("hours", TimeUnit.HOUR),
        ("d", TimeUnit.DAY),
        ("days", TimeUnit.DAY),
    ])
    def test_unit_spellings(self, text, unit):
        assert parse_tokens(lex(text)) == [Token.unit(unit)]

    def test_am(self):
        assert parse_tokens(lex("AM"))[0].value is Meridiem.ANTE

    def test_unknown_word(self):
        with pytest.raises(InvalidUnit) as exc:
            parse_tokens(lex("3 parsecs"))
        assert exc.value.args == ("parsecs",)

    def test_two_dots_is_invalid_number(self):
        with pytest.raises(InvalidNumber) as exc:
            parse_tokens(lex("1.2.3"))
        assert exc.value.args == ("1.2.3",)

    def test_lone_dot_is_invalid_number(self):
        with pytest.raises(InvalidNumber):
            parse_tokens(lex("."))

    def test_dotted_meridiem_splits_into_bad_unit(self):
        # "." lexes as a number, so "a.m." never reaches the meridiem table
        with pytest.raises(InvalidUnit):
            interpret_single("5a.m.")


# ═══════════════════════════════════════════════════════════════════════════
#  FORMAT SELECTION
# ═══════════════════════════════════════════════════════════════════════════


class TestFormat:

    def test_one_token_is_single_number(self):
        assert detect_format([Token.number(3.0)]) is InputFormat.SINGLE_NUMBER

    def test_separator_means_time(self):
        tokens = [Token.number(3.0), Token.separator()]
        assert detect_format(tokens) is InputFormat.TIME

    def test_meridiem_means_time(self):
        tokens = [Token.number(3.0), Token.meridiem(Meridiem.ANTE)]
        assert detect_format(tokens) is InputFormat.TIME

    def test_otherwise_units(self):
        tokens = [Token.number(3.0), Token.unit(TimeUnit.HOUR)]
        assert detect_format(tokens) is InputFormat.UNITS


# ═══════════════════════════════════════════════════════════════════════════
#  BARE MINUTES AND UNITS
# ═══════════════════════════════════════════════════════════════════════════


class TestUnits:

    def test_bare_integer_is_minutes(self):
        assert interpret_single("23") == minutes(23)

    def test_zero(self):
        assert interpret_single("0") == timedelta(0)

    def test_fractional_minutes(self):
        assert interpret_single("1.5") == timedelta(seconds=90)

    def test_synonyms_agree(self):
        assert interpret_single("3h") == interpret_single("3 hours")
        assert interpret_single("3h") == interpret_single("3 HRS")

    def test_sum_of_units(self):
        assert interpret_single("1h 30m") == minutes(90)
        assert interpret_single("1d2h3m4s5ms") == timedelta(
            days=1, hours=2, minutes=3, seconds=4, milliseconds=5,
        )

    def test_units_may_repeat_and_go_upward(self):
        assert interpret_single("10s 1m") == timedelta(seconds=70)
        assert interpret_single("1h1h") == timedelta(hours=2)

    def test_trailing_number_takes_smaller_unit(self):
        assert interpret_single("3h4") == interpret_single("3h 4m")
        assert interpret_single("2m 30") == timedelta(minutes=2, seconds=30)
        assert interpret_single("1s 250") == timedelta(seconds=1, milliseconds=250)

    def test_trailing_number_after_millis(self):
        with pytest.raises(SmallerThanMilli) as exc:
            interpret_single("5ms3")
        assert exc.value.args == (3.0,)

    def test_fraction_of_a_milli_rounds(self):
        assert interpret_single("1.4ms") == timedelta(milliseconds=1)

    def test_unit_without_number_clashes(self):
        with pytest.raises(ClashingFormats):
            interpret_single("h3")

    def test_lone_unit_is_empty(self):
        with pytest.raises(Empty):
            interpret_single("h")

    def test_blank_is_empty(self):
        with pytest.raises(Empty):
            interpret_single("   ")

    def test_overflow_is_nan(self):
        with pytest.raises(NaN):
            interpret_single("99999999999999d")

    def test_overflowing_sum_is_nan(self):
        with pytest.raises(NaN):
            interpret_single("999999999d 999999999d")


# ═══════════════════════════════════════════════════════════════════════════
#  TIME OF DAY
# ═══════════════════════════════════════════════════════════════════════════


class TestTimeOfDay:

    def test_pm(self):
        assert interpret_single("5:30pm", now=NOON) == timedelta(hours=5, minutes=30)

    def test_am_is_tomorrow_after_noon(self):
        assert interpret_single("9am", now=NOON) == timedelta(hours=21)

    def test_12am_is_midnight(self):
        assert interpret_single("12am", now=NOON) == timedelta(hours=12)

    def test_12pm_at_noon_is_a_day_away(self):
        assert interpret_single("12pm", now=NOON) == timedelta(hours=24)

    def test_seconds_field(self):
        assert interpret_single("12:00:30pm", now=NOON) == timedelta(seconds=30)

    def test_trailing_colon_means_on_the_hour(self):
        assert interpret_single("3:", now=NOON) == timedelta(hours=3)

    def test_empty_middle_field(self):
        assert interpret_single("1::30", now=NOON) == timedelta(hours=1, seconds=30)

    def test_closest_of_am_and_pm(self):
        morning = NOON.replace(hour=8)
        assert interpret_single("9:", now=morning) == timedelta(hours=1)
        assert interpret_single("7:", now=morning) == timedelta(hours=11)

    def test_24_hour_clock(self):
        assert interpret_single("17:45", now=NOON) == timedelta(hours=5, minutes=45)

    def test_24_hour_out_of_range(self):
        with pytest.raises(InvalidTime):
            interpret_single("24:00", now=NOON)

    def test_hour_13_with_meridiem(self):
        with pytest.raises(InvalidTime) as exc:
            interpret_single("13:0:0am", now=NOON)
        assert isinstance(exc.value, Unknown)
        assert str(exc.value) == "13:00:00 is not a valid time"

    def test_minutes_out_of_range(self):
        with pytest.raises(InvalidTime):
            interpret_single("5:70", now=NOON)

    def test_too_many_separators(self):
        with pytest.raises(TooManySeparators):
            interpret_single("1:2:3:4", now=NOON)

    def test_nothing_after_meridiem(self):
        with pytest.raises(TrailingMeridiem):
            interpret_single("5pm3", now=NOON)

    def test_fractional_field(self):
        with pytest.raises(InvalidNumber):
            interpret_single("1.5:00", now=NOON)

    def test_unit_in_time_clashes(self):
        with pytest.raises(ClashingFormats):
            interpret_single("5:30h", now=NOON)

    def test_sub_second_now_rounds_up(self):
        now = NOON + timedelta(microseconds=500)
        assert interpret_single("1pm", now=now) == timedelta(hours=1)

    @pytest.mark.parametrize("hour", range(1, 13))
    def test_closest_occurrence_law(self, hour):
        now = NOON.replace(hour=10, minute=17)
        am = duration_until(time(Meridiem.ANTE.to_24h(hour), 0), now)
        pm = duration_until(time(Meridiem.POST.to_24h(hour), 0), now)
        assert interpret_single(f"{hour}:", now=now) == min(am, pm)


class TestDurationUntil:

    def test_later_today(self):
        assert duration_until(time(13, 0), NOON) == timedelta(hours=1)

    def test_now_exactly_is_tomorrow(self):
        assert duration_until(time(12, 0), NOON) == timedelta(days=1)

    def test_earlier_is_tomorrow(self):
        assert duration_until(time(11, 0), NOON) == timedelta(hours=23)


# ═══════════════════════════════════════════════════════════════════════════
#  ERRORS
# ═══════════════════════════════════════════════════════════════════════════


class TestErrors:

    def test_all_are_value_errors(self):
        with pytest.raises(ValueError):
            interpret_single("3x")

    def test_messages(self):
        assert str(InvalidCharacter("$")) == 'Invalid character "$"'
        assert str(InvalidUnit("x")) == 'Invalid unit "x"'
        assert str(Empty()) == "No input provided"

    def test_equality_by_type_and_args(self):
        assert InvalidUnit("x") == InvalidUnit("x")
        assert InvalidUnit("x") != InvalidNumber("x")
        assert len({InvalidUnit("x"), InvalidUnit("x")}) == 1

    def test_base_class_catches_everything(self):
        for text in ("3$", "3x", "", "5ms3", "1:2:3:4"):
            with pytest.raises(InterpretError):
                interpret_single(text, now=NOON)
