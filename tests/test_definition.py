import pytest

from hotstring.core.definition import SendMode, parse_definition, parse_options
from hotstring.core.errors import DefinitionSyntaxError


def test_empty_options_are_defaults():
    options = parse_options("")
    assert not options.fire_immediately
    assert not options.case_sensitive
    assert options.priority == 0
    assert options.key_delay == -1
    assert options.send_mode is SendMode.INSTANT


@pytest.mark.parametrize(
    ("raw", "attribute", "expected"),
    [
        ("*", "fire_immediately", True),
        ("*0", "fire_immediately", False),
        ("?", "inside_word", True),
        ("?0", "inside_word", False),
        ("B0", "no_backspace", True),
        ("B", "no_backspace", False),
        ("C", "case_sensitive", True),
        ("C0", "case_sensitive", False),
        ("O", "omit_end_char", True),
        ("O0", "omit_end_char", False),
        ("T", "raw_mode", True),
        ("R", "raw_mode", True),
        ("R0", "raw_mode", False),
        ("X", "execute", True),
        ("Z", "reset_after_fire", True),
        ("Z0", "reset_after_fire", False),
        ("S", "suspend_exempt", True),
        ("S0", "suspend_exempt", False),
    ],
)
def test_flag_tokens(raw, attribute, expected):
    assert getattr(parse_options(raw), attribute) is expected


def test_c1_disables_conformity_not_case():
    options = parse_options("C1")
    assert options.no_conformity
    assert not options.case_sensitive


def test_tokens_are_case_insensitive():
    options = parse_options("c*k5p2")
    assert options.case_sensitive
    assert options.fire_immediately
    assert options.key_delay == 5
    assert options.priority == 2


def test_signed_numbers():
    options = parse_options("K-1P-5")
    assert options.key_delay == -1
    assert options.priority == -5


def test_send_modes():
    assert parse_options("SE").send_mode is SendMode.EVENT_DELAYED
    assert parse_options("SP").send_mode is SendMode.POLL_DELAYED
    assert parse_options("SI").send_mode is SendMode.INSTANT
    assert parse_options("SESP").send_mode is SendMode.EVENT_DELAYED


def test_send_mode_token_also_counts_as_suspend_exempt():
    assert parse_options("SE").suspend_exempt


def test_timed_typing_needs_delayed_mode_and_delay():
    assert parse_options("SEK10").uses_timed_typing
    assert parse_options("SPK0").uses_timed_typing
    assert not parse_options("SE").uses_timed_typing
    assert not parse_options("K10").uses_timed_typing


def test_parse_definition():
    parsed = parse_definition(":*C:btw")
    assert parsed.trigger == "btw"
    assert parsed.options.fire_immediately
    assert parsed.options.case_sensitive


def test_empty_options_segment():
    assert parse_definition("::btw").trigger == "btw"


def test_trigger_may_contain_colons():
    assert parse_definition("::a:b").trigger == "a:b"


@pytest.mark.parametrize("definition", ["btw", ":btw", "::", ":*:"])
def test_invalid_definitions(definition):
    with pytest.raises(DefinitionSyntaxError):
        parse_definition(definition)


def test_syntax_error_is_a_value_error():
    with pytest.raises(ValueError, match="Invalid definition syntax"):
        parse_definition("nope")
