"""Tests for Assuan command parsing."""

import pytest

from pinentry_anyrun.commands import (
    Bye,
    Comment,
    CosmeticKind,
    End,
    GetInfo,
    GetSecret,
    Help,
    Nop,
    Reset,
    SetCosmetic,
    SetDescription,
    SetOption,
    SetPrompt,
    SetTitle,
    Unknown,
    parse,
)


# =============================================================================
# Comments and Blank Lines
# =============================================================================


class TestComments:
    """Lines that are never commands."""

    def test_empty_line_is_comment(self):
        """An empty line is a no-op, not an indexing fault."""
        assert parse("") == Comment()

    def test_lone_hash_is_comment(self):
        assert parse("#") == Comment()

    def test_hash_with_text_is_comment(self):
        assert parse("# GETPIN is not run") == Comment()

    def test_hash_must_be_first(self):
        """A '#' later in the line does not make it a comment."""
        assert parse("NOP #") == Nop()


# =============================================================================
# Bare Commands
# =============================================================================


class TestBareCommands:
    """Commands without arguments."""

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("BYE", Bye()),
            ("RESET", Reset()),
            ("END", End()),
            ("HELP", Help()),
            ("NOP", Nop()),
            ("GETPIN", GetSecret()),
        ],
    )
    def test_keyword(self, line, expected):
        assert parse(line) == expected

    def test_trailing_argument_ignored(self):
        assert parse("BYE now please") == Bye()
        assert parse("GETPIN extra") == GetSecret()

    def test_keywords_are_case_sensitive(self):
        """Lowercase verbs are not recognized."""
        assert parse("getpin") == Unknown("getpin")
        assert parse("Bye") == Unknown("Bye")


# =============================================================================
# Commands With Arguments
# =============================================================================


class TestArgumentCommands:
    """SETDESC, SETTITLE, SETPROMPT and friends."""

    def test_setdesc_keeps_raw_argument(self):
        """Percent escapes are left for the dispatcher."""
        assert parse("SETDESC Enter%20PIN") == SetDescription("Enter%20PIN")

    def test_settitle(self):
        assert parse("SETTITLE Unlock key") == SetTitle("Unlock key")

    def test_setprompt(self):
        assert parse("SETPROMPT PIN:") == SetPrompt("PIN:")

    def test_missing_argument_is_empty(self):
        assert parse("SETTITLE") == SetTitle("")

    def test_split_on_first_space_only(self):
        assert parse("SETDESC a  b c") == SetDescription("a  b c")

    def test_getinfo(self):
        assert parse("GETINFO flavor") == GetInfo("flavor")

    @pytest.mark.parametrize(
        "verb,kind",
        [
            ("SETOK", CosmeticKind.OK),
            ("SETCANCEL", CosmeticKind.CANCEL),
            ("SETNOTOK", CosmeticKind.NOT_OK),
            ("SETERROR", CosmeticKind.ERROR),
            ("SETQUALITYBAR_TT", CosmeticKind.QUALITY_BAR_TT),
            ("MESSAGE", CosmeticKind.MESSAGE),
            ("SETKEYINFO", CosmeticKind.KEYINFO),
            ("SETTIMEOUT", CosmeticKind.TIMEOUT),
        ],
    )
    def test_cosmetic_with_text(self, verb, kind):
        assert parse(f"{verb} some text") == SetCosmetic(kind, "some text")

    def test_cosmetic_without_text(self):
        assert parse("SETQUALITYBAR") == SetCosmetic(CosmeticKind.QUALITY_BAR, None)
        assert parse("CONFIRM") == SetCosmetic(CosmeticKind.CONFIRM, None)

    def test_confirm_one_button(self):
        assert parse("CONFIRM --one-button") == SetCosmetic(
            CosmeticKind.CONFIRM, "--one-button"
        )


# =============================================================================
# OPTION
# =============================================================================


class TestOption:
    """OPTION name[=value]."""

    def test_with_value(self):
        assert parse("OPTION ttyname=/dev/pts/1") == SetOption("ttyname", "/dev/pts/1")

    def test_without_value(self):
        assert parse("OPTION no-grab") == SetOption("no-grab", None)

    def test_split_on_first_equals(self):
        assert parse("OPTION display=:0=x") == SetOption("display", ":0=x")

    def test_empty_value(self):
        assert parse("OPTION foo=") == SetOption("foo", "")

    def test_bare_option(self):
        assert parse("OPTION") == SetOption("", None)


# =============================================================================
# Unknown Commands
# =============================================================================


class TestUnknown:
    """Anything else keeps the full original line."""

    def test_unknown_verb(self):
        assert parse("FROB x") == Unknown("FROB x")

    def test_leading_space(self):
        assert parse(" BYE") == Unknown(" BYE")

    def test_prefix_of_keyword(self):
        assert parse("SETDESCRIPTION foo") == Unknown("SETDESCRIPTION foo")

    @pytest.mark.parametrize(
        "line", ["\t", " ", "%", "=", "OPTION=x", "ß", "D hunter2", "ERR 1 x"]
    )
    def test_parse_is_total(self, line):
        """Odd input always parses to some command."""
        assert parse(line) is not None
