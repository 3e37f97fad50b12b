"""Unit tests for option dispatch and validation.

These tests run the setters against the recording engine double so that
every engine call, rejection and native text allocation is observable.
"""

import pytest

from tidyopts.constants import (
    ENGINE_UINT_MAX,
    AccessibilityLevel,
    AutoBool,
    CharEncoding,
    Newline,
    RepeatedAttributes,
    SortAttributes,
    UppercaseAttributes,
)
from tidyopts.exceptions import (
    EngineRejectedError,
    HandleClosedError,
    MarshalError,
    OptionTypeError,
    OutOfRangeError,
    UnknownOptionError,
    UnsupportedOptionError,
)
from tidyopts.handle import EngineHandle
from tidyopts.registry import IntRange, OptionDescriptor, ValueKind
from tidyopts.setter import OptionSetter


@pytest.mark.unit
class TestSetBool:
    """Test the boolean dispatch primitive."""

    def test_sets_value_and_reports_change(self, setter, engine):
        assert setter.set_bool("add-xml-decl", True) is True
        assert engine.set_calls == [("set_bool", "add-xml-decl", 1)]
        assert setter.get("add-xml-decl") is True

    def test_second_identical_call_is_noop(self, setter):
        assert setter.set_bool("clean", True) is True
        assert setter.set_bool("clean", True) is False

    def test_setting_engine_default_is_noop(self, setter, engine):
        # show-warnings defaults to yes
        assert setter.set_bool("show-warnings", True) is False
        assert engine.set_calls == [("set_bool", "show-warnings", 1)]

    def test_false_encodes_as_zero(self, setter, engine):
        setter.set_bool("show-warnings", False)
        assert engine.set_calls[-1] == ("set_bool", "show-warnings", 0)

    @pytest.mark.parametrize("value", [1, 0, "yes", None])
    def test_non_bool_value_rejected_before_engine(self, setter, engine, value):
        with pytest.raises(OptionTypeError):
            setter.set_bool("quiet", value)
        assert engine.set_calls == []

    def test_wrong_option_kind_rejected(self, setter, engine):
        with pytest.raises(OptionTypeError, match="kind int"):
            setter.set_bool("wrap", True)
        assert engine.set_calls == []

    def test_rejection_carries_engine_diagnostic(self, setter, engine):
        text = 'Warning: can\'t set "output-xml" while "output-html" is set'
        engine.reject("output-xml", diagnostic=text, value=1)

        with pytest.raises(EngineRejectedError) as exc_info:
            setter.set_bool("output-xml", True)

        assert exc_info.value.diagnostic == text
        assert exc_info.value.option_name == "output-xml"
        assert text in str(exc_info.value)

    def test_rejection_without_diagnostic_text(self, engine):
        engine.reject("bare")
        engine.write_diagnostics = False
        with EngineHandle(engine) as handle:
            with pytest.raises(EngineRejectedError) as exc_info:
                OptionSetter(handle).set_bool("bare", True)
        assert exc_info.value.diagnostic is None

    def test_first_failure_on_fresh_handle_has_diagnostic(self, engine):
        engine.reject("word-2000", diagnostic="refused")
        with EngineHandle(engine) as handle:
            with pytest.raises(EngineRejectedError) as exc_info:
                OptionSetter(handle).set_bool("word-2000", True)
        assert exc_info.value.diagnostic == "refused"

    def test_diagnostic_does_not_leak_into_next_failure(self, setter, engine, handle):
        engine.reject("bare", diagnostic="first reason")
        engine.reject("clean")
        with pytest.raises(EngineRejectedError):
            setter.set_bool("bare", True)
        with pytest.raises(EngineRejectedError) as exc_info:
            setter.set_bool("clean", True)
        assert exc_info.value.diagnostic is None

    def test_stale_buffer_text_cleared_before_call(self, setter, engine, handle):
        engine.sessions[0].sink.text = "left over"
        engine.reject("clean")
        with pytest.raises(EngineRejectedError) as exc_info:
            setter.set_bool("clean", True)
        assert exc_info.value.diagnostic is None

    def test_rejected_value_leaves_option_unchanged(self, setter, engine):
        engine.reject("clean", value=1)
        with pytest.raises(EngineRejectedError):
            setter.set_bool("clean", True)
        assert setter.get("clean") is False


@pytest.mark.unit
class TestSetAutoBool:
    """Test the tri-state setter."""

    @pytest.mark.parametrize("value,code", [(AutoBool.NO, 0), (AutoBool.YES, 1), (AutoBool.AUTO, 2)])
    def test_round_trip(self, setter, engine, value, code):
        setter.set_auto_bool("indent", value)
        assert engine.set_calls[-1] == ("set_int", "indent", code)
        assert engine.get_int(engine.sessions[0], "indent") == code
        assert setter.get("indent") is value

    @pytest.mark.parametrize("value,expected", [(True, AutoBool.YES), (False, AutoBool.NO)])
    def test_plain_bool_maps_to_yes_no(self, setter, value, expected):
        setter.set_auto_bool("show-body-only", value)
        assert setter.get("show-body-only") is expected

    @pytest.mark.parametrize("code", [0, 1, 2])
    def test_integer_codes_accepted(self, setter, code):
        setter.set_auto_bool("merge-divs", code)
        assert int(setter.get("merge-divs")) == code

    @pytest.mark.parametrize("value", [-1, 3, 255, ENGINE_UINT_MAX])
    def test_out_of_domain_integer_never_reaches_engine(self, setter, engine, value):
        with pytest.raises(OutOfRangeError) as exc_info:
            setter.set_auto_bool("output-bom", value)
        assert exc_info.value.legal_values == "{0, 1, 2}"
        assert "{0, 1, 2}" in str(exc_info.value)
        assert engine.set_calls == []

    def test_code_from_other_family_rejected(self, setter, engine):
        # CharEncoding.ASCII == 1 but is not a tri-state code
        with pytest.raises(OptionTypeError, match="CharEncoding.ASCII"):
            setter.set_auto_bool("indent", CharEncoding.ASCII)
        assert engine.set_calls == []

    def test_text_value_rejected(self, setter):
        with pytest.raises(OptionTypeError):
            setter.set_auto_bool("indent", "auto")

    def test_auto_is_noop_second_time(self, setter):
        assert setter.set_auto_bool("vertical-space", AutoBool.AUTO) is True
        assert setter.set_auto_bool("vertical-space", AutoBool.AUTO) is False

    def test_bool_option_is_not_auto_bool(self, setter):
        with pytest.raises(OptionTypeError):
            setter.set_auto_bool("clean", AutoBool.AUTO)

    def test_fix_bad_comments_is_tri_state(self, setter, engine):
        assert setter.get("fix-bad-comments") is AutoBool.AUTO
        assert setter.set("fix-bad-comments", True) is True
        assert engine.set_calls == [("set_int", "fix-bad-comments", 1)]
        with pytest.raises(OptionTypeError):
            setter.set_bool("fix-bad-comments", True)

    def test_uppercase_attributes_can_preserve_case(self, setter):
        assert setter.set_enum_int("uppercase-attributes", UppercaseAttributes.PRESERVE) is True
        assert setter.get("uppercase-attributes") is UppercaseAttributes.PRESERVE


@pytest.mark.unit
class TestSetEnumInt:
    """Test the enumerated and bounded integer setter."""

    def test_accessibility_example_scenario(self, setter, engine):
        with pytest.raises(OutOfRangeError) as exc_info:
            setter.set_enum_int("accessibility-check", 4)
        assert "{0, 1, 2, 3}" in str(exc_info.value)
        assert engine.set_calls == []

        assert setter.set_enum_int("accessibility-check", 2) is True
        assert setter.set_enum_int("accessibility-check", 2) is False

    @pytest.mark.parametrize(
        "option,family",
        [
            ("accessibility-check", AccessibilityLevel),
            ("char-encoding", CharEncoding),
            ("input-encoding", CharEncoding),
            ("output-encoding", CharEncoding),
            ("newline", Newline),
            ("repeated-attributes", RepeatedAttributes),
            ("sort-attributes", SortAttributes),
            ("uppercase-attributes", UppercaseAttributes),
        ],
    )
    def test_range_table_completeness(self, setter, engine, option, family):
        for member in family:
            setter.set_enum_int(option, member)
            assert engine.set_calls[-1] == ("set_int", option, int(member))
            assert setter.get(option) is member

        calls_before = len(engine.set_calls)
        for neighbour in (-1, max(family) + 1):
            with pytest.raises(OutOfRangeError):
                setter.set_enum_int(option, neighbour)
        assert len(engine.set_calls) == calls_before

    def test_plain_int_within_domain_accepted(self, setter):
        setter.set_enum_int("newline", 1)
        assert setter.get("newline") is Newline.CRLF

    def test_encoding_code_rejected_for_newline(self, setter, engine):
        with pytest.raises(OptionTypeError):
            setter.set_enum_int("newline", CharEncoding.ASCII)
        assert engine.set_calls == []

    def test_bool_rejected(self, setter):
        with pytest.raises(OptionTypeError):
            setter.set_enum_int("repeated-attributes", True)

    def test_free_int_option_is_not_enumerated(self, setter):
        with pytest.raises(OptionTypeError):
            setter.set_enum_int("wrap", 3)

    def test_bounded_range(self, setter, engine):
        descriptor = OptionDescriptor("tab-size", ValueKind.BOUNDED_INT, "Tab stops", "pretty-print", IntRange(1, 16))
        assert setter.set_enum_int(descriptor, 4) is True
        assert engine.set_calls[-1] == ("set_int", "tab-size", 4)

        with pytest.raises(OutOfRangeError) as exc_info:
            setter.set_enum_int(descriptor, 17)
        assert exc_info.value.legal_values == "[1, 16]"

        with pytest.raises(OptionTypeError):
            setter.set_enum_int(descriptor, Newline.CR)

    def test_engine_rejection_of_valid_code(self, setter, engine):
        engine.reject("output-encoding", diagnostic="encoding conflicts with input-encoding", value=12)
        with pytest.raises(EngineRejectedError) as exc_info:
            setter.set_enum_int("output-encoding", CharEncoding.BIG5)
        assert exc_info.value.diagnostic == "encoding conflicts with input-encoding"


@pytest.mark.unit
class TestSetInt:
    """Test the unconstrained integer primitive."""

    def test_sets_value(self, setter):
        assert setter.set_int("wrap", 120) is True
        assert setter.get("wrap") == 120

    def test_default_value_is_noop(self, setter):
        assert setter.set_int("indent-spaces", 2) is False

    @pytest.mark.parametrize("value", [0, ENGINE_UINT_MAX])
    def test_unsigned_bounds_accepted(self, setter, value):
        setter.set_int("show-errors", value)
        assert setter.get("show-errors") == value

    @pytest.mark.parametrize("value", [-1, ENGINE_UINT_MAX + 1])
    def test_outside_unsigned_width_rejected(self, setter, engine, value):
        with pytest.raises(OutOfRangeError) as exc_info:
            setter.set_int("tab-size", value)
        assert exc_info.value.legal_values == f"[0, {ENGINE_UINT_MAX}]"
        assert engine.set_calls == []

    @pytest.mark.parametrize("value", [True, 2.0, "4"])
    def test_non_int_rejected(self, setter, value):
        with pytest.raises(OptionTypeError):
            setter.set_int("wrap", value)

    def test_enumerated_option_cannot_bypass_validation(self, setter, engine):
        with pytest.raises(OptionTypeError):
            setter.set_int("accessibility-check", 9)
        assert engine.set_calls == []

    def test_rejection_is_bare_failure_without_text(self, setter, engine):
        engine.reject("wrap")
        with pytest.raises(EngineRejectedError) as exc_info:
            setter.set_int("wrap", 10)
        assert exc_info.value.diagnostic is None


@pytest.mark.unit
class TestSetString:
    """Test the string primitive and its native text handling."""

    def test_sets_value(self, setter, engine):
        assert setter.set_string("doctype", "html5") is True
        assert engine.set_calls == [("set_string", "doctype", "html5")]
        assert setter.get("doctype") == "html5"

    def test_same_value_is_noop(self, setter):
        setter.set_string("css-prefix", "c")
        assert setter.set_string("css-prefix", "c") is False

    def test_text_released_once_on_success(self, setter, engine):
        setter.set_string("alt-text", "image")
        assert engine.allocations == 1
        assert engine.releases == 1
        assert all(text.released for text in engine.texts)

    def test_text_released_once_on_engine_rejection(self, setter, engine):
        engine.reject("new-blocklevel-tags", diagnostic="bad tag list")
        with pytest.raises(EngineRejectedError) as exc_info:
            setter.set_string("new-blocklevel-tags", "1bad")
        assert exc_info.value.diagnostic == "bad tag list"
        assert engine.allocations == engine.releases == 1

    def test_text_released_once_when_option_unsupported(self):
        from fakes import RecordingEngine

        engine = RecordingEngine(unsupported={"gnu-emacs-file"})
        with EngineHandle(engine) as handle:
            with pytest.raises(UnsupportedOptionError):
                OptionSetter(handle).set_string("gnu-emacs-file", "out.txt")
        assert engine.allocations == engine.releases == 1

    def test_unicode_text(self, setter):
        setter.set_string("alt-text", "изображение")
        assert setter.get("alt-text") == "изображение"

    def test_embedded_nul_is_marshal_error(self, setter, engine):
        with pytest.raises(MarshalError) as exc_info:
            setter.set_string("output-file", "out\x00.html")
        assert exc_info.value.option_name == "output-file"
        assert engine.allocations == engine.releases == 0
        assert engine.set_calls == []

    def test_unencodable_text_is_marshal_error(self, setter, engine):
        with pytest.raises(MarshalError) as exc_info:
            setter.set_string("alt-text", "\ud800")
        assert isinstance(exc_info.value.original_error, UnicodeEncodeError)
        assert engine.set_calls == []

    def test_non_str_rejected(self, setter, engine):
        with pytest.raises(OptionTypeError):
            setter.set_string("doctype", b"html5")
        assert engine.allocations == 0


@pytest.mark.unit
class TestGenericSet:
    """Test dispatch by option kind."""

    @pytest.mark.parametrize(
        "option,value,call",
        [
            ("quiet", True, ("set_bool", "quiet", 1)),
            ("indent", AutoBool.AUTO, ("set_int", "indent", 2)),
            ("char-encoding", CharEncoding.LATIN1, ("set_int", "char-encoding", 3)),
            ("wrap", 0, ("set_int", "wrap", 0)),
            ("doctype", "omit", ("set_string", "doctype", "omit")),
        ],
    )
    def test_dispatches_by_kind(self, setter, engine, option, value, call):
        setter.set(option, value)
        assert engine.set_calls[-1] == call

    def test_unknown_option(self, setter):
        with pytest.raises(UnknownOptionError):
            setter.set("hide-endtags", True)

    def test_unsupported_by_engine(self):
        from fakes import RecordingEngine

        engine = RecordingEngine(unsupported={"decorate-inferred-ul"})
        with EngineHandle(engine) as handle:
            with pytest.raises(UnsupportedOptionError):
                OptionSetter(handle).set("decorate-inferred-ul", True)
        assert engine.set_calls == []

    def test_closed_handle(self, engine):
        handle = EngineHandle(engine)
        setter = OptionSetter(handle)
        handle.close()
        with pytest.raises(HandleClosedError):
            setter.set_bool("clean", True)
        assert engine.set_calls == []

    def test_get_returns_raw_int_for_undeclared_code(self, setter, engine):
        engine.sessions[0].values["newline"] = 7
        assert setter.get("newline") == 7
