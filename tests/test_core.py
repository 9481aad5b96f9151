import io
import logging
import re

import pytest

from topostfix.core import (
    DEFAULT_MAX_DEPTH,
    SCOPE_MARKER,
    CharKind,
    ConversionError,
    Converter,
    Emitter,
    InvalidCharacterError,
    OperatorStack,
    StackOverflowError,
    UnbalancedBracketsError,
    classify,
    convert,
    write_postfix,
)


class TestClassify:

    @pytest.mark.parametrize("ch", list("abcxyz"))
    def test_lowercase_letters_are_operands(self, ch):
        assert classify(ch) is CharKind.OPERAND

    @pytest.mark.parametrize("ch,kind", [
        ("+", CharKind.ADDITIVE),
        ("-", CharKind.ADDITIVE),
        ("*", CharKind.MULTIPLICATIVE),
        ("/", CharKind.MULTIPLICATIVE),
        ("(", CharKind.OPEN_BRACKET),
        (")", CharKind.CLOSE_BRACKET),
        ("\0", CharKind.END),
        (None, CharKind.END),
    ])
    def test_symbols(self, ch, kind):
        assert classify(ch) is kind

    @pytest.mark.parametrize("ch", ["A", "Z", "0", "9", " ", "$", "^", "[", "é", "ab", ""])
    def test_everything_else_is_invalid(self, ch):
        assert classify(ch) is CharKind.INVALID


class TestOperatorStack:

    def test_pop_any_on_empty_stack_is_noop(self):
        stack = OperatorStack()
        assert stack.pop_any() is None
        assert stack.pop_any() is None
        assert len(stack) == 0

    def test_pop_any_stops_at_scope_marker(self):
        stack = OperatorStack()
        stack.push("+")
        stack.push(SCOPE_MARKER)
        stack.push("*")

        assert stack.pop_any() == "*"
        assert stack.pop_any() is None
        assert stack.snapshot() == "+("

    def test_pop_if_multiplicative_leaves_additive(self):
        stack = OperatorStack()
        stack.push("-")
        assert stack.pop_if_multiplicative() is None
        assert stack.snapshot() == "-"

        stack.push("/")
        assert stack.pop_if_multiplicative() == "/"
        assert stack.snapshot() == "-"

    def test_pop_sentinel(self):
        stack = OperatorStack()
        stack.push(SCOPE_MARKER)
        assert stack.has_open_scope()

        stack.pop_sentinel()
        assert not stack.has_open_scope()
        assert stack.depth == 0

    def test_pop_sentinel_without_scope_raises(self):
        stack = OperatorStack()
        with pytest.raises(UnbalancedBracketsError):
            stack.pop_sentinel()

    def test_push_beyond_capacity_raises(self):
        stack = OperatorStack(max_depth=2)
        stack.push(SCOPE_MARKER)
        stack.push("+")
        with pytest.raises(StackOverflowError):
            stack.push("*")
        assert stack.snapshot() == "(+"

    def test_at_floor(self):
        stack = OperatorStack()
        assert stack.at_floor()
        stack.push("+")
        assert not stack.at_floor()
        stack.push(SCOPE_MARKER)
        assert stack.at_floor()

    @pytest.mark.parametrize("depth", [0, -1])
    def test_rejects_non_positive_capacity(self, depth):
        with pytest.raises(ValueError):
            OperatorStack(max_depth=depth)


class TestEmitter:

    def test_emit_entry_skips_empty_and_marker(self):
        emitter = Emitter()
        emitter.emit("a")
        emitter.emit_entry(None)
        emitter.emit_entry(SCOPE_MARKER)
        emitter.emit_entry("+")
        assert emitter.text == "a+"

    def test_streams_and_terminates(self):
        buffer = io.StringIO()
        emitter = Emitter(buffer)
        emitter.emit("a")
        assert buffer.getvalue() == "a"
        emitter.finish()
        assert buffer.getvalue() == "a\n"
        assert emitter.text == "a"


class TestConvert:

    @pytest.mark.parametrize("infix,postfix", [
        ("a", "a"),
        ("a+b", "ab+"),
        ("a+b*c", "abc*+"),
        ("(a+b)*c", "ab+c*"),
        ("a+(b+c*d)*e+f/g+h", "abcd*+e*+fg/+h+"),
        ("a+b+c", "ab+c+"),
        ("a-b-c", "ab-c-"),
        ("a/b/c", "ab/c/"),
        ("a*b/c", "ab*c/"),
        ("a*b+c", "ab*c+"),
        ("a-b*c/d", "abc*d/-"),
        ("a*(b+c)", "abc+*"),
        ("(a)", "a"),
        ("((a))", "a"),
        ("((a+b)*(c-d))/e", "ab+cd-*e/"),
    ])
    def test_scenarios(self, infix, postfix):
        assert convert(infix) == postfix

    def test_empty_input_is_empty_output(self):
        assert convert("") == ""

    @pytest.mark.parametrize("infix", [
        "a+b*c-d/e",
        "(a+b)*(c+d)",
        "z*(y-(x/w+v))-u",
        "a+(b+c*d)*e+f/g+h",
    ])
    def test_operand_order_is_preserved(self, infix):
        postfix = convert(infix)
        assert re.sub(r"[^a-z]", "", postfix) == re.sub(r"[^a-z]", "", infix)

    def test_operator_count_is_preserved(self):
        infix = "a+(b-c)*d/(e+f)"
        postfix = convert(infix)
        assert sorted(c for c in postfix if c in "+-*/") == sorted(c for c in infix if c in "+-*/")

    def test_conversions_do_not_share_state(self):
        converter = Converter()
        with pytest.raises(UnbalancedBracketsError):
            converter.run("(a+b")
        assert converter.run("a*b") == "ab*"

    def test_nul_terminates_input(self):
        assert convert("a+b\0*c") == "ab+"


class TestConversionErrors:

    def test_invalid_character_keeps_partial_output(self):
        with pytest.raises(InvalidCharacterError) as exc:
            convert("a$b")
        assert exc.value.output == "a"
        assert exc.value.position == 1
        assert exc.value.expression == "a$b"
        assert "1" in str(exc.value)

    @pytest.mark.parametrize("infix", ["A", "a b", "a+1", "a^b"])
    def test_invalid_characters(self, infix):
        with pytest.raises(InvalidCharacterError):
            convert(infix)

    def test_unclosed_open_bracket(self):
        with pytest.raises(UnbalancedBracketsError) as exc:
            convert("(a+b")
        assert exc.value.position == 4
        assert exc.value.output == "ab+"

    def test_unmatched_close_bracket_is_detected_eagerly(self):
        with pytest.raises(UnbalancedBracketsError) as exc:
            convert("a+b)*c")
        assert exc.value.position == 3
        assert exc.value.output == "ab+"

    def test_lone_close_bracket(self):
        with pytest.raises(UnbalancedBracketsError) as exc:
            convert(")")
        assert exc.value.position == 0

    def test_all_errors_share_a_base_class(self):
        for infix in ("a$", "(a", "a)"):
            with pytest.raises(ConversionError):
                convert(infix)

    def test_nesting_up_to_default_capacity(self):
        infix = "(" * DEFAULT_MAX_DEPTH + "a" + ")" * DEFAULT_MAX_DEPTH
        assert convert(infix) == "a"

    def test_nesting_beyond_default_capacity_overflows(self):
        infix = "(" * (DEFAULT_MAX_DEPTH + 1) + "a" + ")" * (DEFAULT_MAX_DEPTH + 1)
        with pytest.raises(StackOverflowError) as exc:
            convert(infix)
        assert exc.value.position == DEFAULT_MAX_DEPTH

    def test_pending_operators_count_against_capacity(self):
        assert convert("a+b", max_depth=1) == "ab+"
        with pytest.raises(StackOverflowError) as exc:
            convert("a+b*c", max_depth=1)
        assert exc.value.position == 3
        assert exc.value.output == "ab"

    def test_raised_capacity_allows_deeper_nesting(self):
        infix = "(" * 100 + "a" + ")" * 100
        assert convert(infix, max_depth=100) == "a"


class TestWritePostfix:

    def test_writes_result_and_newline(self):
        buffer = io.StringIO()
        assert write_postfix("a+b*c", buffer) == "abc*+"
        assert buffer.getvalue() == "abc*+\n"

    def test_partial_output_stays_on_stream(self):
        buffer = io.StringIO()
        with pytest.raises(InvalidCharacterError):
            write_postfix("a+b$c", buffer)
        assert buffer.getvalue() == "ab"

    def test_empty_input_writes_bare_newline(self):
        buffer = io.StringIO()
        write_postfix("", buffer)
        assert buffer.getvalue() == "\n"


class TestLogging:

    def test_failed_conversion_logs_warning(self, caplog):
        caplog.set_level(logging.WARNING, logger="topostfix")
        with pytest.raises(InvalidCharacterError):
            convert("a$")
        assert any(r.levelno == logging.WARNING and r.name == "topostfix.core"
                   for r in caplog.records)

    def test_each_step_logged_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="topostfix")
        convert("a+b")
        steps = [r for r in caplog.records if r.levelno == logging.DEBUG]
        # a, +, b, END
        assert len(steps) == 4
