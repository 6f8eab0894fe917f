"""
Unit tests for the bracelang runtime (interpreter, environment, integer semantics).
"""

import pytest
from bracelang import (
    run_program, evaluate_expression, parse,
    Interpreter, ExecutionContext, Environment, create_context,
    IntegerSemantics, OverflowMode, ParserConfig,
    EvalError, UndefinedVariableError, DivisionByZeroError, IntegerOverflowError,
    NumberLiteral, SourceLocation, SourceSpan,
)


INT64_MAX = 9223372036854775807
INT64_MIN = -9223372036854775808


class TestArithmetic:
    """Test expression evaluation."""

    def test_precedence(self):
        """Multiplication before addition."""
        assert evaluate_expression("2 + 3 * 4") == 14

    def test_parentheses(self):
        """Parentheses override precedence."""
        assert evaluate_expression("(2 + 3) * 4") == 20

    def test_left_associative_subtraction(self):
        assert evaluate_expression("10 - 4 - 3") == 3

    def test_left_associative_division(self):
        assert evaluate_expression("100 / 10 / 5") == 2

    @pytest.mark.parametrize("source,expected", [
        ("7 / 2", 3),
        ("0 - 7 / 2", -3),
        ("(0 - 7) / 2", -3),
        ("7 / (0 - 2)", -3),
        ("(0 - 7) / (0 - 2)", 3),
    ])
    def test_division_truncates_toward_zero(self, source, expected):
        assert evaluate_expression(source) == expected

    def test_negative_results(self):
        assert evaluate_expression("3 - 10") == -7

    def test_variables_in_expression(self):
        env = Environment({"a": 6, "b": 7})
        assert evaluate_expression("a * b", environment=env) == 42

    def test_long_chain(self):
        """Long flat chains evaluate without deep recursion."""
        source = " + ".join(["1"] * 5000)
        assert evaluate_expression(source) == 5000

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZeroError) as exc_info:
            evaluate_expression("1 / (2 - 2)")
        assert "E402" in str(exc_info.value)


class TestPrograms:
    """Test statement execution."""

    def test_assignments(self):
        result = run_program("{ x = 5; y = x - 2; }")
        assert result.variables == {"x": 5, "y": 3}
        assert result.value is None

    def test_empty_program(self):
        assert run_program("{ }").variables == {}

    def test_if_false_skips_branch(self):
        assert run_program("{ if (0) x = 1; }").variables == {}

    def test_if_true_runs_branch(self):
        assert run_program("{ if (1) x = 1; }").variables == {"x": 1}

    def test_negative_condition_is_true(self):
        result = run_program("{ c = 0 - 1; if (c) x = 1; }")
        assert result.variables["x"] == 1

    def test_else_branch(self):
        result = run_program("{ if (2 - 2) x = 1; else x = 2; }")
        assert result.variables == {"x": 2}

    def test_dangling_else(self):
        """else belongs to the inner if."""
        result = run_program("{ if (0) if (1) x = 1; else x = 2; }")
        assert result.variables == {}
        result = run_program("{ if (1) if (0) x = 1; else x = 2; }")
        assert result.variables == {"x": 2}

    def test_block_under_if(self):
        result = run_program("{ if (1) { a = 1; b = a + 1; } }")
        assert result.variables == {"a": 1, "b": 2}

    def test_blocks_share_one_namespace(self):
        """Nested blocks do not open a new scope."""
        result = run_program("{ { x = 1; } y = x + 1; }")
        assert result.variables == {"x": 1, "y": 2}

    def test_reassignment_keeps_insertion_order(self):
        result = run_program("{ b = 1; a = 2; b = b + 10; }")
        assert list(result.variables) == ["b", "a"]
        assert result.variables["b"] == 11

    def test_self_reference_reads_old_value(self):
        result = run_program("{ x = 1; x = x + x; }")
        assert result.variables == {"x": 2}

    def test_determinism(self):
        """Re-running from a fresh environment gives identical bindings."""
        source = "{ a = 3; b = a * a - 1; if (b - 8) c = 1; else c = 2; }"
        first = run_program(source)
        second = run_program(source)
        assert first.variables == second.variables
        assert list(first.variables) == list(second.variables)

    def test_runs_are_isolated(self):
        run_program("{ leaked = 1; }")
        with pytest.raises(UndefinedVariableError):
            run_program("{ x = leaked; }")


class TestRuntimeErrors:
    """Test evaluation failures."""

    def test_undefined_variable(self):
        """An unbound read fails and the target is never bound."""
        env = Environment()
        with pytest.raises(UndefinedVariableError) as exc_info:
            run_program("{ y = z + 1; }", environment=env)
        err = exc_info.value
        assert err.name == "z"
        assert isinstance(err, EvalError)
        assert "E401" in str(err)
        assert err.span.start.column == 7
        assert "y" not in env

    def test_division_by_zero_commits_nothing(self):
        env = Environment()
        with pytest.raises(DivisionByZeroError):
            run_program("{ a = 10 / 0; }", environment=env)
        assert "a" not in env
        assert len(env) == 0

    def test_earlier_bindings_survive_failure(self):
        """Statements before the failing one have already run."""
        env = Environment()
        with pytest.raises(DivisionByZeroError):
            run_program("{ x = 1; y = x / (x - 1); }", environment=env)
        assert env.snapshot() == {"x": 1}

    def test_untaken_branch_is_not_evaluated(self):
        result = run_program("{ if (0) x = 1 / 0; else x = 3; if (1) y = 2; else y = nope; }")
        assert result.variables == {"x": 3, "y": 2}

    def test_unknown_node_is_internal_error(self):
        ctx = create_context()
        span = SourceSpan(SourceLocation(1, 1, 0), SourceLocation(1, 2, 1))
        with pytest.raises(RuntimeError):
            Interpreter().execute(NumberLiteral(span=span, value=1), ctx)


class TestIntegerSemantics:
    """Test fixed-width integer behaviour."""

    def test_default_wraps_at_64_bits(self):
        assert evaluate_expression(f"{INT64_MAX} + 1") == INT64_MIN

    def test_wrap_on_subtract(self):
        assert evaluate_expression(f"0 - {INT64_MAX} - 2") == INT64_MAX

    def test_wrap_on_multiply(self):
        assert evaluate_expression("4294967296 * 4294967296") == 0

    def test_oversized_literal_wraps(self):
        assert evaluate_expression("9223372036854775808") == INT64_MIN

    def test_min_divided_by_minus_one_wraps(self):
        source = f"(0 - {INT64_MAX} - 1) / (0 - 1)"
        assert evaluate_expression(source) == INT64_MIN

    def test_checked_mode_raises(self):
        semantics = IntegerSemantics(overflow=OverflowMode.CHECK)
        with pytest.raises(IntegerOverflowError) as exc_info:
            evaluate_expression(f"{INT64_MAX} + 1", semantics=semantics)
        assert exc_info.value.value == INT64_MAX + 1
        assert "E403" in str(exc_info.value)

    def test_checked_mode_rejects_oversized_literal(self):
        semantics = IntegerSemantics(overflow=OverflowMode.CHECK)
        with pytest.raises(IntegerOverflowError):
            run_program("{ x = 9223372036854775808; }", semantics=semantics)

    def test_checked_mode_in_range(self):
        semantics = IntegerSemantics(overflow=OverflowMode.CHECK)
        assert evaluate_expression(f"{INT64_MAX} - 1 + 1", semantics=semantics) == INT64_MAX

    def test_narrow_width(self):
        semantics = IntegerSemantics(bits=32)
        assert evaluate_expression("2147483647 + 1", semantics=semantics) == -2147483648
        assert semantics.min_value == -2147483648
        assert semantics.max_value == 2147483647

    def test_eight_bit_wrap(self):
        semantics = IntegerSemantics(bits=8)
        assert evaluate_expression("100 + 100", semantics=semantics) == -56

    def test_very_long_literal_wraps(self):
        exact = (10 ** 5000 - 1) // 9
        wrapped = exact & ((1 << 64) - 1)
        if wrapped > INT64_MAX:
            wrapped -= 1 << 64
        assert evaluate_expression("1" * 5000) == wrapped

    def test_very_long_literal_checked(self):
        semantics = IntegerSemantics(overflow=OverflowMode.CHECK)
        with pytest.raises(IntegerOverflowError) as exc_info:
            evaluate_expression("1" * 5000, semantics=semantics)
        assert "-bit integer" in exc_info.value.message

    def test_nesting_at_parser_ceiling_evaluates(self):
        depth = ParserConfig.DEPTH_CEILING
        source = "{ " + "if (1) " * (depth - 1) + "x = 1; }"
        result = run_program(source, parser_config=ParserConfig(max_depth=depth))
        assert result.variables == {"x": 1}

    @pytest.mark.parametrize("bits", [0, 7, 1025])
    def test_invalid_width(self, bits):
        with pytest.raises(ValueError):
            IntegerSemantics(bits=bits)


class TestEnvironment:
    """Test the Environment and ExecutionContext."""

    def test_get_unbound_is_none(self):
        assert Environment().get("x") is None

    def test_set_and_get(self):
        env = Environment()
        env.set("x", 3)
        assert env.get("x") == 3
        assert env.contains("x")
        assert "x" in env
        assert list(env.items()) == [("x", 3)]

    def test_snapshot_is_a_copy(self):
        env = Environment({"x": 1})
        snap = env.snapshot()
        env.set("x", 2)
        assert snap == {"x": 1}

    def test_reused_environment(self):
        """Passing the same environment carries bindings between runs."""
        env = Environment()
        run_program("{ x = 4; }", environment=env)
        result = run_program("{ y = x * 2; }", environment=env)
        assert result.variables == {"x": 4, "y": 8}

    def test_context_source_lines(self):
        ctx = create_context("{\n  x = 1;\n}")
        assert ctx.get_source_line(2) == "  x = 1;"
        assert ctx.get_source_line(0) is None
        assert ctx.get_source_line(4) is None

    def test_context_defaults(self):
        ctx = ExecutionContext()
        assert ctx.semantics.bits == 64
        assert ctx.semantics.overflow == OverflowMode.WRAP
        assert len(ctx.environment) == 0

    def test_interpreter_run_against_context(self):
        program = parse("{ x = 2; }")
        ctx = create_context(environment=Environment({"w": 1}))
        result = Interpreter().run(program, ctx)
        assert result.variables == {"w": 1, "x": 2}
        assert ctx.get_variable("x") == 2
