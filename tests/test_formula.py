"""Tests for the formula binding and the settings-field expression evaluator."""

import pytest

from zframe_sim.core.expression_service import eval_number_expression
from zframe_sim.core.formula import FormulaBinding, FormulaError, compile_formula, evaluate_formula
from zframe_sim.core.limits import AngleLimits
from zframe_sim.core.state import JointAngleState


@pytest.fixture
def limits():
    return AngleLimits.from_pairs([(1, 5, 40), (2, 5, 90), (3, 5, 100)])


class TestCompileFormula:
    """Parsing and whitelisting."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("angle1 * 0.8 + 5", 21.0),
            ("2^3", 8.0),
            ("-2^2", -4.0),
            ("sin(PI / 2) * 10", 10.0),
            ("max(angle1, angle2, 25)", 25.0),
            ("pow(2, 5) + abs(-1)", 33.0),
            ("sqrt(angle3 - 5)", 5.0),
        ],
    )
    def test_evaluates(self, text, expected):
        angles = JointAngleState(20.0, 10.0, 30.0)
        assert evaluate_formula(compile_formula(text), angles) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   ",
            "import os",
            "__import__('os')",
            "angle1.real",
            "foo + 1",
            "sin",
            "min(angle1)",
            "sin(x=1)",
            "'a' + 1",
            "angle1 if angle2 else 3",
            "[1, 2]",
            "angle1 < 3",
            "True + 1",
            "angle1 +",
        ],
    )
    def test_rejects(self, text):
        with pytest.raises(FormulaError):
            compile_formula(text)

    @pytest.mark.parametrize("text", ["angle1 / (angle2 - angle2)", "sqrt(-1)", "angle1 * 1e308 * 10", "10 ^ 1000"])
    def test_runtime_errors(self, text):
        tree = compile_formula(text)
        with pytest.raises(FormulaError):
            evaluate_formula(tree, JointAngleState(20.0, 10.0, 30.0))


class TestFormulaBinding:
    """Binding drives angle2 from the other angles."""

    @pytest.fixture
    def binding(self):
        return FormulaBinding(target_joint=2)

    def test_apply_quantizes_and_clamps(self, binding, limits):
        angles = JointAngleState(20.0, 30.0, 30.0)
        assert binding.compile("angle1 / 3")
        assert binding.apply(angles, limits)
        assert angles.angle2 == 6.5
        binding.compile("angle1 * 10")
        binding.apply(angles, limits)
        assert angles.angle2 == 90.0

    def test_apply_without_change(self, binding, limits):
        angles = JointAngleState(20.0, 30.0, 30.0)
        binding.compile("angle2")
        assert not binding.apply(angles, limits)

    def test_compile_error_disables(self, binding):
        assert not binding.compile("angle1 +")
        assert not binding.enabled
        assert binding.error

    def test_runtime_error_disables(self, binding, limits):
        angles = JointAngleState(20.0, 30.0, 30.0)
        assert binding.compile("1 / (angle1 - 20)")
        assert not binding.apply(angles, limits)
        assert not binding.enabled
        assert "Division by zero" in binding.error
        assert angles.angle2 == 30.0

    def test_recompile_clears_error(self, binding):
        binding.compile("nope")
        assert binding.compile("angle1")
        assert binding.error is None

    def test_empty_text_clears(self, binding):
        binding.compile("angle1")
        assert not binding.compile("")
        assert not binding.enabled
        assert binding.error is None


class TestEvalNumberExpression:
    """SymPy-backed numeric fields."""

    @pytest.mark.parametrize(
        "text, expected",
        [("42", 42.0), ("90 - 5", 85.0), ("deg(pi / 4)", 45.0), ("2^3", 8.0), ("max(3, 7)", 7.0)],
    )
    def test_values(self, text, expected):
        val, err = eval_number_expression(text)
        assert err is None
        assert val == pytest.approx(expected)

    def test_named_values(self):
        assert eval_number_expression("x * 2", {"x": 3.0}) == (6.0, None)

    def test_unknown_symbol(self):
        val, err = eval_number_expression("foo + 1")
        assert val is None
        assert "Unknown symbol" in err

    def test_empty(self):
        assert eval_number_expression("  ") == (None, "Empty expression")

    def test_not_finite(self):
        val, err = eval_number_expression("1/0")
        assert val is None
        assert err
