"""Tests for the Symbolic value type and the CAS facade."""

from fractions import Fraction

import numpy as np
import pytest
from cas import CAS, Symbolic, func, num, var, variables
from expression import Number, Product, Sum, Symbol
from rational import Rational

x, y, z = variables("x", "y", "z")
f = func("f")


class TestConstruction:
    """num, var and func build canonical values."""

    def test_num(self):
        assert num(3).to_rational() == Rational(3)
        assert num(6, 4).to_rational() == Rational(3, 2)
        assert num(Fraction(1, 3)).to_rational() == Rational(1, 3)
        assert num(Rational(2, 5)).is_number()

    def test_var(self):
        assert var("x") == x
        assert repr(var("alpha")) == "alpha"
        assert not x.is_number()

    def test_symbolic_from_raw_tree(self):
        s = Symbolic(Sum([Symbol("x"), Symbol("x")]))
        assert s == 2 * x

    def test_to_rational_rejects_non_number(self):
        with pytest.raises(TypeError):
            x.to_rational()

    def test_func_rejects_bad_argument(self):
        with pytest.raises(TypeError):
            f("x")


class TestOperators:
    """Python operators map onto sum, product and power nodes."""

    def test_int_operands(self):
        assert 1 + x == x + 1
        assert 3 - x == -x + 3
        assert 2 * x == x * 2
        assert repr(1 / x) == "Power(x, -1)"

    def test_unsupported_operand(self):
        with pytest.raises(TypeError):
            x + 1.5
        with pytest.raises(TypeError):
            x * "y"
        with pytest.raises(TypeError):
            True + x

    def test_division(self):
        assert repr(x * y / z) == "Product(x, y, Power(z, -1))"
        assert num(1) / 3 == num(1, 3)

    def test_fraction_operand(self):
        assert x * Fraction(1, 2) == num(1, 2) * x


class TestComparison:
    def test_structural_equality(self):
        assert x + y == y + x
        assert x + y != x * y
        assert (x == "x") is False
        assert num(2) == 2
        assert num(1, 2) == Fraction(1, 2)

    def test_hash(self):
        assert len({x + y, y + x, x * y}) == 2

    def test_ordering(self):
        assert num(3) < x < x**2 < y
        assert y >= x
        assert x <= x

    def test_ordering_rejects_float(self):
        with pytest.raises(TypeError):
            x < 1.5


class TestRendering:
    def test_negation(self):
        assert str(-x) == "-x"
        assert str(x - y) == "x-y"
        assert str(3 - x) == "3-x"

    def test_parentheses(self):
        assert str((x + y) * z) == "(x+y)*z"
        assert str(x**y * 2) == "2*x^y"

    def test_repr(self):
        assert repr(2 * x + y) == "Sum(Product(2, x), y)"


class TestValueSemantics:
    def test_expr_is_a_copy(self):
        e = x + y
        e.expr.children.append(Symbol("z"))
        assert str(e) == "x+y"

    def test_copy(self):
        e = (x + y) ** 2
        c = e.copy()
        assert c == e
        assert c is not e

    def test_free_symbols(self):
        assert (x * y + f(z)).free_symbols() == {"x", "y", "z"}
        assert num(4).free_symbols() == set()


class TestSubstitution:
    def test_number(self):
        assert (x**2 + y).subs({x: 3}) == y + 9

    def test_expression_by_name(self):
        assert (x + y).subs({"y": x}) == 2 * x

    def test_all_symbols(self):
        assert (x * y + 1).subs({x: 2, y: num(1, 4)}) == num(3, 2)

    def test_to_undefined(self):
        assert str((1 / x).subs({x: 0})) == "<Undefined>"

    def test_rejects_float(self):
        with pytest.raises(TypeError):
            x.subs({x: 0.5})


class TestEvaluate:
    def test_scalar(self):
        assert (x**2 + 1).evaluate({"x": 2.0}) == pytest.approx(5.0)
        assert (x / y).evaluate({x: 1, y: 4}) == pytest.approx(0.25)

    def test_constant(self):
        assert num(1, 4).evaluate() == pytest.approx(0.25)

    def test_array(self):
        out = (x**2 + 1).evaluate({"x": np.array([0.0, 1.0, 2.0])})
        np.testing.assert_allclose(out, [1.0, 2.0, 5.0])

    def test_known_function(self):
        sin = func("sin")
        assert (sin(x) + 1).evaluate({x: 0.0}) == pytest.approx(1.0)

    def test_missing_variable(self):
        with pytest.raises(KeyError):
            (x + y).evaluate({"x": 1.0})

    def test_unknown_function(self):
        with pytest.raises(ValueError):
            f(x).evaluate({"x": 1.0})


def _twice(simplifier, fn):
    return simplifier.simplify_product(Product([Number(2), fn.args[0]]))


class TestFacade:
    """A CAS owns its own simplifier and rule registry."""

    def test_custom_rule(self):
        cas = CAS()
        cas.register_function_rule("twice", _twice)
        a = cas.var("a")
        twice = cas.func("twice")
        assert twice(a + a) == 4 * a
        assert twice(cas.num(3)) == 6

    def test_rules_are_per_instance(self):
        cas = CAS()
        cas.register_function_rule("twice", _twice)
        assert repr(func("twice")(x)) == "Function(twice)(x)"

    def test_simplify(self):
        cas = CAS()
        out = cas.simplify(Sum([Symbol("x"), Symbol("x")]))
        assert out == Product([Number(2), Symbol("x")])

    def test_differentiate(self):
        cas = CAS()
        a = cas.var("a")
        assert cas.differentiate(a**2, a) == 2 * a
        assert cas.differentiate(a**2, "b") == 0

    def test_substitute_and_evaluate(self):
        cas = CAS()
        a = cas.var("a")
        assert cas.substitute(a**2, {a: 3}) == 9
        assert cas.evaluate(a**2 + cas.num(1, 2), {"a": 3.0}) == pytest.approx(9.5)
